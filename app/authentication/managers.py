"""
Custom user manager.

A user needs either a local credential (username + password) or a Google
identity. create_user refuses anything else before touching the database.
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Manager for the User model.

    Usage:
        # Local account
        user = User.objects.create_user(
            username="ada", password="secret1", first_name="Ada", last_name="Lovelace"
        )

        # Google account (no username, unusable password)
        user = User.objects.create_user(
            google_id="1043...", email="ada@example.com",
            first_name="Ada", last_name="Lovelace",
            auth_provider=User.AuthProvider.GOOGLE,
        )
    """

    use_in_migrations = True

    def create_user(self, username=None, password=None, google_id=None, **extra_fields):
        """
        Create and save a user.

        Raises:
            ValueError: If neither username+password nor google_id is given
        """
        username = username or None
        google_id = google_id or None
        if not ((username and password) or google_id):
            raise ValueError(
                "A user needs a username and password or a Google identity"
            )

        email = extra_fields.pop("email", None)
        if email:
            email = self.normalize_email(email)

        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)

        user = self.model(
            username=username,
            google_id=google_id,
            email=email or None,
            **extra_fields,
        )
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        """Create an admin who can also use the Django admin site."""
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "admin")

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(username, password, **extra_fields)
