"""
Authentication models.

User is the single identity record. An account is either local
(username + password hash) or federated (Google ``google_id``), and may be
both once a local account signs in with Google under the same e-mail.

Related files:
    - managers.py: UserManager enforcing the credential invariant
    - services.py: Registration, login, profile and Google identity logic
    - adapters.py: allauth hooks for the Google flow
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.db.models import Q

from authentication.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin):
    """
    Portfolio user.

    Fields:
        first_name / last_name: Display name parts (required)
        username: Local login name, unique, NULL for Google-only accounts
        email: Optional, unique when present
        google_id: Google subject id, unique when present
        auth_provider: How the account was created (local or google)
        role: user or admin (admin console access)
        is_active: Deactivated accounts cannot log in
        profile_picture: URL currently shown as the avatar
        profile_picture_key: Object storage key of an uploaded avatar
        google_profile_picture: Last picture URL reported by Google

    Invariant:
        username (with a password) or google_id is set. Enforced by
        UserManager.create_user and by a database check constraint.
    """

    class AuthProvider(models.TextChoices):
        LOCAL = "local", "Local"
        GOOGLE = "google", "Google"

    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    username = models.CharField(
        max_length=50,
        unique=True,
        null=True,
        blank=True,
        help_text="Local login name; empty for Google-only accounts",
    )
    email = models.EmailField(unique=True, null=True, blank=True)
    google_id = models.CharField(max_length=255, unique=True, null=True, blank=True)
    auth_provider = models.CharField(
        max_length=20,
        choices=AuthProvider.choices,
        default=AuthProvider.LOCAL,
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
    )

    profile_picture = models.URLField(max_length=500, null=True, blank=True)
    profile_picture_key = models.CharField(max_length=500, null=True, blank=True)
    google_profile_picture = models.URLField(max_length=500, null=True, blank=True)

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the Django admin site.",
    )

    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = ["first_name", "last_name"]

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]
        constraints = [
            models.CheckConstraint(
                condition=Q(username__isnull=False) | Q(google_id__isnull=False),
                name="user_has_local_or_google_identity",
            ),
        ]

    def __str__(self):
        return self.username or self.email or f"user-{self.pk}"

    def get_full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def get_short_name(self):
        return self.first_name

    @property
    def is_admin(self) -> bool:
        """Admin console access: admin role on an active account."""
        return self.role == self.Role.ADMIN and self.is_active

    @property
    def has_custom_picture(self) -> bool:
        return bool(self.profile_picture_key)
