"""
Factory Boy factories for authentication models.

Usage:
    from authentication.tests.factories import UserFactory, GoogleUserFactory

    user = UserFactory()                      # local account, password "secret123"
    admin = UserFactory(role=User.Role.ADMIN)
    google_user = GoogleUserFactory()         # no username, unusable password
"""

import factory

from authentication.models import User

DEFAULT_PASSWORD = "secret123"


class UserFactory(factory.django.DjangoModelFactory):
    """
    Factory for local accounts.

    Examples:
        user = UserFactory(first_name="Ada", last_name="Lovelace")
        inactive = UserFactory(is_active=False)
    """

    class Meta:
        model = User
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    auth_provider = User.AuthProvider.LOCAL
    is_active = True

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Override create to use UserManager.create_user()."""
        password = kwargs.pop("password", DEFAULT_PASSWORD)
        return model_class.objects.create_user(
            username=kwargs.pop("username"), password=password, **kwargs
        )


class GoogleUserFactory(UserFactory):
    """Google-only account: google_id set, no username or password."""

    username = None
    email = factory.Sequence(lambda n: f"google{n}@gmail.com")
    google_id = factory.Sequence(lambda n: f"google-sub-{n}")
    auth_provider = User.AuthProvider.GOOGLE
    google_profile_picture = "https://lh3.googleusercontent.com/a/photo"
    profile_picture = factory.SelfAttribute("google_profile_picture")

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        kwargs.pop("password", None)
        kwargs.pop("username", None)
        return model_class.objects.create_user(google_id=kwargs.pop("google_id"), **kwargs)
