"""
Tests for the allauth adapters.

The allauth infrastructure (request, sociallogin objects) is mocked; the
User model and GoogleIdentityService run for real.
"""

from unittest.mock import MagicMock

import pytest

from authentication.adapters import CustomAccountAdapter, CustomSocialAccountAdapter
from authentication.models import User


def _sociallogin(user, uid="google-sub-1", extra_data=None, provider="google"):
    sociallogin = MagicMock()
    sociallogin.user = user
    sociallogin.account.uid = uid
    sociallogin.account.provider = provider
    sociallogin.account.extra_data = extra_data or {}
    return sociallogin


class TestCustomAccountAdapter:
    def test_local_signup_through_allauth_is_closed(self):
        """
        allauth's own signup is disabled.

        Why it matters: Local registration goes through RegisterView only,
        which enforces the username rules.
        """
        assert CustomAccountAdapter().is_open_for_signup(MagicMock()) is False


@pytest.mark.django_db
class TestCustomSocialAccountAdapter:
    @pytest.fixture
    def adapter(self):
        return CustomSocialAccountAdapter()

    def test_populate_user_builds_google_only_account(self, adapter):
        """
        A new Google user gets names, google_id, picture and no username.

        Why it matters: The account must satisfy the identity rule without a
        local credential.
        """
        extra_data = {
            "sub": "google-sub-1",
            "email": "turing@gmail.com",
            "given_name": "Alan",
            "family_name": "Turing",
            "picture": "https://lh3/photo.jpg",
        }
        sociallogin = _sociallogin(User(), extra_data=extra_data)

        user = adapter.populate_user(MagicMock(), sociallogin, {"email": "turing@gmail.com"})

        assert user.first_name == "Alan"
        assert user.last_name == "Turing"
        assert user.username is None
        assert user.google_id == "google-sub-1"
        assert user.auth_provider == User.AuthProvider.GOOGLE
        assert user.profile_picture == "https://lh3/photo.jpg"

    def test_populate_user_uses_fallback_names(self, adapter):
        """
        Missing Google names become "Unknown User".

        Why it matters: first_name and last_name cannot be empty.
        """
        sociallogin = _sociallogin(User(), extra_data={"email": "x@gmail.com"})

        user = adapter.populate_user(MagicMock(), sociallogin, {})

        assert (user.first_name, user.last_name) == ("Unknown", "User")

    def test_pre_social_login_links_existing_local_account(self, adapter, user):
        """
        An existing account matched by e-mail gets google_id and picture.

        Why it matters: Local users who later sign in with Google keep one
        account.
        """
        sociallogin = _sociallogin(
            user, uid="google-sub-9", extra_data={"picture": "https://lh3/p.jpg"}
        )

        adapter.pre_social_login(MagicMock(), sociallogin)

        user.refresh_from_db()
        assert user.google_id == "google-sub-9"
        assert user.google_profile_picture == "https://lh3/p.jpg"
        assert user.username == "ada"

    def test_pre_social_login_ignores_unsaved_user(self, adapter):
        """
        New (unsaved) users are left for populate_user.

        Why it matters: Saving here would create a half-built account.
        """
        new_user = User()
        sociallogin = _sociallogin(new_user, extra_data={"picture": "https://lh3/p.jpg"})

        adapter.pre_social_login(MagicMock(), sociallogin)

        assert new_user.pk is None
        assert new_user.google_id is None
