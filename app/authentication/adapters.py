"""
Custom adapters for django-allauth.

Only the Google flow goes through allauth; local accounts register and
log in through authentication.views. The social adapter applies the
account matching rules:

    - an existing Google account signs in and has its picture synced
    - an existing account with the same e-mail is linked (allauth
      auto-connect) and gets google_id and the picture
    - otherwise a Google-only user is created with fallback names

Related files:
    - services.py: GoogleIdentityService holds the sync rules
    - settings.py: ACCOUNT_ADAPTER and SOCIALACCOUNT_ADAPTER
"""

import logging

from allauth.account.adapter import DefaultAccountAdapter
from allauth.socialaccount.adapter import DefaultSocialAccountAdapter

from authentication.services import GoogleIdentityService

logger = logging.getLogger(__name__)


class CustomAccountAdapter(DefaultAccountAdapter):
    """
    Account adapter with signup closed.

    Local registration is handled by RegisterView, so allauth's own
    signup forms are never used.
    """

    def is_open_for_signup(self, request):
        return False


class CustomSocialAccountAdapter(DefaultSocialAccountAdapter):
    """Social adapter for Google sign-in."""

    def is_open_for_signup(self, request, sociallogin):
        return True

    def populate_user(self, request, sociallogin, data):
        """
        Fill a new user from the Google profile.

        Returns:
            User: The populated (unsaved) user
        """
        user = super().populate_user(request, sociallogin, data)
        extra_data = sociallogin.account.extra_data or {}

        first_name, last_name = GoogleIdentityService.names_from_profile(
            {**extra_data, **data}
        )
        user.first_name = first_name
        user.last_name = last_name
        user.username = None
        user.email = user.email or None
        user.auth_provider = user.AuthProvider.GOOGLE
        GoogleIdentityService.apply_google_identity(
            user,
            google_id=sociallogin.account.uid,
            picture=extra_data.get("picture"),
            commit=False,
        )

        logger.debug(f"Google sign-in user populated for uid {sociallogin.account.uid}")
        return user

    def pre_social_login(self, request, sociallogin):
        """Sync google_id and picture onto an account that already exists."""
        super().pre_social_login(request, sociallogin)

        user = sociallogin.user
        if sociallogin.account.provider != "google" or not user.pk:
            return

        GoogleIdentityService.apply_google_identity(
            user,
            google_id=sociallogin.account.uid,
            picture=(sociallogin.account.extra_data or {}).get("picture"),
        )
