"""
Test configuration and fixtures for authentication tests.

This module provides:
- User fixtures for local, Google-only and admin accounts
- API client helpers for authenticated requests
- A mocked object storage service

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get("/api/v1/auth/me/")
        assert response.status_code == 200
"""

from unittest.mock import MagicMock, patch

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User
from authentication.tests.factories import GoogleUserFactory, UserFactory
from media.services import StoredFile


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Local account with username, e-mail and password "secret123"."""
    return UserFactory(username="ada", first_name="Ada", last_name="Lovelace")


@pytest.fixture
def other_user(db):
    return UserFactory(username="grace", first_name="Grace", last_name="Hopper")


@pytest.fixture
def google_user(db):
    """Google-only account (no username, unusable password)."""
    return GoogleUserFactory(first_name="Alan", last_name="Turing")


@pytest.fixture
def admin_user(db):
    return UserFactory(username="admin", role=User.Role.ADMIN)


@pytest.fixture
def deactivated_user(db):
    return UserFactory(username="gone", is_active=False)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client for public endpoints."""
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """API client authenticated with a JWT for the default user fixture."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def authenticated_client_factory(db):
    """
    Factory to create authenticated clients for any user.

    Usage:
        def test_example(authenticated_client_factory, google_user):
            client = authenticated_client_factory(google_user)
    """

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


# =============================================================================
# Mock Fixtures for External Services
# =============================================================================


@pytest.fixture
def mock_storage():
    """
    Replace the object storage service used by authentication services.

    upload() returns a StoredFile under the uploading user's prefix.
    """
    storage = MagicMock()

    def _upload(file, user_id=None, key=None):
        key = key or f"users/{user_id}/1700000000000-abcd1234-{file.name}"
        return StoredFile(
            key=key,
            url=f"http://localhost:9000/uploads/{key}",
            original_name=file.name,
            size=file.size,
            content_type=file.content_type,
        )

    storage.upload.side_effect = _upload
    storage.delete_best_effort.return_value = True
    with patch("authentication.services.get_storage_service", return_value=storage):
        yield storage
