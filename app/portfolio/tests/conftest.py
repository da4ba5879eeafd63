"""
Fixtures for portfolio tests.
"""

from unittest.mock import MagicMock, patch

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from media.services import StoredFile


@pytest.fixture
def user(db):
    return UserFactory(first_name="Ada", last_name="Lovelace")


@pytest.fixture
def other_user(db):
    return UserFactory(first_name="Grace", last_name="Hopper")


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")
    return client


@pytest.fixture
def mock_storage():
    """Object storage double; generate_key and upload behave like the real service."""
    storage = MagicMock()
    storage.generate_key.side_effect = lambda name, user_id=None: f"users/{user_id}/1700000000000-abcd1234-{name}"
    storage.upload.side_effect = lambda file, user_id=None, key=None: StoredFile(
        key=key,
        url=f"http://localhost:9000/uploads/{key}",
        original_name=file.name,
        size=file.size,
        content_type=file.content_type,
    )
    with patch("portfolio.services.get_storage_service", return_value=storage):
        yield storage
