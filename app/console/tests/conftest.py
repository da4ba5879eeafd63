"""
Fixtures for admin console tests.
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.models import User
from authentication.tests.factories import UserFactory


def _client_for(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")
    return client


@pytest.fixture
def admin_user(db):
    return UserFactory(first_name="Root", last_name="Admin", role=User.Role.ADMIN)


@pytest.fixture
def member(db):
    return UserFactory(first_name="Ada", last_name="Lovelace", username="ada")


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def member_client(member):
    return _client_for(member)
