"""
Fixtures for chat tests.

Usage:
    def test_example(conversation, alice_client):
        response = alice_client.get(f"/api/v1/chat/conversations/{conversation.id}/messages/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.tests.factories import ConversationFactory


@pytest.fixture
def alice(db):
    return UserFactory(username="alice", first_name="Alice", last_name="Liddell")


@pytest.fixture
def bob(db):
    return UserFactory(username="bob", first_name="Bob", last_name="Builder")


@pytest.fixture
def carol(db):
    return UserFactory(username="carol", first_name="Carol", last_name="Danvers")


@pytest.fixture
def conversation(alice, bob):
    return ConversationFactory(users=(alice, bob))


def _client_for(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(user).access_token}")
    return client


@pytest.fixture
def alice_client(alice):
    return _client_for(alice)


@pytest.fixture
def bob_client(bob):
    return _client_for(bob)


@pytest.fixture
def carol_client(carol):
    return _client_for(carol)


@pytest.fixture
def channel_layer(mocker):
    """
    Replace the channel layer used by MessageDispatcher with a mock.

    Sent events are available as ``channel_layer.group_send.call_args_list``.
    """
    layer = mocker.Mock()
    layer.group_send = mocker.AsyncMock()
    mocker.patch("chat.services.get_channel_layer", return_value=layer)
    return layer
