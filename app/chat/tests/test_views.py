"""
Tests for chat API views.
"""

import pytest
from rest_framework import status
from rest_framework.test import APIClient

from chat.models import Conversation, Message
from chat.tests.factories import MessageFactory

CONVERSATIONS_URL = "/api/v1/chat/conversations/"
UNREAD_URL = "/api/v1/chat/unread-count/"


@pytest.mark.django_db
class TestConversationEndpoints:
    def test_requires_authentication(self):
        """
        Anonymous requests are rejected.

        Why it matters: Messages are private.
        """
        assert APIClient().get(CONVERSATIONS_URL).status_code == status.HTTP_401_UNAUTHORIZED

    def test_create_is_idempotent(self, alice_client, bob_client, alice, bob):
        """
        Either side opening the conversation gets the same id.

        Why it matters: One conversation per pair.
        """
        first = alice_client.post(CONVERSATIONS_URL, {"user_id": bob.id}, format="json")
        second = bob_client.post(CONVERSATIONS_URL, {"user_id": alice.id}, format="json")

        assert first.status_code == status.HTTP_200_OK
        assert first.data["id"] == second.data["id"]
        assert first.data["other_user"]["id"] == bob.id
        assert second.data["other_user"]["id"] == alice.id
        assert Conversation.objects.count() == 1

    def test_create_with_self(self, alice_client, alice):
        """
        Starting a conversation with yourself is a 400.

        Why it matters: The error comes back in the standard JSON shape.
        """
        response = alice_client.post(CONVERSATIONS_URL, {"user_id": alice.id}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["error_code"] == "SAME_USER"

    def test_list_with_last_message_and_unread(self, alice_client, conversation, alice, bob):
        """
        The list carries the other user, last message and unread count.

        Why it matters: The inbox renders from this single call.
        """
        MessageFactory(conversation=conversation, sender=bob, content="first")
        last = MessageFactory(conversation=conversation, sender=bob, content="second")
        Conversation.objects.filter(pk=conversation.pk).update(last_message_at=last.created_at)

        response = alice_client.get(CONVERSATIONS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        item = response.data[0]
        assert item["other_user"]["id"] == bob.id
        assert item["last_message"]["content"] == "second"
        assert item["unread_count"] == 2


@pytest.mark.django_db
class TestMessageEndpoints:
    def test_send_message(self, alice_client, conversation, channel_layer):
        """
        POST stores the message and returns it with 201.

        Why it matters: HTTP is the fallback when the socket is down.
        """
        response = alice_client.post(
            f"{CONVERSATIONS_URL}{conversation.id}/messages/",
            {"content": "Hello over HTTP"},
            format="json",
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["content"] == "Hello over HTTP"
        assert response.data["message_type"] == "text"
        assert Message.objects.filter(conversation=conversation).count() == 1

    def test_outsider_cannot_read_history(self, carol_client, conversation):
        """
        Non-participants get 403.

        Why it matters: History is private to the pair.
        """
        response = carol_client.get(f"{CONVERSATIONS_URL}{conversation.id}/messages/")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data["error_code"] == "NOT_PARTICIPANT"

    def test_unknown_conversation(self, alice_client):
        """
        Unknown conversations are 404.

        Why it matters: Stale links fail clearly.
        """
        response = alice_client.get(f"{CONVERSATIONS_URL}999999/messages/")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_history_page(self, alice_client, conversation, alice):
        """
        limit and has_more page through history.

        Why it matters: Long conversations load incrementally.
        """
        for index in range(3):
            MessageFactory(conversation=conversation, sender=alice, content=f"m{index}")

        response = alice_client.get(
            f"{CONVERSATIONS_URL}{conversation.id}/messages/", {"limit": 2}
        )

        assert [m["content"] for m in response.data["messages"]] == ["m1", "m2"]
        assert response.data["has_more"] is True
        assert response.data["page"] == 1

    def test_mark_read_and_unread_count(self, alice_client, conversation, bob):
        """
        Marking read drops the unread count to zero.

        Why it matters: Badges clear after reading.
        """
        MessageFactory(conversation=conversation, sender=bob)
        MessageFactory(conversation=conversation, sender=bob)
        assert alice_client.get(UNREAD_URL).data == {"unread_count": 2}

        response = alice_client.post(f"{CONVERSATIONS_URL}{conversation.id}/read/", {}, format="json")

        assert response.data == {"success": True, "count": 2}
        assert alice_client.get(UNREAD_URL).data == {"unread_count": 0}
