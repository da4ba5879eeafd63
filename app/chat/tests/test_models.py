"""
Tests for chat model constraints.
"""

import pytest
from django.db import IntegrityError, transaction

from chat.models import Conversation, Message
from chat.tests.factories import ConversationFactory, MessageFactory


@pytest.mark.django_db
class TestConversationModel:
    def test_pair_is_unique(self, alice, bob):
        """
        Only one conversation per unordered pair.

        Why it matters: Concurrent first contact cannot split a conversation.
        """
        ConversationFactory(users=(alice, bob))

        with pytest.raises(IntegrityError), transaction.atomic():
            Conversation.objects.create(**Conversation.pair_lookup(bob.id, alice.id))

    def test_involving(self, alice, bob, carol):
        """
        involving() finds conversations on either side.

        Why it matters: The list endpoint relies on it.
        """
        first = ConversationFactory(users=(alice, bob))
        second = ConversationFactory(users=(carol, alice))
        ConversationFactory(users=(bob, carol))

        assert set(Conversation.objects.involving(alice.id)) == {first, second}


@pytest.mark.django_db
class TestMessageModel:
    def test_defaults(self, conversation, alice):
        """
        New messages are unread text.

        Why it matters: Unread counts start from is_read=False.
        """
        message = Message.objects.create(conversation=conversation, sender=alice, content="Hi")

        assert message.is_read is False
        assert message.message_type == "text"
        assert message.created_at is not None

    def test_messages_are_chronological(self, conversation):
        """
        Default ordering is oldest first.

        Why it matters: History renders top to bottom.
        """
        first = MessageFactory(conversation=conversation)
        second = MessageFactory(conversation=conversation)

        assert list(conversation.messages.all()) == [first, second]
