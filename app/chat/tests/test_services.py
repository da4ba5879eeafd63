"""
Tests for chat services: routing, dispatch and read tracking.
"""

import pytest
from freezegun import freeze_time

from authentication.tests.factories import UserFactory
from chat.models import Conversation, Message
from chat.presence import PresenceRegistry
from chat.services import (
    ConversationRouter,
    ConversationService,
    MessageDispatcher,
    MessageService,
    message_preview,
)
from chat.tests.factories import ConversationFactory, MessageFactory
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError


def _sent_events(channel_layer):
    """[(group, event_name, data), ...] in send order."""
    return [
        (call.args[0], call.args[1]["event"], call.args[1]["data"])
        for call in channel_layer.group_send.call_args_list
    ]


@pytest.mark.django_db
class TestConversationRouter:
    def test_get_or_create_is_symmetric(self, alice, bob):
        """
        (A, B) and (B, A) resolve to the same conversation.

        Why it matters: Each pair has exactly one conversation.
        """
        first = ConversationRouter.get_or_create(alice.id, bob.id)
        second = ConversationRouter.get_or_create(bob.id, alice.id)

        assert first.id == second.id
        assert first.user_low_id == min(alice.id, bob.id)
        assert Conversation.objects.count() == 1

    def test_same_user_is_rejected(self, alice):
        """
        A conversation with yourself is a validation error.

        Why it matters: The pair would violate the ordering constraint.
        """
        with pytest.raises(ValidationError) as exc_info:
            ConversationRouter.get_or_create(alice.id, alice.id)

        assert exc_info.value.error_code == "SAME_USER"

    def test_unknown_user(self, alice):
        """
        Unknown counterparts are a 404.

        Why it matters: Conversations cannot reference missing users.
        """
        with pytest.raises(NotFoundError):
            ConversationRouter.get_or_create(alice.id, 987654)

    def test_concurrent_insert_is_reread(self, alice, bob, mocker):
        """
        Losing the insert race returns the winner's row.

        Why it matters: Two first messages at once must not fail.
        """
        existing = ConversationFactory(users=(alice, bob))
        missing = mocker.Mock()
        missing.first.return_value = None
        mocker.patch.object(Conversation.objects, "filter", return_value=missing)

        conversation = ConversationRouter.get_or_create(alice.id, bob.id)

        assert conversation.id == existing.id

    def test_group_names(self):
        """
        Group names are stable strings.

        Why it matters: Consumers and services must address the same groups.
        """
        assert ConversationRouter.group_name(4) == "conversation_4"
        assert ConversationRouter.user_group_name(9) == "user_9"

    def test_get_for_participant(self, conversation, carol):
        """
        Outsiders get PermissionDenied, unknown ids NotFound.

        Why it matters: Conversation contents are private to the pair.
        """
        with pytest.raises(PermissionDeniedError):
            ConversationRouter.get_for_participant(conversation.id, carol.id)
        with pytest.raises(NotFoundError):
            ConversationRouter.get_for_participant(424242, carol.id)


@pytest.mark.django_db
class TestMessageDispatcher:
    def test_send_persists_and_updates_last_activity(
        self, conversation, alice, channel_layer, django_capture_on_commit_callbacks
    ):
        """
        The message is stored and last_message_at is bumped.

        Why it matters: The conversation list is ordered by last activity.
        """
        with django_capture_on_commit_callbacks(execute=True):
            message = MessageDispatcher.send(conversation.id, alice.id, "  Hello Bob  ")

        conversation.refresh_from_db()
        assert message.content == "Hello Bob"
        assert message.is_read is False
        assert conversation.last_message_at == message.created_at

    def test_broadcasts_to_conversation_group(
        self, conversation, alice, bob, channel_layer, django_capture_on_commit_callbacks
    ):
        """
        new-message goes to the conversation group; offline receivers get nothing else.

        Why it matters: Offline users read history on reconnect instead.
        """
        with django_capture_on_commit_callbacks(execute=True):
            message = MessageDispatcher.send(
                conversation.id, alice.id, "Hello", presence=PresenceRegistry()
            )

        events = _sent_events(channel_layer)
        assert len(events) == 1
        group, event, data = events[0]
        assert group == f"conversation_{conversation.id}"
        assert event == "new-message"
        assert data["id"] == message.id
        assert data["sender_id"] == alice.id
        assert data["sender_info"]["first_name"] == "Alice"

    def test_notifies_online_receiver_not_watching(
        self, conversation, alice, bob, channel_layer, django_capture_on_commit_callbacks
    ):
        """
        An online receiver outside the conversation gets a preview notification.

        Why it matters: Users see new messages from other screens.
        """
        presence = PresenceRegistry()
        presence.set_online(bob.id, "bob-chan")
        content = "x" * 60

        with django_capture_on_commit_callbacks(execute=True):
            MessageDispatcher.send(conversation.id, alice.id, content, presence=presence)

        events = _sent_events(channel_layer)
        assert [e[1] for e in events] == ["new-message", "message-notification"]
        assert events[1][0] == f"user_{bob.id}"
        assert events[1][2]["preview"] == "x" * 50 + "..."

    def test_no_notification_when_receiver_watching(
        self, conversation, alice, bob, channel_layer, django_capture_on_commit_callbacks
    ):
        """
        A receiver already in the conversation gets only new-message.

        Why it matters: No duplicate delivery of the same message.
        """
        presence = PresenceRegistry()
        presence.set_online(bob.id, "bob-chan")
        presence.join_conversation(bob.id, conversation.id)

        with django_capture_on_commit_callbacks(execute=True):
            MessageDispatcher.send(conversation.id, alice.id, "Hi", presence=presence)

        assert [e[1] for e in _sent_events(channel_layer)] == ["new-message"]

    def test_broadcast_failure_keeps_message(
        self, conversation, alice, channel_layer, django_capture_on_commit_callbacks
    ):
        """
        A failing channel layer is logged; the message stays stored.

        Why it matters: Broadcast is best-effort, the database write is not.
        """
        channel_layer.group_send.side_effect = OSError("redis down")

        with django_capture_on_commit_callbacks(execute=True):
            message = MessageDispatcher.send(conversation.id, alice.id, "Hi")

        assert Message.objects.filter(pk=message.pk).exists()

    def test_no_broadcast_before_commit(self, conversation, alice, channel_layer):
        """
        Nothing is sent while the transaction is open.

        Why it matters: Clients never see a message that might roll back.
        """
        MessageDispatcher.send(conversation.id, alice.id, "Hi")

        channel_layer.group_send.assert_not_called()

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_empty_content_rejected(self, conversation, alice, content):
        """
        Blank messages are rejected before anything is stored.

        Why it matters: Empty bubbles are noise.
        """
        with pytest.raises(ValidationError):
            MessageDispatcher.send(conversation.id, alice.id, content)

        assert not Message.objects.exists()

    @pytest.mark.parametrize("content", [123, ["Hi"], {"text": "Hi"}])
    def test_non_text_content_rejected(self, conversation, alice, content):
        """
        Why it matters: Socket frames carry arbitrary JSON; only strings are messages.
        """
        with pytest.raises(ValidationError) as exc_info:
            MessageDispatcher.send(conversation.id, alice.id, content)

        assert exc_info.value.error_code == "INVALID_CONTENT"
        assert not Message.objects.exists()

    def test_non_participant_forbidden(self, conversation, carol):
        """
        Only the two participants can send.

        Why it matters: Conversations are private.
        """
        with pytest.raises(PermissionDeniedError):
            MessageDispatcher.send(conversation.id, carol.id, "Hi")

    def test_unknown_message_type(self, conversation, alice):
        """
        message_type must be text, image or file.

        Why it matters: Clients render by type.
        """
        with pytest.raises(ValidationError):
            MessageDispatcher.send(conversation.id, alice.id, "Hi", message_type="video")

    def test_message_preview(self):
        """
        Previews keep 50 characters and add an ellipsis only when cut.

        Why it matters: Notification text stays short.
        """
        assert message_preview("short") == "short"
        assert message_preview("y" * 50) == "y" * 50
        assert message_preview("y" * 51) == "y" * 50 + "..."


@pytest.mark.django_db
class TestMessageService:
    def test_mark_read_skips_own_messages(self, conversation, alice, bob):
        """
        A reader never marks their own messages read.

        Why it matters: Read receipts describe the counterpart.
        """
        own = MessageFactory(conversation=conversation, sender=alice)
        incoming = MessageFactory(conversation=conversation, sender=bob)

        count = MessageService.mark_read(conversation.id, alice.id)

        own.refresh_from_db()
        incoming.refresh_from_db()
        assert count == 1
        assert own.is_read is False
        assert incoming.is_read is True

    def test_mark_read_subset(self, conversation, alice, bob):
        """
        message_ids limits which messages are marked.

        Why it matters: Clients mark only what was on screen.
        """
        first = MessageFactory(conversation=conversation, sender=bob)
        second = MessageFactory(conversation=conversation, sender=bob)

        count = MessageService.mark_read(conversation.id, alice.id, [first.id])

        second.refresh_from_db()
        assert count == 1
        assert second.is_read is False

    def test_list_messages_pages_newest_first(self, conversation, alice):
        """
        Page 1 holds the newest messages in chronological order.

        Why it matters: Chat windows open at the bottom.
        """
        messages = [MessageFactory(conversation=conversation, sender=alice) for _ in range(5)]

        page_one = MessageService.list_messages(conversation.id, alice.id, page=1, limit=2)
        page_three = MessageService.list_messages(conversation.id, alice.id, page=3, limit=2)

        assert page_one["messages"] == messages[3:]
        assert page_one["has_more"] is True
        assert page_three["messages"] == messages[:1]
        assert page_three["has_more"] is False

    def test_unread_counts(self, conversation, alice, bob, carol):
        """
        Unread counts only include the other side's unread messages.

        Why it matters: Badge numbers must match what the user has not seen.
        """
        other = ConversationFactory(users=(alice, carol))
        MessageFactory(conversation=conversation, sender=bob)
        MessageFactory(conversation=conversation, sender=bob, is_read=True)
        MessageFactory(conversation=conversation, sender=alice)
        MessageFactory(conversation=other, sender=carol)

        assert MessageService.unread_count(conversation, alice.id) == 1
        assert MessageService.total_unread_count(alice.id) == 2
        assert MessageService.total_unread_count(bob.id) == 1


@pytest.mark.django_db
class TestConversationService:
    def test_list_orders_by_last_activity(self, alice, bob, carol, channel_layer):
        """
        Most recently active conversations come first; unread is annotated.

        Why it matters: The inbox shows the latest chat on top.
        """
        quiet = ConversationFactory(users=(alice, carol))
        busy = ConversationFactory(users=(alice, bob))
        with freeze_time("2026-03-01 10:00:00"):
            MessageDispatcher.send(quiet.id, carol.id, "old")
        with freeze_time("2026-03-01 11:00:00"):
            latest = MessageDispatcher.send(busy.id, bob.id, "new")
        ConversationFactory(users=(alice, UserFactory()))

        conversations = list(ConversationService.list_for_user(alice.id))

        assert conversations[0] == busy
        assert conversations[1] == quiet
        assert conversations[0].unread == 1
        assert conversations[0].last_message_id == latest.id
        assert conversations[2].last_message_id is None

