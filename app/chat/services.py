"""
Chat service layer.

Services:
    ConversationRouter: Canonical conversation per user pair, group names
    MessageDispatcher: Persist a message, then fan it out
    MessageService: History, read tracking and unread counts
    ConversationService: Conversation list for a user

Delivery model:
    The database write is the only durable step. Broadcasting happens
    after the transaction commits and is best-effort, at-most-once: a
    failure is logged and the message stays stored. Clients that missed a
    broadcast reload history on reconnect.

Usage:
    from chat.services import ConversationRouter, MessageDispatcher

    conversation = ConversationRouter.get_or_create(alice.id, bob.id)
    message = MessageDispatcher.send(conversation.id, alice.id, "Hello!")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, F, OuterRef, Q, Subquery
from django.utils import timezone

from chat.constants import MESSAGE_CONFIG, ServerEvent
from chat.models import Conversation, Message, MessageType
from chat.presence import get_presence_registry
from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.services import BaseService

if TYPE_CHECKING:
    from typing import Any

    from django.db.models import QuerySet

    from chat.presence import PresenceRegistry

User = get_user_model()
logger = logging.getLogger(__name__)


def message_preview(content: str) -> str:
    """First 50 characters of ``content``, with ``...`` when truncated."""
    limit = MESSAGE_CONFIG.PREVIEW_LENGTH
    return content[:limit] + ("..." if len(content) > limit else "")


def serialize_message(message: Message) -> dict[str, Any]:
    """Realtime payload for a message (JSON-safe)."""
    sender = message.sender
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "sender_info": {
            "id": sender.id,
            "first_name": sender.first_name,
            "last_name": sender.last_name,
            "username": sender.username,
            "profile_picture": sender.profile_picture,
        },
        "content": message.content,
        "message_type": message.message_type,
        "is_read": message.is_read,
        "created_at": message.created_at.isoformat(),
    }


class ConversationRouter(BaseService):
    """
    Maps a pair of users to their single conversation.

    Usage:
        conversation = ConversationRouter.get_or_create(request.user.id, other_id)
        group = ConversationRouter.group_name(conversation.id)
    """

    @staticmethod
    def group_name(conversation_id: int) -> str:
        return f"conversation_{conversation_id}"

    @staticmethod
    def user_group_name(user_id: int) -> str:
        return f"user_{user_id}"

    @classmethod
    def get_or_create(cls, user_a_id: int, user_b_id: int) -> Conversation:
        """
        Return the conversation for the pair, creating it on first contact.

        Argument order does not matter. A concurrent first contact from the
        other side loses on the unique pair constraint and re-reads the row
        the winner inserted.

        Raises:
            ValidationError: Both ids are the same user (SAME_USER)
            NotFoundError: The other user does not exist (USER_NOT_FOUND)
        """
        if user_a_id == user_b_id:
            raise ValidationError(
                "Cannot create a conversation with yourself",
                error_code="SAME_USER",
            )

        lookup = Conversation.pair_lookup(user_a_id, user_b_id)
        conversation = Conversation.objects.filter(**lookup).first()
        if conversation is not None:
            return conversation

        found = User.objects.filter(pk__in=[user_a_id, user_b_id], is_active=True).count()
        if found != 2:
            raise NotFoundError("User not found", error_code="USER_NOT_FOUND")

        try:
            with transaction.atomic():
                conversation = Conversation.objects.create(**lookup)
        except IntegrityError:
            cls.get_logger().info(
                f"Conversation {lookup['user_low_id']}/{lookup['user_high_id']} "
                "created concurrently; re-reading"
            )
            return Conversation.objects.get(**lookup)

        cls.get_logger().info(
            f"Created conversation {conversation.id} between users "
            f"{conversation.user_low_id} and {conversation.user_high_id}"
        )
        return conversation

    @classmethod
    def get_for_participant(cls, conversation_id: int, user_id: int) -> Conversation:
        """
        Load a conversation the user takes part in.

        Raises:
            NotFoundError: No such conversation (CONVERSATION_NOT_FOUND)
            PermissionDeniedError: User is not a participant (NOT_PARTICIPANT)
        """
        conversation = Conversation.objects.filter(pk=conversation_id).first()
        if conversation is None:
            raise NotFoundError(
                "Conversation not found",
                error_code="CONVERSATION_NOT_FOUND",
            )
        if not conversation.involves(user_id):
            raise PermissionDeniedError(
                "You are not a participant in this conversation",
                error_code="NOT_PARTICIPANT",
            )
        return conversation


class MessageDispatcher(BaseService):
    """
    Persist-then-broadcast message delivery.

    Steps for send():
        1. Validate content, conversation and participation
        2. Store the message and bump last_message_at (one transaction)
        3. After commit, send ``new-message`` to the conversation group
        4. If the receiver is online but not watching the conversation,
           send ``message-notification`` with a preview to their user group
    """

    @classmethod
    def send(
        cls,
        conversation_id: int,
        sender_id: int,
        content: str,
        message_type: str = MessageType.TEXT,
        presence: PresenceRegistry | None = None,
    ) -> Message:
        """
        Send a message.

        Raises:
            ValidationError: Empty or oversized content, unknown message type
            NotFoundError: Conversation does not exist
            PermissionDeniedError: Sender is not a participant
        """
        if content is not None and not isinstance(content, str):
            raise ValidationError("Message content must be text", error_code="INVALID_CONTENT")
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content cannot be empty", error_code="EMPTY_CONTENT")
        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            raise ValidationError(
                f"Message content cannot exceed {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
            )
        if message_type not in MessageType.values:
            raise ValidationError(
                f"message_type must be one of: {', '.join(MessageType.values)}",
                error_code="INVALID_MESSAGE_TYPE",
            )

        conversation = ConversationRouter.get_for_participant(conversation_id, sender_id)

        with cls.atomic():
            message = Message.objects.create(
                conversation=conversation,
                sender_id=sender_id,
                content=content,
                message_type=message_type,
            )
            Conversation.objects.filter(pk=conversation.pk).update(
                last_message_at=message.created_at,
                updated_at=timezone.now(),
            )
            conversation.last_message_at = message.created_at

            receiver_id = conversation.other_user_id(sender_id)
            transaction.on_commit(
                lambda: cls.broadcast(message, receiver_id, presence=presence)
            )

        cls.get_logger().info(
            f"User {sender_id} sent message {message.id} to conversation {conversation.id}"
        )
        return message

    @classmethod
    def broadcast(
        cls,
        message: Message,
        receiver_id: int,
        presence: PresenceRegistry | None = None,
    ) -> None:
        """
        Fan a stored message out to live sessions. Never raises.
        """
        presence = presence or get_presence_registry()
        payload = serialize_message(message)
        try:
            channel_layer = get_channel_layer()
            async_to_sync(channel_layer.group_send)(
                ConversationRouter.group_name(message.conversation_id),
                {"type": "chat.event", "event": ServerEvent.NEW_MESSAGE, "data": payload},
            )
            if presence.is_online(receiver_id) and not presence.is_watching(
                receiver_id, message.conversation_id
            ):
                async_to_sync(channel_layer.group_send)(
                    ConversationRouter.user_group_name(receiver_id),
                    {
                        "type": "chat.event",
                        "event": ServerEvent.MESSAGE_NOTIFICATION,
                        "data": {**payload, "preview": message_preview(message.content)},
                    },
                )
        except Exception:
            cls.get_logger().exception(
                f"Broadcast of message {message.id} failed; message is stored"
            )


class MessageService(BaseService):
    """
    Message history and read tracking.

    Methods:
        list_messages: Newest page of a conversation, oldest first
        mark_read: Flag the counterpart's messages as read
        unread_count: Unread messages for one conversation
        total_unread_count: Unread messages across all conversations
    """

    @classmethod
    def list_messages(
        cls,
        conversation_id: int,
        user_id: int,
        page: int = 1,
        limit: int = MESSAGE_CONFIG.DEFAULT_PAGE_SIZE,
    ) -> dict[str, Any]:
        """
        Page of messages, newest page first, each page in chronological order.

        Returns:
            {"messages": [Message, ...], "page": int, "has_more": bool}
        """
        conversation = ConversationRouter.get_for_participant(conversation_id, user_id)
        offset = (page - 1) * limit
        newest_first = list(
            conversation.messages.select_related("sender").order_by("-created_at", "-id")[
                offset : offset + limit + 1
            ]
        )
        has_more = len(newest_first) > limit
        messages = newest_first[:limit]
        messages.reverse()
        return {"messages": messages, "page": page, "has_more": has_more}

    @classmethod
    def mark_read(
        cls,
        conversation_id: int,
        reader_id: int,
        message_ids: list[int] | None = None,
    ) -> int:
        """
        Mark unread messages from the other participant as read.

        The reader's own messages are never touched. With ``message_ids``
        only those messages are considered.

        Returns:
            Number of messages marked read
        """
        conversation = ConversationRouter.get_for_participant(conversation_id, reader_id)
        queryset = conversation.messages.filter(is_read=False).exclude(sender_id=reader_id)
        if message_ids:
            queryset = queryset.filter(pk__in=message_ids)
        updated = queryset.update(is_read=True)

        cls.get_logger().debug(
            f"User {reader_id} marked {updated} messages read in conversation {conversation.id}"
        )
        return updated

    @classmethod
    def unread_count(cls, conversation: Conversation, user_id: int) -> int:
        return conversation.messages.filter(is_read=False).exclude(sender_id=user_id).count()

    @classmethod
    def total_unread_count(cls, user_id: int) -> int:
        return (
            Message.objects.filter(is_read=False)
            .filter(Q(conversation__user_low_id=user_id) | Q(conversation__user_high_id=user_id))
            .exclude(sender_id=user_id)
            .count()
        )


class ConversationService(BaseService):
    @classmethod
    def list_for_user(cls, user_id: int) -> QuerySet:
        """
        Conversations of ``user_id`` with ``unread`` and ``last_message_id``
        annotations, most recently active first.
        """
        last_message = Message.objects.filter(conversation=OuterRef("pk")).order_by(
            "-created_at", "-id"
        )
        return (
            Conversation.objects.involving(user_id)
            .select_related("user_low", "user_high")
            .annotate(
                unread=Count(
                    "messages",
                    filter=Q(messages__is_read=False) & ~Q(messages__sender_id=user_id),
                ),
                last_message_id=Subquery(last_message.values("id")[:1]),
            )
            .order_by(F("last_message_at").desc(nulls_last=True), "-created_at")
        )
