"""
Chat models.

Conversation: Direct conversation between exactly two users, stored as a
normalized pair (see core.models.UserPairModel)
Message: Message within a conversation; immutable except for ``is_read``

Related files:
    - services.py: ConversationRouter, MessageDispatcher, MessageService
    - consumers.py: Realtime delivery
"""

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.models import BaseModel, UserPairModel


class MessageType(models.TextChoices):
    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    FILE = "file", "File"


class ConversationQuerySet(models.QuerySet):
    def involving(self, user_id: int):
        return self.filter(Q(user_low_id=user_id) | Q(user_high_id=user_id))


class Conversation(UserPairModel):
    """
    Direct conversation between two users.

    One row per unordered pair, enforced by the unique constraint inherited
    from UserPairModel.

    Fields:
        last_message_at: Time of the most recent message (orders the list)
    """

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Timestamp of the most recent message",
    )

    objects = ConversationQuerySet.as_manager()

    def __str__(self):
        return f"Conversation({self.user_low_id} <-> {self.user_high_id})"


class Message(models.Model):
    """
    A message within a conversation.

    Fields:
        conversation: Conversation this message belongs to
        sender: User who sent the message
        content: Message text
        message_type: text, image or file
        is_read: Set once the counterpart reads it; never unset
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )
    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="sent_messages",
        help_text="User who sent this message",
    )
    content = models.TextField(help_text="Message text")
    message_type = models.CharField(
        max_length=10,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        help_text="Type of message",
    )
    is_read = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether the receiver has read this message",
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="Timestamp when the message was sent",
    )

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["conversation", "-created_at"],
                name="message_conversation_recent_idx",
            ),
        ]

    def __str__(self):
        return f"Message(id={self.pk}, conversation={self.conversation_id})"
