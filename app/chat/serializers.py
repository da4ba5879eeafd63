"""
Serializers for chat API.

Serializer Hierarchy:
    ConversationSerializer: Conversation from the caller's point of view
    ConversationCreateSerializer: Start (or reopen) a conversation
    MessageSerializer: Message with sender info
    MessageCreateSerializer: Send a message over HTTP
    MarkReadSerializer: Optional subset of message ids
"""

from rest_framework import serializers

from authentication.serializers import PublicUserSerializer
from chat.constants import MESSAGE_CONFIG
from chat.models import Conversation, Message, MessageType


class MessageSerializer(serializers.ModelSerializer):
    sender = PublicUserSerializer(read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "conversation_id",
            "sender_id",
            "sender",
            "content",
            "message_type",
            "is_read",
            "created_at",
        ]
        read_only_fields = fields


class ConversationSerializer(serializers.ModelSerializer):
    """
    Conversation as seen by one participant.

    Context:
        user_id: The requesting user (required)
        last_messages: {message_id: Message} for the list view (optional)
    """

    other_user = serializers.SerializerMethodField()
    last_message = serializers.SerializerMethodField()
    unread_count = serializers.SerializerMethodField()

    class Meta:
        model = Conversation
        fields = [
            "id",
            "other_user",
            "last_message",
            "unread_count",
            "last_message_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_other_user(self, obj):
        user_id = self.context["user_id"]
        other = obj.user_high if obj.user_low_id == user_id else obj.user_low
        return PublicUserSerializer(other).data

    def get_last_message(self, obj):
        last_messages = self.context.get("last_messages", {})
        message = last_messages.get(getattr(obj, "last_message_id", None))
        return MessageSerializer(message).data if message else None

    def get_unread_count(self, obj):
        return getattr(obj, "unread", 0)


class ConversationCreateSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(min_value=1)


class MessageCreateSerializer(serializers.Serializer):
    content = serializers.CharField(max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH)
    message_type = serializers.ChoiceField(
        choices=MessageType.choices,
        default=MessageType.TEXT,
    )


class MessagePageSerializer(serializers.Serializer):
    messages = MessageSerializer(many=True)
    page = serializers.IntegerField()
    has_more = serializers.BooleanField()


class MarkReadSerializer(serializers.Serializer):
    message_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        required=False,
        allow_empty=True,
    )


class MarkReadResponseSerializer(serializers.Serializer):
    success = serializers.BooleanField()
    count = serializers.IntegerField()


class UnreadCountSerializer(serializers.Serializer):
    unread_count = serializers.IntegerField()
