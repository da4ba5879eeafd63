"""
Chat application configuration.

This app provides direct messaging with:
- One conversation per pair of users
- Realtime delivery over WebSockets (Django Channels)
- Read tracking and unread counts
- In-process presence tracking
"""

from django.apps import AppConfig
from django.conf import settings


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

    def ready(self):
        from chat.presence import PresenceRegistry, RedisPresenceMirror

        mirror = RedisPresenceMirror() if settings.CHAT_PRESENCE_MIRROR_ENABLED else None
        self.presence = PresenceRegistry(mirror=mirror)
