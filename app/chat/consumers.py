"""
WebSocket consumer for realtime chat.

One socket per client at ws/chat/. The JWT on the handshake identifies the
user (chat.middleware.JWTAuthMiddleware); anonymous sockets are closed
with 4001.

Channel Groups:
    presence                 Every socket; user-online / user-offline
    user_{id}                The user's socket; message-notification
    conversation_{id}        Sockets that joined the conversation

Frames from client ({"type": ..., ...}):
    - authenticate: Register presence {user_id?, user_info?}
    - join-conversation: {conversation_id}
    - leave-conversation: {conversation_id}
    - send-message: {conversation_id, content, message_type?}
    - typing: {conversation_id, is_typing}
    - mark-read: {conversation_id, message_ids?}

Frames to client ({"type": ..., "data": {...}}):
    - authenticated, user-online, user-offline, new-message,
      message-notification, user-typing, messages-read, error
"""

from __future__ import annotations

import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncJsonWebsocketConsumer

from chat.constants import PRESENCE_CONFIG, ClientEvent, ServerEvent
from chat.presence import get_presence_registry
from chat.services import ConversationRouter, MessageDispatcher, MessageService
from core.exceptions import BaseApplicationError, UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)


def _conversation_id(content) -> int:
    raw = content.get("conversation_id")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(
            "conversation_id is required",
            error_code="INVALID_CONVERSATION_ID",
        ) from None


def _is_id_list(value) -> bool:
    return isinstance(value, list) and all(
        isinstance(item, int) and not isinstance(item, bool) for item in value
    )


class ChatConsumer(AsyncJsonWebsocketConsumer):
    """
    Realtime chat session for one authenticated user.

    Attributes:
        user: Authenticated user from the handshake
        presence: Process-wide PresenceRegistry
        authenticated: True once the client sent ``authenticate``
        conversation_ids: Conversations this socket has joined
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = None
        self.presence = None
        self.user_info: dict = {}
        self.authenticated = False
        self.conversation_ids: set[int] = set()

    async def connect(self):
        user = self.scope.get("user")
        if user is None or not user.is_authenticated:
            logger.warning("Rejected unauthenticated WebSocket connection")
            await self.close(code=4001)
            return

        self.user = user
        self.presence = get_presence_registry()
        await self.channel_layer.group_add(PRESENCE_CONFIG.BROADCAST_GROUP, self.channel_name)

        subprotocols = self.scope.get("subprotocols") or []
        await self.accept(subprotocol="jwt" if subprotocols[:1] == ["jwt"] else None)
        logger.info(f"User {user.id} connected ({self.channel_name})")

    async def disconnect(self, close_code):
        if self.user is None:
            return

        for conversation_id in self.conversation_ids:
            await self.channel_layer.group_discard(
                ConversationRouter.group_name(conversation_id),
                self.channel_name,
            )
        await self.channel_layer.group_discard(
            ConversationRouter.user_group_name(self.user.id),
            self.channel_name,
        )
        await self.channel_layer.group_discard(PRESENCE_CONFIG.BROADCAST_GROUP, self.channel_name)

        if self.authenticated and self.presence.set_offline(self.user.id, self.channel_name):
            await self._broadcast_presence(ServerEvent.USER_OFFLINE)
        logger.info(f"User {self.user.id} disconnected ({close_code})")

    async def receive_json(self, content, **kwargs):
        """
        Dispatch a client frame to its handler.

        Application errors become ``error`` frames; the socket stays open.
        """
        if not isinstance(content, dict):
            await self._send_error("Frames must be JSON objects", "INVALID_FRAME")
            return

        event = content.get("type")
        handlers = {
            ClientEvent.AUTHENTICATE: self._handle_authenticate,
            ClientEvent.JOIN_CONVERSATION: self._handle_join,
            ClientEvent.LEAVE_CONVERSATION: self._handle_leave,
            ClientEvent.SEND_MESSAGE: self._handle_send_message,
            ClientEvent.TYPING: self._handle_typing,
            ClientEvent.MARK_READ: self._handle_mark_read,
        }
        handler = handlers.get(event)
        if handler is None:
            await self._send_error(f"Unknown message type: {event}", "UNKNOWN_EVENT")
            return

        if event != ClientEvent.AUTHENTICATE and not self.authenticated:
            await self._send_error("Not authenticated", "NOT_AUTHENTICATED")
            return

        try:
            await handler(content)
        except BaseApplicationError as e:
            await self._send_error(e.message, e.error_code)

    # -------------------------------------------------------------------------
    # Client events
    # -------------------------------------------------------------------------

    async def _handle_authenticate(self, content):
        claimed_id = content.get("user_id")
        if claimed_id is not None and str(claimed_id) != str(self.user.id):
            raise UnauthorizedError(
                "user_id does not match the access token",
                error_code="USER_MISMATCH",
            )

        extra_info = content.get("user_info") or {}
        if not isinstance(extra_info, dict):
            raise ValidationError("user_info must be an object", error_code="INVALID_USER_INFO")

        # Identity fields come from the token user and cannot be overridden.
        self.user_info = {
            **extra_info,
            "id": self.user.id,
            "first_name": self.user.first_name,
            "last_name": self.user.last_name,
            "username": self.user.username,
        }
        self.presence.set_online(self.user.id, self.channel_name, self.user_info)
        self.authenticated = True

        await self.channel_layer.group_add(
            ConversationRouter.user_group_name(self.user.id),
            self.channel_name,
        )
        await self._broadcast_presence(ServerEvent.USER_ONLINE)
        await self._send_event(ServerEvent.AUTHENTICATED, {"success": True, "user_id": self.user.id})
        logger.info(f"User {self.user.id} authenticated on {self.channel_name}")

    async def _handle_join(self, content):
        conversation_id = _conversation_id(content)
        await self._check_participant(conversation_id)

        await self.channel_layer.group_add(
            ConversationRouter.group_name(conversation_id),
            self.channel_name,
        )
        self.conversation_ids.add(conversation_id)
        self.presence.join_conversation(self.user.id, conversation_id)
        logger.debug(f"User {self.user.id} joined conversation {conversation_id}")

    async def _handle_leave(self, content):
        conversation_id = _conversation_id(content)
        await self.channel_layer.group_discard(
            ConversationRouter.group_name(conversation_id),
            self.channel_name,
        )
        self.conversation_ids.discard(conversation_id)
        self.presence.leave_conversation(self.user.id, conversation_id)

    async def _handle_send_message(self, content):
        # The receiver is the other participant; a client-supplied receiver_id is ignored.
        await self._send_message(
            _conversation_id(content),
            content.get("content", ""),
            content.get("message_type") or "text",
        )

    async def _handle_typing(self, content):
        conversation_id = _conversation_id(content)
        await self._check_participant(conversation_id)

        await self.channel_layer.group_send(
            ConversationRouter.group_name(conversation_id),
            {
                "type": "chat.event",
                "event": ServerEvent.USER_TYPING,
                "data": {
                    "conversation_id": conversation_id,
                    "user_id": self.user.id,
                    "user_info": self.user_info,
                    "is_typing": bool(content.get("is_typing", False)),
                },
                "exclude_channel": self.channel_name,
            },
        )

    async def _handle_mark_read(self, content):
        conversation_id = _conversation_id(content)
        message_ids = content.get("message_ids") or None
        if message_ids is not None and not _is_id_list(message_ids):
            raise ValidationError(
                "message_ids must be a list of integers",
                error_code="INVALID_MESSAGE_IDS",
            )

        count = await self._mark_read(conversation_id, message_ids)
        await self.channel_layer.group_send(
            ConversationRouter.group_name(conversation_id),
            {
                "type": "chat.event",
                "event": ServerEvent.MESSAGES_READ,
                "data": {
                    "conversation_id": conversation_id,
                    "read_by_user_id": self.user.id,
                    "message_ids": message_ids,
                    "count": count,
                },
                "exclude_channel": self.channel_name,
            },
        )

    # -------------------------------------------------------------------------
    # Channel layer events
    # -------------------------------------------------------------------------

    async def chat_event(self, event):
        """Forward a group event to this socket unless it is excluded."""
        if event.get("exclude_channel") == self.channel_name:
            return
        if self.user is not None and event.get("exclude_user_id") == self.user.id:
            return
        await self._send_event(event["event"], event["data"])

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _send_event(self, event: str, data: dict):
        await self.send_json({"type": event, "data": data})

    async def _send_error(self, message: str, error_code: str | None = None):
        await self._send_event(ServerEvent.ERROR, {"message": message, "error_code": error_code})

    async def _broadcast_presence(self, event: str):
        await self.channel_layer.group_send(
            PRESENCE_CONFIG.BROADCAST_GROUP,
            {
                "type": "chat.event",
                "event": event,
                "data": {"user_id": self.user.id, "user_info": self.user_info},
                "exclude_user_id": self.user.id,
            },
        )

    @database_sync_to_async
    def _check_participant(self, conversation_id: int):
        ConversationRouter.get_for_participant(conversation_id, self.user.id)

    @database_sync_to_async
    def _send_message(self, conversation_id: int, content: str, message_type: str):
        return MessageDispatcher.send(
            conversation_id,
            self.user.id,
            content,
            message_type=message_type,
            presence=self.presence,
        )

    @database_sync_to_async
    def _mark_read(self, conversation_id: int, message_ids: list[int] | None) -> int:
        return MessageService.mark_read(conversation_id, self.user.id, message_ids)
