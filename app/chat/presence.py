"""
In-process presence registry.

Tracks which users currently hold an authenticated realtime session and
which conversations each session is watching. The registry is created by
ChatConfig.ready(), reached through the app config, and cleared when the
ASGI server shuts down; nothing survives a restart, clients simply
authenticate again on reconnect.

Presence is process-local. Running several ASGI workers means each one
only knows its own sockets.

Usage:
    from chat.presence import get_presence_registry

    presence = get_presence_registry()
    presence.set_online(user.id, self.channel_name)
    if presence.is_online(receiver_id) and not presence.is_watching(receiver_id, conversation.id):
        ...
"""

from __future__ import annotations

import json
import logging
import threading
import time

from django.apps import apps
from django_redis import get_redis_connection

from chat.constants import PRESENCE_CONFIG

logger = logging.getLogger(__name__)


class RedisPresenceMirror:
    """
    Copies presence into Redis with a TTL.

    Entries expire on their own if a disconnect is missed. Every failure is
    logged and swallowed; the in-memory registry stays authoritative.
    """

    def __init__(self, alias: str = "default", ttl: int = PRESENCE_CONFIG.SESSION_TTL_SECONDS):
        self.alias = alias
        self.ttl = ttl

    @staticmethod
    def key(user_id: int) -> str:
        return PRESENCE_CONFIG.KEY_TEMPLATE.format(user_id=user_id)

    def store(self, user_id: int, session_handle: str, user_info: dict | None = None) -> None:
        payload = json.dumps(
            {
                "session": session_handle,
                "last_seen": int(time.time() * 1000),
                "status": "online",
                "user_info": user_info or {},
            }
        )
        try:
            get_redis_connection(self.alias).setex(self.key(user_id), self.ttl, payload)
        except Exception:
            logger.exception(f"Failed to mirror presence for user {user_id}")

    def remove(self, user_id: int) -> None:
        try:
            get_redis_connection(self.alias).delete(self.key(user_id))
        except Exception:
            logger.exception(f"Failed to clear mirrored presence for user {user_id}")


class PresenceRegistry:
    """
    Map of user id -> session handle plus the conversations each user watches.

    A session handle is whatever identifies the transport session; the
    consumer uses its channel name. Mutations take a lock because the
    ORM-side helpers may run in worker threads.

    Args:
        mirror: Optional RedisPresenceMirror
    """

    def __init__(self, mirror: RedisPresenceMirror | None = None):
        self._sessions: dict[int, str] = {}
        self._watching: dict[int, set[int]] = {}
        self._lock = threading.Lock()
        self.mirror = mirror

    def set_online(self, user_id: int, session_handle: str, user_info: dict | None = None) -> None:
        """Register ``session_handle`` as the user's current session."""
        with self._lock:
            previous = self._sessions.get(user_id)
            self._sessions[user_id] = session_handle
            if previous != session_handle:
                self._watching[user_id] = set()
        if self.mirror is not None:
            self.mirror.store(user_id, session_handle, user_info)
        logger.debug(f"User {user_id} online via {session_handle}")

    def set_offline(self, user_id: int, session_handle: str | None = None) -> bool:
        """
        Forget the user's session.

        When ``session_handle`` is given and no longer matches the current
        session (the user reconnected elsewhere), nothing changes.

        Returns:
            True if the user went offline
        """
        with self._lock:
            current = self._sessions.get(user_id)
            if current is None:
                return False
            if session_handle is not None and current != session_handle:
                return False
            del self._sessions[user_id]
            self._watching.pop(user_id, None)
        if self.mirror is not None:
            self.mirror.remove(user_id)
        logger.debug(f"User {user_id} offline")
        return True

    def is_online(self, user_id: int) -> bool:
        return user_id in self._sessions

    def lookup(self, user_id: int) -> str | None:
        return self._sessions.get(user_id)

    def online_user_ids(self) -> list[int]:
        with self._lock:
            return sorted(self._sessions)

    def join_conversation(self, user_id: int, conversation_id: int) -> None:
        with self._lock:
            if user_id in self._sessions:
                self._watching.setdefault(user_id, set()).add(conversation_id)

    def leave_conversation(self, user_id: int, conversation_id: int) -> None:
        with self._lock:
            self._watching.get(user_id, set()).discard(conversation_id)

    def is_watching(self, user_id: int, conversation_id: int) -> bool:
        return conversation_id in self._watching.get(user_id, ())

    def clear(self) -> None:
        """Drop every session (server shutdown)."""
        with self._lock:
            user_ids = list(self._sessions)
            self._sessions.clear()
            self._watching.clear()
        if self.mirror is not None:
            for user_id in user_ids:
                self.mirror.remove(user_id)
        logger.info(f"Presence registry cleared ({len(user_ids)} sessions)")


def get_presence_registry() -> PresenceRegistry:
    """The registry owned by the chat app config."""
    return apps.get_app_config("chat").presence
