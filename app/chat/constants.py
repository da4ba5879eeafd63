"""
Constants for the chat module.

Import example:
    from chat.constants import MESSAGE_CONFIG, PRESENCE_CONFIG, ClientEvent
"""

from typing import Final


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters
    PREVIEW_LENGTH: Final[int] = 50
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 100


class PRESENCE_CONFIG:
    """Configuration for the Redis presence mirror."""

    # Stale sessions expire if a disconnect is never delivered
    SESSION_TTL_SECONDS: Final[int] = 3600
    KEY_TEMPLATE: Final[str] = "user:{user_id}:session"
    # Every authenticated socket joins this group for online/offline events
    BROADCAST_GROUP: Final[str] = "presence"


class ClientEvent:
    """Frame types sent by the client."""

    AUTHENTICATE: Final[str] = "authenticate"
    JOIN_CONVERSATION: Final[str] = "join-conversation"
    LEAVE_CONVERSATION: Final[str] = "leave-conversation"
    SEND_MESSAGE: Final[str] = "send-message"
    TYPING: Final[str] = "typing"
    MARK_READ: Final[str] = "mark-read"


class ServerEvent:
    """Frame types sent to the client."""

    AUTHENTICATED: Final[str] = "authenticated"
    USER_ONLINE: Final[str] = "user-online"
    USER_OFFLINE: Final[str] = "user-offline"
    NEW_MESSAGE: Final[str] = "new-message"
    MESSAGE_NOTIFICATION: Final[str] = "message-notification"
    USER_TYPING: Final[str] = "user-typing"
    MESSAGES_READ: Final[str] = "messages-read"
    ERROR: Final[str] = "error"
