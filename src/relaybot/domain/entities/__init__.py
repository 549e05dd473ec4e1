"""Domain entities."""

from relaybot.domain.entities.context import (
    DEFAULT_CONTEXT_CAPACITY,
    ContextEntry,
    ConversationWindow,
    Role,
)
from relaybot.domain.entities.event import Event, EventType
from relaybot.domain.entities.message import ChatMessage

__all__ = [
    "DEFAULT_CONTEXT_CAPACITY",
    "ChatMessage",
    "ContextEntry",
    "ConversationWindow",
    "Event",
    "EventType",
    "Role",
]
