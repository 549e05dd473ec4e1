"""Event system infrastructure."""

from relaybot.infrastructure.events.dispatcher import EventDispatcher, event_handler
from relaybot.infrastructure.events.loop import EventLoop
from relaybot.infrastructure.events.queue import EventQueue

__all__ = [
    "EventDispatcher",
    "EventLoop",
    "EventQueue",
    "event_handler",
]
