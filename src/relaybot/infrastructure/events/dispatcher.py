"""Event dispatcher for event-driven architecture."""

import logging
from collections.abc import Awaitable, Callable

from relaybot.domain.entities.event import Event, EventType

logger = logging.getLogger(__name__)

# Handler type: async function that takes an Event and returns None
EventHandler = Callable[[Event], Awaitable[None]]


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or getattr(
        handler, "__name__", repr(handler)
    )


def event_handler(event_type: EventType) -> Callable[[EventHandler], EventHandler]:
    """Decorator marking a coroutine (or method) as an event handler.

    Usage:
        class MessageEventHandler:
            @event_handler(EventType.MESSAGE)
            async def handle(self, event: Event) -> None:
                ...

        dispatcher.register_handler(MessageEventHandler(...).handle)

    Args:
        event_type: The event type this handler processes.

    Returns:
        Decorator function.
    """

    def decorator(func: EventHandler) -> EventHandler:
        func._event_type = event_type  # type: ignore[attr-defined]
        return func

    return decorator


class EventDispatcher:
    """Routes events to the handlers registered for their type.

    A failing handler is logged and does not stop the remaining handlers
    or the caller.
    """

    def __init__(self) -> None:
        """Initialize the dispatcher."""
        self._handlers: dict[EventType, list[EventHandler]] = {}

    def register(self, event_type: EventType, handler: EventHandler) -> None:
        """Register a handler for an event type.

        Args:
            event_type: The event type to handle.
            handler: The handler coroutine function.
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            "Registered handler for %s: %s", event_type.value, _handler_name(handler)
        )

    def register_handler(self, handler: EventHandler) -> None:
        """Register a handler decorated with @event_handler.

        Args:
            handler: The decorated handler (function or bound method).

        Raises:
            ValueError: If the handler was not decorated.
        """
        event_type = getattr(handler, "_event_type", None)
        if event_type is None:
            raise ValueError(
                f"Handler {_handler_name(handler)} has no _event_type attribute. "
                "Use the @event_handler decorator."
            )
        self.register(event_type, handler)

    def handler_count(self, event_type: EventType) -> int:
        """Number of handlers registered for an event type."""
        return len(self._handlers.get(event_type, []))

    async def dispatch(self, event: Event) -> None:
        """Dispatch an event to every handler registered for its type.

        Args:
            event: The event to dispatch.
        """
        handlers = self._handlers.get(event.type)
        if not handlers:
            logger.warning("No handler registered for event type: %s", event.type.value)
            return

        for handler in handlers:
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Error in event handler %s for event %s",
                    _handler_name(handler),
                    event.type.value,
                )
