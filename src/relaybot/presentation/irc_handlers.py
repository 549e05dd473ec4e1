"""IRC event handlers."""

import logging

from relaybot.domain.entities import Event, EventType
from relaybot.infrastructure.events import EventQueue
from relaybot.infrastructure.irc import IRCConnection, IRCEventAdapter, IRCLine

logger = logging.getLogger(__name__)


def register_handlers(
    connection: IRCConnection,
    event_adapter: IRCEventAdapter,
    event_queue: EventQueue,
) -> None:
    """Register IRC callbacks.

    PRIVMSG lines are converted to ChatMessage and queued as MESSAGE
    events; the event loop processes them one at a time.

    Args:
        connection: IRCConnection instance.
        event_adapter: Adapter for converting lines to entities.
        event_queue: Queue the MESSAGE events are put on.
    """

    async def handle_privmsg(line: IRCLine) -> None:
        message = event_adapter.to_message(line)
        if message is None:
            return

        if message.is_from(connection.nick):
            return

        logger.debug(
            "Received message: sender=%s, target=%s, direct=%s",
            message.sender,
            message.target,
            message.is_direct,
        )
        await event_queue.enqueue(
            Event(type=EventType.MESSAGE, payload={"message": message})
        )

    async def handle_disconnected(line: IRCLine) -> None:
        logger.warning("IRC connection closed")

    connection.add_callback("PRIVMSG", handle_privmsg)
    connection.add_callback("DISCONNECTED", handle_disconnected)
