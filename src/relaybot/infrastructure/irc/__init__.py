"""IRC integration."""

from relaybot.infrastructure.irc.client import (
    IRCConnection,
    IRCConnectionError,
    create_ssl_context,
)
from relaybot.infrastructure.irc.event_adapter import IRCEventAdapter
from relaybot.infrastructure.irc.messaging import IRCMessagingService
from relaybot.infrastructure.irc.protocol import IRCLine, format_command, parse_line

__all__ = [
    "IRCConnection",
    "IRCConnectionError",
    "IRCEventAdapter",
    "IRCLine",
    "IRCMessagingService",
    "create_ssl_context",
    "format_command",
    "parse_line",
]
