"""IRC event adapter."""

import logging
from collections.abc import Callable

from relaybot.domain.entities import ChatMessage
from relaybot.infrastructure.irc.protocol import IRCLine, is_ctcp

logger = logging.getLogger(__name__)


class IRCEventAdapter:
    """Convert IRC PRIVMSG lines to domain entities.

    The bot's current nick is looked up on every conversion because the
    server may have assigned a different nick than the configured one.
    """

    def __init__(self, current_nick: Callable[[], str]) -> None:
        """Initialize the adapter.

        Args:
            current_nick: Returns the nick the bot is using right now.
        """
        self._current_nick = current_nick

    def to_message(self, line: IRCLine) -> ChatMessage | None:
        """Convert a PRIVMSG line to a ChatMessage.

        Args:
            line: Parsed PRIVMSG line.

        Returns:
            ChatMessage, or None for lines that are not chat text
            (CTCP requests, lines without sender or text).
        """
        if line.command != "PRIVMSG" or len(line.params) < 2:
            return None

        sender = line.nick
        target, text = line.params[0], line.trailing
        if not sender or not text:
            return None

        if is_ctcp(text):
            logger.debug("Ignoring CTCP message from %s", sender)
            return None

        is_direct = target.casefold() == self._current_nick().casefold()
        return ChatMessage(
            sender=sender,
            target=target,
            text=text,
            is_direct=is_direct,
        )
