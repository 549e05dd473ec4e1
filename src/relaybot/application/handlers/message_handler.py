"""Handler for MESSAGE events in the event-driven architecture."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from relaybot.application.use_cases.responder import Responder
from relaybot.domain.entities import ChatMessage, Event
from relaybot.domain.entities.event import EventType
from relaybot.domain.exceptions import GeneratorError, MessageDeliveryError
from relaybot.domain.services import (
    DEFAULT_MAX_LINE_LENGTH,
    MessagingService,
    segment_response,
)
from relaybot.infrastructure.events.dispatcher import event_handler

logger = logging.getLogger(__name__)

DEFAULT_SEND_INTERVAL_SECONDS = 0.5


class MessageEventHandler:
    """Handler for MESSAGE events.

    Runs the Responder for an inbound line and sends the reply in
    line-sized chunks, pausing between chunks.
    """

    def __init__(
        self,
        responder: Responder,
        messaging_service: MessagingService,
        max_line_length: int = DEFAULT_MAX_LINE_LENGTH,
        send_interval_seconds: float = DEFAULT_SEND_INTERVAL_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the handler.

        Args:
            responder: Use case producing replies.
            messaging_service: Service for sending lines.
            max_line_length: Maximum length of one outgoing line.
            send_interval_seconds: Pause between consecutive lines.
            sleep: Sleep coroutine (replaceable in tests).
        """
        self._responder = responder
        self._messaging_service = messaging_service
        self._max_line_length = max_line_length
        self._send_interval_seconds = send_interval_seconds
        self._sleep = sleep

    @event_handler(EventType.MESSAGE)
    async def handle(self, event: Event) -> None:
        """Handle MESSAGE event.

        Processing flow:
        1. Extract message from event payload
        2. Generate a reply (ignored messages stop here)
        3. Send the reply chunk by chunk

        Args:
            event: The MESSAGE event.
        """
        message: ChatMessage = event.payload["message"]

        try:
            reply = await self._responder.execute(message)
        except GeneratorError as e:
            logger.error("Error getting AI response: %s", e)
            return

        if reply is None:
            return

        target = message.reply_target
        try:
            sent = await self.send_reply(target, reply)
        except MessageDeliveryError as e:
            logger.error("Failed to send reply to %s: %s", target, e)
            return

        logger.info("Replied to %s in %s (%d lines)", message.sender, target, sent)

    async def send_reply(self, target: str, reply: str) -> int:
        """Send a reply in order, one chunk per line.

        Args:
            target: Channel or nick.
            reply: Reply text.

        Returns:
            Number of lines sent.
        """
        sent = 0
        for chunk in segment_response(reply, self._max_line_length):
            if sent:
                await self._sleep(self._send_interval_seconds)
            await self._messaging_service.send_line(target, chunk)
            sent += 1
        return sent
