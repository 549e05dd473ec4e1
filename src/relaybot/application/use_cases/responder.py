"""Responder use case."""

import logging
import re

from relaybot.application.services.conversation_registry import ConversationRegistry
from relaybot.domain.entities import ChatMessage, ConversationWindow
from relaybot.domain.services import (
    DEFAULT_FILLER_TEXT,
    TextGenerator,
    clean_message,
    sanitize_response,
    should_engage,
)

logger = logging.getLogger(__name__)


class Responder:
    """Use case for replying to chat lines.

    Decides whether a line deserves a reply, cleans it and runs the
    round trip against the text generator:
    append user turn -> serialize -> generate -> sanitize -> append
    assistant turn.
    """

    def __init__(
        self,
        text_generator: TextGenerator,
        conversations: ConversationRegistry,
        bot_nick: str,
        trigger_pattern: re.Pattern[str] | None = None,
        filler_text: str = DEFAULT_FILLER_TEXT,
    ) -> None:
        """Initialize the use case.

        Args:
            text_generator: Service for generating replies.
            conversations: Context windows per conversation.
            bot_nick: The bot's configured nick.
            trigger_pattern: Optional pattern that also triggers a reply.
            filler_text: Text used when a cleaned line is empty.
        """
        self._text_generator = text_generator
        self._conversations = conversations
        self._bot_nick = bot_nick
        self._trigger_pattern = trigger_pattern
        self._filler_text = filler_text

    def should_engage(self, message: ChatMessage) -> bool:
        """Check if the bot should reply to a message.

        Lines sent by the bot itself are never answered.
        """
        if message.is_from(self._bot_nick):
            return False
        return should_engage(
            message.text,
            self._bot_nick,
            message.is_direct,
            self._trigger_pattern,
        )

    def clean(self, message: ChatMessage) -> str:
        """Remove salutations addressed to the bot from a message."""
        return clean_message(message.text, self._bot_nick, self._filler_text)

    async def respond(
        self,
        cleaned_message: str,
        from_identity: str,
        window: ConversationWindow,
    ) -> str:
        """Run one round trip.

        Processing flow:
        1. Append the user turn
        2. Serialize the window into a prompt
        3. Generate a continuation
        4. Sanitize it and append the assistant turn

        If generation fails the user turn stays in the window.

        Args:
            cleaned_message: Cleaned message text.
            from_identity: Nick of the sender.
            window: The conversation's context window.

        Returns:
            Sanitized reply text.

        Raises:
            GeneratorError: If the generator call fails.
        """
        # 1. Append the user turn
        window.add_user_turn(from_identity, cleaned_message)

        # 2. Serialize the window into a prompt
        prompt = window.serialize()

        # 3. Generate a continuation
        raw = await self._text_generator.generate(prompt)

        # 4. Sanitize and remember the reply
        reply = sanitize_response(raw)
        window.add_assistant_turn(reply)
        return reply

    async def execute(self, message: ChatMessage) -> str | None:
        """Reply to a message if it deserves one.

        Args:
            message: The received message.

        Returns:
            Reply text, or None if the message is ignored.

        Raises:
            GeneratorError: If the generator call fails.
        """
        if not self.should_engage(message):
            return None

        logger.info("Processing message from %s: %s", message.sender, message.text)

        cleaned = self.clean(message)
        window = self._conversations.get(message.conversation_key)
        return await self.respond(cleaned, message.sender, window)
