"""Per-conversation context windows."""

import logging

from relaybot.domain.entities import DEFAULT_CONTEXT_CAPACITY, ConversationWindow

logger = logging.getLogger(__name__)


class ConversationRegistry:
    """Owns one ConversationWindow per conversation.

    A conversation is a channel or a direct-message peer. Windows are
    created lazily with the configured persona and live for the whole
    process; nothing is persisted.
    """

    def __init__(
        self,
        persona_text: str,
        capacity: int = DEFAULT_CONTEXT_CAPACITY,
    ) -> None:
        """Initialize the registry.

        Args:
            persona_text: Persona pinned at the start of every window.
            capacity: Maximum entries per window, persona included.
        """
        self._persona_text = persona_text
        self._capacity = capacity
        self._windows: dict[str, ConversationWindow] = {}

    def get(self, key: str) -> ConversationWindow:
        """Get the window for a conversation, creating it if needed.

        Args:
            key: Conversation key (see ChatMessage.conversation_key).

        Returns:
            The conversation's window.
        """
        window = self._windows.get(key)
        if window is None:
            window = ConversationWindow.initialize(self._persona_text, self._capacity)
            self._windows[key] = window
            logger.debug("Created conversation window for %s", key)
        return window

    def __contains__(self, key: object) -> bool:
        return key in self._windows

    def __len__(self) -> int:
        return len(self._windows)
