"""Application services."""

from relaybot.application.services.conversation_registry import ConversationRegistry

__all__ = ["ConversationRegistry"]
