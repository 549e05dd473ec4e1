"""Event handlers package."""

from relaybot.application.handlers.message_handler import MessageEventHandler

__all__ = ["MessageEventHandler"]
