"""Presentation layer."""

from relaybot.presentation.irc_handlers import register_handlers

__all__ = ["register_handlers"]
