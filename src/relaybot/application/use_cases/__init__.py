"""Use cases."""

from relaybot.application.use_cases.responder import Responder

__all__ = ["Responder"]
