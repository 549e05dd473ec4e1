"""Domain services."""

from relaybot.domain.services.engagement import (
    DEFAULT_FILLER_TEXT,
    clean_message,
    should_engage,
)
from relaybot.domain.services.protocols import MessagingService, TextGenerator
from relaybot.domain.services.response_formatter import (
    DEFAULT_MAX_LINE_LENGTH,
    encoded_length,
    sanitize_response,
    segment_response,
    split_sentences,
)

__all__ = [
    "DEFAULT_FILLER_TEXT",
    "DEFAULT_MAX_LINE_LENGTH",
    "MessagingService",
    "TextGenerator",
    "clean_message",
    "encoded_length",
    "sanitize_response",
    "segment_response",
    "should_engage",
    "split_sentences",
]
