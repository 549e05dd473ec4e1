"""Text generation integration."""

from relaybot.infrastructure.generator.exceptions import (
    GeneratorAuthenticationError,
    GeneratorError,
    GeneratorRateLimitError,
    GeneratorStatusError,
    GeneratorTimeoutError,
)
from relaybot.infrastructure.generator.factory import create_text_generator
from relaybot.infrastructure.generator.litellm_client import LiteLLMTextGenerator
from relaybot.infrastructure.generator.pollinations import PollinationsTextGenerator

__all__ = [
    "GeneratorAuthenticationError",
    "GeneratorError",
    "GeneratorRateLimitError",
    "GeneratorStatusError",
    "GeneratorTimeoutError",
    "LiteLLMTextGenerator",
    "PollinationsTextGenerator",
    "create_text_generator",
]
