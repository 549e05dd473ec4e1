"""LiteLLM-backed text generator."""

import logging
from typing import Any

import litellm
from litellm.exceptions import AuthenticationError, RateLimitError, Timeout

from relaybot.config.models import GeneratorConfig
from relaybot.infrastructure.generator.exceptions import (
    GeneratorAuthenticationError,
    GeneratorError,
    GeneratorRateLimitError,
    GeneratorTimeoutError,
)
from relaybot.infrastructure.generator.logging_mixin import PromptLoggingMixin

logger = logging.getLogger(__name__)


class LiteLLMTextGenerator(PromptLoggingMixin):
    """LiteLLM wrapper implementing the TextGenerator protocol.

    The flattened prompt is sent as a single user message, so any chat
    model LiteLLM supports can continue the conversation.
    """

    def __init__(self, config: GeneratorConfig, *, debug_prompts: bool = False) -> None:
        """Initialize the generator.

        Args:
            config: Generator configuration (model, temperature, max_tokens).
            debug_prompts: If True, log prompts at INFO level.
        """
        self._config = config
        self._debug_prompts = debug_prompts
        self._logger = logger

    async def generate(self, prompt: str, **kwargs: Any) -> str:
        """Execute chat completion for a flattened prompt.

        Args:
            prompt: Serialized conversation ending with the assistant cue.
            **kwargs: Additional parameters (override config).

        Returns:
            Generated text.

        Raises:
            GeneratorAuthenticationError: Invalid API key.
            GeneratorRateLimitError: Rate limit exceeded.
            GeneratorTimeoutError: The request timed out.
            GeneratorError: Other API errors.
        """
        params = {
            "model": self._config.model,
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "timeout": self._config.timeout_seconds,
            "messages": [{"role": "user", "content": prompt}],
            **kwargs,
        }

        if self._should_log():
            self._log_prompt(prompt)

        logger.debug("LLM request: model=%s", params["model"])

        try:
            response = await litellm.acompletion(**params)
            content = response.choices[0].message.content or ""
        except AuthenticationError as e:
            logger.error("LLM authentication error: %s", e)
            raise GeneratorAuthenticationError(str(e)) from e
        except RateLimitError as e:
            logger.warning("LLM rate limit exceeded: %s", e)
            raise GeneratorRateLimitError(str(e)) from e
        except Timeout as e:
            logger.warning("LLM request timed out: %s", e)
            raise GeneratorTimeoutError(str(e)) from e
        except Exception as e:
            logger.error("LLM error: %s", e)
            raise GeneratorError(str(e)) from e

        if self._should_log():
            self._log_response(content)

        return content
