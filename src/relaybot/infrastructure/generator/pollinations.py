"""Plain-text HTTP generator (text.pollinations.ai style)."""

import logging
from urllib.parse import quote

import httpx

from relaybot.config.models import GeneratorConfig
from relaybot.infrastructure.generator.exceptions import (
    GeneratorError,
    GeneratorStatusError,
    GeneratorTimeoutError,
)
from relaybot.infrastructure.generator.logging_mixin import PromptLoggingMixin

logger = logging.getLogger(__name__)


class PollinationsTextGenerator(PromptLoggingMixin):
    """TextGenerator backed by a GET-the-prompt text service.

    The whole prompt is percent-encoded into the request path and the
    response body is the generated text.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        debug_prompts: bool = False,
    ) -> None:
        """Initialize the generator.

        Args:
            config: Generator configuration (endpoint, timeout).
            transport: Optional httpx transport, mainly for tests.
            debug_prompts: If True, log prompts at INFO level.
        """
        self._config = config
        self._transport = transport
        self._debug_prompts = debug_prompts
        self._logger = logger

    def build_url(self, prompt: str) -> str:
        """Build the request URL for a prompt.

        Args:
            prompt: Serialized conversation.

        Returns:
            Endpoint URL with the percent-encoded prompt appended.
        """
        return f"{self._config.endpoint.rstrip('/')}/{quote(prompt, safe='')}"

    async def generate(self, prompt: str) -> str:
        """Generate a continuation for the prompt.

        Args:
            prompt: Serialized conversation ending with the assistant cue.

        Returns:
            Response body, stripped.

        Raises:
            GeneratorTimeoutError: The request timed out.
            GeneratorStatusError: The service returned a non-200 status.
            GeneratorError: Any other transport failure.
        """
        if self._should_log():
            self._log_prompt(prompt)

        url = self.build_url(prompt)
        logger.debug("Generator request: endpoint=%s", self._config.endpoint)

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self._config.timeout_seconds,
            ) as client:
                response = await client.get(url)
        except httpx.TimeoutException as e:
            logger.warning("Generator request timed out: %s", e)
            raise GeneratorTimeoutError(str(e)) from e
        except httpx.RequestError as e:
            logger.error("Generator request error: %s", e)
            raise GeneratorError(f"Failed to make API request: {e}") from e

        if response.status_code != httpx.codes.OK:
            logger.error(
                "Generator request failed: status=%d", response.status_code
            )
            raise GeneratorStatusError(response.status_code, response.text)

        text = response.text.strip()

        if self._should_log():
            self._log_response(text)

        return text
