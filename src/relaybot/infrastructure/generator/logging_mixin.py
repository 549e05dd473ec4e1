"""Prompt/response debug logging shared by generator backends."""

import logging


class PromptLoggingMixin:
    """Log prompts and responses at DEBUG, or INFO when forced.

    Subclasses set ``_debug_prompts`` and ``_logger``.
    """

    _debug_prompts: bool = False
    _logger: logging.Logger

    def _should_log(self) -> bool:
        """Check if logging should occur."""
        return self._debug_prompts or self._logger.isEnabledFor(logging.DEBUG)

    def _log_prompt(self, prompt: str) -> None:
        """Log generator request prompt."""
        log_func = self._logger.info if self._debug_prompts else self._logger.debug
        log_func("=== Generator Prompt ===")
        for line in prompt.splitlines():
            log_func("    %s", line)
        log_func("=== End of Prompt ===")

    def _log_response(self, response: str) -> None:
        """Log generator response."""
        log_func = self._logger.info if self._debug_prompts else self._logger.debug
        log_func("=== Generator Response ===")
        log_func("response: %s", response)
        log_func("=== End of Response ===")
