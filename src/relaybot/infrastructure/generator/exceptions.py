"""Text generation exceptions."""

from relaybot.domain.exceptions import GeneratorError


class GeneratorTimeoutError(GeneratorError):
    """The generation request did not complete in time."""


class GeneratorStatusError(GeneratorError):
    """The service answered with a non-success status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        """Initialize the error.

        Args:
            status_code: HTTP status code.
            body: Response body.
        """
        self.status_code = status_code
        self.body = body
        super().__init__(f"API request failed with status {status_code}: {body}")


class GeneratorRateLimitError(GeneratorError):
    """Rate limit exceeded error."""


class GeneratorAuthenticationError(GeneratorError):
    """Authentication error (invalid API key, etc.)."""


__all__ = [
    "GeneratorAuthenticationError",
    "GeneratorError",
    "GeneratorRateLimitError",
    "GeneratorStatusError",
    "GeneratorTimeoutError",
]
