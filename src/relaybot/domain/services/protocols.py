"""Domain service protocols."""

from typing import Protocol


class TextGenerator(Protocol):
    """Text generation abstraction.

    Implementations take a flattened prompt and return the generated
    continuation as plain text.
    """

    async def generate(self, prompt: str) -> str:
        """Generate a continuation for the prompt.

        Args:
            prompt: Serialized conversation ending with the assistant cue.

        Returns:
            Raw generated text.

        Raises:
            GeneratorError: If the service could not produce a reply.
        """
        ...


class MessagingService(Protocol):
    """Messaging abstraction (platform-independent).

    This protocol defines the interface for sending single lines
    to a channel or user.
    """

    async def send_line(self, target: str, text: str) -> None:
        """Send one line of text.

        Args:
            target: Channel name or nick.
            text: Line content, already within the line length limit.
        """
        ...
