"""Chat message entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class ChatMessage:
    """Inbound chat line delivered by the transport.

    Attributes:
        sender: Nick of the user who sent the line.
        target: Channel name or, for direct messages, the bot's nick.
        text: Message content.
        is_direct: True if the line was sent one-to-one to the bot.
        timestamp: When the line was received.
    """

    sender: str
    target: str
    text: str
    is_direct: bool = False
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def reply_target(self) -> str:
        """Where a reply should be sent.

        Returns:
            The sender for direct messages, otherwise the channel.
        """
        return self.sender if self.is_direct else self.target

    @property
    def conversation_key(self) -> str:
        """Key identifying the conversation this line belongs to.

        Returns:
            Case-folded reply target, so "#Lobby" and "#lobby" share history.
        """
        return self.reply_target.casefold()

    def is_from(self, nick: str) -> bool:
        """Check if the line was sent by the given nick (case-insensitive)."""
        return self.sender.casefold() == nick.casefold()
