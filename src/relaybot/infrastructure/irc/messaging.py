"""IRC messaging service."""

from relaybot.domain.exceptions import MessageDeliveryError
from relaybot.infrastructure.irc.client import IRCConnection, IRCConnectionError


class IRCMessagingService:
    """IRC implementation of MessagingService.

    Sends each line as one PRIVMSG. Pacing between lines is the caller's
    responsibility.
    """

    def __init__(self, connection: IRCConnection) -> None:
        """Initialize the service.

        Args:
            connection: Connected IRCConnection.
        """
        self._connection = connection

    async def send_line(self, target: str, text: str) -> None:
        """Send one line to a channel or nick.

        Args:
            target: Channel name or nick.
            text: Line content.

        Raises:
            MessageDeliveryError: If the connection is not usable.
        """
        try:
            await self._connection.privmsg(target, text)
        except (IRCConnectionError, OSError) as e:
            raise MessageDeliveryError(
                target, f"Cannot send to {target}: {e!s}"
            ) from e
