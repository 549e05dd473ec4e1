"""Tests for IRCMessagingService."""

from unittest.mock import AsyncMock, Mock

import pytest

from relaybot.domain.exceptions import MessageDeliveryError
from relaybot.infrastructure.irc import IRCConnectionError, IRCMessagingService


class TestIRCMessagingService:
    """IRCMessagingService tests."""

    @pytest.fixture
    def connection(self) -> Mock:
        """Create mock connection."""
        connection = Mock()
        connection.privmsg = AsyncMock()
        return connection

    async def test_send_line(self, connection: Mock) -> None:
        """Each line is sent as a PRIVMSG."""
        service = IRCMessagingService(connection)

        await service.send_line("#lobby", "hello")

        connection.privmsg.assert_awaited_once_with("#lobby", "hello")

    @pytest.mark.parametrize(
        "error", [IRCConnectionError("Not connected"), ConnectionResetError()]
    )
    async def test_delivery_error(self, connection: Mock, error: Exception) -> None:
        """Connection failures raise MessageDeliveryError."""
        connection.privmsg.side_effect = error
        service = IRCMessagingService(connection)

        with pytest.raises(MessageDeliveryError) as exc_info:
            await service.send_line("#lobby", "hello")

        assert exc_info.value.target == "#lobby"
