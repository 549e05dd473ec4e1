"""Tests for IRCConnection against an in-process fake server."""

import asyncio
import logging
import ssl
from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest

from relaybot.config import IRCConfig
from relaybot.infrastructure.irc import (
    IRCConnection,
    IRCConnectionError,
    IRCLine,
    create_ssl_context,
)


class FakeServer:
    """Line-based TCP server recording what the client sends."""

    def __init__(self) -> None:
        self.received: asyncio.Queue[str] = asyncio.Queue()
        self.writer: asyncio.StreamWriter | None = None
        self.connected = asyncio.Event()
        self.server: asyncio.Server | None = None
        self.connections = 0

    async def start(self) -> int:
        self.server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        return self.server.sockets[0].getsockname()[1]

    async def _handle(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        self.writer = writer
        self.connections += 1
        self.connected.set()
        while True:
            raw = await reader.readline()
            if not raw:
                break
            await self.received.put(raw.decode("utf-8").rstrip("\r\n"))

    async def send(self, line: str) -> None:
        await self.connected.wait()
        assert self.writer is not None
        self.writer.write(f"{line}\r\n".encode("utf-8"))
        await self.writer.drain()

    async def expect(self, timeout: float = 1.0) -> str:
        return await asyncio.wait_for(self.received.get(), timeout=timeout)

    async def disconnect(self) -> None:
        assert self.writer is not None
        self.writer.close()

    async def close(self) -> None:
        if self.writer is not None and not self.writer.is_closing():
            self.writer.close()
        if self.server is not None:
            self.server.close()
            await self.server.wait_closed()


@pytest.fixture
async def server() -> AsyncIterator[FakeServer]:
    """Start a fake IRC server."""
    fake = FakeServer()
    yield fake
    await fake.close()


@pytest.fixture
async def connection(server: FakeServer) -> AsyncIterator[IRCConnection]:
    """Create a connection to the fake server and consume registration."""
    port = await server.start()
    config = IRCConfig(
        server="127.0.0.1",
        channel="#lobby",
        nick="SteveBot",
        port=port,
        realname="Very cool and helpful bot",
        use_tls=False,
    )
    conn = IRCConnection(config)
    await conn.connect()
    yield conn
    await conn.close(timeout=1.0)


async def run_in_background(connection: IRCConnection) -> asyncio.Task[None]:
    task = asyncio.create_task(connection.run())
    await asyncio.sleep(0)
    return task


async def stop(task: asyncio.Task[None]) -> None:
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)


async def unused_port() -> int:
    listener = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
    port = listener.sockets[0].getsockname()[1]
    listener.close()
    await listener.wait_closed()
    return port


class TestCreateSSLContext:
    """create_ssl_context tests."""

    def test_verify(self) -> None:
        """Verification keeps certificate and host name checks."""
        context = create_ssl_context(verify=True)

        assert context.verify_mode == ssl.CERT_REQUIRED
        assert context.check_hostname

    def test_no_verify(self) -> None:
        """Without verification any certificate is accepted."""
        context = create_ssl_context(verify=False)

        assert context.verify_mode == ssl.CERT_NONE
        assert not context.check_hostname


class TestIRCConnection:
    """IRCConnection tests."""

    async def test_registration(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """NICK and USER are sent on connect."""
        assert await server.expect() == "NICK SteveBot"
        assert await server.expect() == "USER SteveBot 0 * :Very cool and helpful bot"
        assert connection.is_connected
        assert not connection.is_registered

    async def test_ping_pong(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """PING is answered with PONG carrying the same token."""
        task = await run_in_background(connection)
        await server.expect()
        await server.expect()

        await server.send("PING :irc.example.org")

        assert await server.expect() == "PONG irc.example.org"
        await stop(task)

    async def test_welcome_joins_channel(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """The channel is joined after the welcome reply."""
        task = await run_in_background(connection)
        await server.expect()
        await server.expect()

        await server.send(":irc.example.org 001 SteveBot :Welcome")

        assert await server.expect() == "JOIN #lobby"
        assert connection.is_registered
        await stop(task)

    async def test_nick_collision(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """A nick in use is retried with an underscore appended."""
        task = await run_in_background(connection)
        await server.expect()
        await server.expect()

        await server.send(":irc.example.org 433 * SteveBot :Nickname is already in use")

        assert await server.expect() == "NICK SteveBot_"
        assert connection.nick == "SteveBot_"

        await server.send(":irc.example.org 001 SteveBot_ :Welcome")
        assert await server.expect() == "JOIN #lobby"
        await stop(task)

    async def test_callbacks_receive_lines(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """Registered callbacks get parsed lines; failures are isolated."""
        received: list[IRCLine] = []

        async def broken(line: IRCLine) -> None:
            raise RuntimeError("boom")

        async def record(line: IRCLine) -> None:
            received.append(line)

        connection.add_callback("privmsg", broken)
        connection.add_callback("PRIVMSG", record)
        task = await run_in_background(connection)

        await server.send(":alice!a@h PRIVMSG #lobby :hello")
        await server.send("PING :sync")
        await server.expect()
        await server.expect()
        assert await server.expect() == "PONG sync"

        assert len(received) == 1
        assert received[0].trailing == "hello"
        await stop(task)

    async def test_disconnect_fires_callback(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """The run loop ends on EOF and fires DISCONNECTED."""
        disconnected = asyncio.Event()

        async def on_disconnect(line: IRCLine) -> None:
            disconnected.set()

        connection.add_callback("DISCONNECTED", on_disconnect)
        task = await run_in_background(connection)

        await server.connected.wait()
        await server.disconnect()

        await asyncio.wait_for(task, timeout=1.0)
        assert disconnected.is_set()
        assert not connection.is_registered

    async def test_privmsg(self, server: FakeServer, connection: IRCConnection) -> None:
        """privmsg sends one PRIVMSG line."""
        await server.expect()
        await server.expect()

        await connection.privmsg("#lobby", "hi there")

        assert await server.expect() == "PRIVMSG #lobby :hi there"

    async def test_close_sends_quit(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """close sends QUIT and closes the socket."""
        await server.expect()
        await server.expect()

        assert await connection.close(timeout=1.0)

        assert await server.expect() == "QUIT Bye"
        assert not connection.is_connected


class TestIRCConnectionErrors:
    """Errors without a server."""

    async def test_send_when_not_connected(self) -> None:
        """Sending without a connection raises IRCConnectionError."""
        conn = IRCConnection(IRCConfig(server="localhost", channel="#c", nick="x"))

        with pytest.raises(IRCConnectionError):
            await conn.privmsg("#c", "hi")

    async def test_connect_refused(self) -> None:
        """Unreachable servers raise IRCConnectionError."""
        port = await unused_port()
        conn = IRCConnection(
            IRCConfig(
                server="127.0.0.1", channel="#c", nick="x", port=port, use_tls=False
            )
        )

        with pytest.raises(IRCConnectionError):
            await conn.connect()

    async def test_close_without_connect(self) -> None:
        """close is a no-op before connect."""
        conn = IRCConnection(IRCConfig(server="localhost", channel="#c", nick="x"))

        assert await conn.close()


class TestIRCConnectionLost:
    """Connection loss while reading."""

    async def test_read_error_ends_run(
        self,
        connection: IRCConnection,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A reset while reading is logged and fires DISCONNECTED."""
        disconnected = asyncio.Event()

        async def on_disconnect(line: IRCLine) -> None:
            disconnected.set()

        connection.add_callback("DISCONNECTED", on_disconnect)
        connection._reader.readline = AsyncMock(  # type: ignore[union-attr]
            side_effect=ConnectionResetError("reset by peer")
        )

        with caplog.at_level(logging.WARNING):
            await asyncio.wait_for(connection.run(), timeout=1.0)

        assert disconnected.is_set()
        assert "Connection lost: reset by peer" in caplog.text
        assert not connection.is_connected

    async def test_send_after_disconnect(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """Sending after the server dropped the connection raises."""
        task = await run_in_background(connection)
        await server.connected.wait()
        await server.disconnect()
        await asyncio.wait_for(task, timeout=1.0)

        with pytest.raises(IRCConnectionError):
            await connection.privmsg("#lobby", "hello?")


class TestIRCConnectionReconnect:
    """run_forever tests."""

    async def test_reconnects_with_configured_nick(
        self, server: FakeServer, connection: IRCConnection
    ) -> None:
        """After a drop the client reconnects and registers from scratch."""
        task = asyncio.create_task(connection.run_forever(reconnect_delay=0.01))
        assert await server.expect() == "NICK SteveBot"
        await server.expect()

        await server.send(":irc.example.org 433 * SteveBot :Nickname is already in use")
        assert await server.expect() == "NICK SteveBot_"
        await server.send(":irc.example.org 001 SteveBot_ :Welcome")
        assert await server.expect() == "JOIN #lobby"
        assert connection.is_registered

        await server.disconnect()

        assert await server.expect() == "NICK SteveBot"
        assert await server.expect() == "USER SteveBot 0 * :Very cool and helpful bot"
        assert server.connections == 2
        assert connection.nick == "SteveBot"
        assert not connection.is_registered

        await server.send(":irc.example.org 001 SteveBot :Welcome")
        assert await server.expect() == "JOIN #lobby"

        assert await connection.close(timeout=1.0)
        await asyncio.wait_for(task, timeout=1.0)

    async def test_close_stops_retrying(self) -> None:
        """close() ends run_forever while it waits to retry."""
        port = await unused_port()
        conn = IRCConnection(
            IRCConfig(
                server="127.0.0.1", channel="#c", nick="x", port=port, use_tls=False
            )
        )
        task = asyncio.create_task(conn.run_forever(reconnect_delay=30.0))
        await asyncio.sleep(0.05)
        assert not task.done()

        assert await conn.close()

        await asyncio.wait_for(task, timeout=1.0)

    async def test_run_forever_after_close_returns(
        self, connection: IRCConnection
    ) -> None:
        """A closed connection is never reopened."""
        await connection.close(timeout=1.0)

        await asyncio.wait_for(connection.run_forever(), timeout=1.0)

        assert not connection.is_connected
