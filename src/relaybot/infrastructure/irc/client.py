"""Asyncio IRC connection and runner."""

import asyncio
import logging
import ssl
from collections.abc import Awaitable, Callable

from relaybot.config import IRCConfig
from relaybot.infrastructure.irc.protocol import IRCLine, format_command, parse_line

logger = logging.getLogger(__name__)

IRCCallback = Callable[[IRCLine], Awaitable[None]]

RPL_WELCOME = "001"
ERR_NICKNAMEINUSE = "433"

DEFAULT_RECONNECT_DELAY_SECONDS = 5.0
MAX_RECONNECT_DELAY_SECONDS = 300.0


class IRCConnectionError(Exception):
    """Raised when the connection is not usable."""


def create_ssl_context(verify: bool) -> ssl.SSLContext:
    """Create the TLS context for the server connection.

    Args:
        verify: Verify the server certificate and host name.

    Returns:
        SSLContext instance.
    """
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class IRCConnection:
    """A single IRC client connection.

    Handles registration, keep-alive (PING/PONG), joining the configured
    channel after the welcome reply and nick collisions. Other lines are
    handed to callbacks registered per command. run_forever() reconnects
    after the server drops the connection until close() is called.
    """

    def __init__(self, config: IRCConfig) -> None:
        """Initialize the connection.

        Args:
            config: IRC connection settings.
        """
        self._config = config
        self._nick = config.nick
        self._reader: asyncio.StreamReader | None = None
        self._writer: asyncio.StreamWriter | None = None
        self._write_lock = asyncio.Lock()
        self._callbacks: dict[str, list[IRCCallback]] = {}
        self._registered = False
        self._closing = False
        self._closed = asyncio.Event()

    @property
    def nick(self) -> str:
        """Nick currently used on the server."""
        return self._nick

    @property
    def is_connected(self) -> bool:
        """Check if the socket is open."""
        return self._writer is not None and not self._writer.is_closing()

    @property
    def is_registered(self) -> bool:
        """Check if the server accepted the registration (001 received)."""
        return self.is_connected and self._registered

    def add_callback(self, command: str, callback: IRCCallback) -> None:
        """Register a callback for a command or numeric reply.

        Args:
            command: IRC command, e.g. "PRIVMSG" or "001".
            callback: Coroutine function receiving the parsed line.
        """
        self._callbacks.setdefault(command.upper(), []).append(callback)

    async def connect(self) -> None:
        """Open the connection and send the registration commands.

        The nick and registration state start over from the configuration.

        Raises:
            IRCConnectionError: If the server cannot be reached.
        """
        ssl_context = (
            create_ssl_context(self._config.verify_tls) if self._config.use_tls else None
        )
        address = f"{self._config.server}:{self._config.port}"
        self._nick = self._config.nick
        self._registered = False
        try:
            self._reader, self._writer = await asyncio.open_connection(
                self._config.server,
                self._config.port,
                ssl=ssl_context,
            )
        except OSError as e:
            raise IRCConnectionError(f"Failed to connect to IRC server {address}: {e}") from e

        logger.info("Connected to %s (tls=%s)", address, self._config.use_tls)
        await self.send_raw(format_command("NICK", self._nick))
        await self.send_raw(
            format_command("USER", self._nick, "0", "*", self._config.realname)
        )

    async def run(self) -> None:
        """Read and handle lines until the server closes the connection."""
        reader = self._reader
        if reader is None:
            raise IRCConnectionError("Not connected")

        while True:
            try:
                raw = await reader.readline()
            except OSError as e:
                logger.warning("Connection lost: %s", e)
                break
            if not raw:
                break
            text = raw.decode("utf-8", errors="replace")
            if not text.strip():
                continue
            try:
                line = parse_line(text)
            except ValueError:
                logger.warning("Ignoring malformed line: %r", text)
                continue
            await self._handle_line(line)

        logger.info("Disconnected from server")
        self._registered = False
        self._drop_connection()
        await self._fire(IRCLine(command="DISCONNECTED"))

    async def run_forever(
        self,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY_SECONDS,
        max_reconnect_delay: float = MAX_RECONNECT_DELAY_SECONDS,
    ) -> None:
        """Process lines and reconnect after disconnects until close().

        Failed reconnect attempts double the delay up to max_reconnect_delay.
        The delay starts over after a successful connect.

        Args:
            reconnect_delay: Seconds to wait before the first reconnect.
            max_reconnect_delay: Upper bound for the delay.
        """
        delay = reconnect_delay
        while not self._closing:
            if not self.is_connected:
                try:
                    await self.connect()
                except IRCConnectionError as e:
                    logger.warning("Reconnect failed: %s", e)
                    await self._wait_before_reconnect(delay)
                    delay = min(delay * 2, max_reconnect_delay)
                    continue
                delay = reconnect_delay

            await self.run()
            if self._closing:
                break
            logger.info("Reconnecting in %.1f seconds", delay)
            await self._wait_before_reconnect(delay)

    async def _wait_before_reconnect(self, delay: float) -> None:
        try:
            await asyncio.wait_for(self._closed.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    def _drop_connection(self) -> None:
        if self._writer is not None and not self._writer.is_closing():
            self._writer.close()
        self._reader = None
        self._writer = None

    async def _handle_line(self, line: IRCLine) -> None:
        if line.command == "PING":
            await self.send_raw(format_command("PONG", line.trailing))
            return

        if line.command == RPL_WELCOME:
            self._registered = True
            if line.params:
                self._nick = line.params[0]
            logger.info("Registered on %s as %s", self._config.server, self._nick)
            await self.join(self._config.channel)
        elif line.command == ERR_NICKNAMEINUSE and not self._registered:
            self._nick = f"{self._nick}_"
            logger.warning("Nick in use, retrying as %s", self._nick)
            await self.send_raw(format_command("NICK", self._nick))
        elif line.command == "JOIN" and line.nick.casefold() == self._nick.casefold():
            logger.info("Joined channel %s", line.trailing)
        elif line.command == "ERROR":
            logger.error("IRC Error: %s", line.trailing)

        await self._fire(line)

    async def _fire(self, line: IRCLine) -> None:
        for callback in self._callbacks.get(line.command, []):
            try:
                await callback(line)
            except Exception:
                logger.exception("Error in IRC callback for %s", line.command)

    async def send_raw(self, line: str) -> None:
        """Send one raw protocol line.

        Args:
            line: Line without CRLF.

        Raises:
            IRCConnectionError: If the connection is closed.
        """
        writer = self._writer
        if writer is None or writer.is_closing():
            raise IRCConnectionError("Not connected")
        async with self._write_lock:
            writer.write(f"{line}\r\n".encode("utf-8"))
            await writer.drain()

    async def privmsg(self, target: str, text: str) -> None:
        """Send a PRIVMSG to a channel or nick."""
        await self.send_raw(format_command("PRIVMSG", target, text))

    async def join(self, channel: str) -> None:
        """Join a channel."""
        await self.send_raw(format_command("JOIN", channel))

    async def quit(self, message: str = "Bye") -> None:
        """Send QUIT if still connected."""
        if self.is_connected:
            await self.send_raw(format_command("QUIT", message))

    async def close(self, timeout: float = 5.0) -> bool:
        """Quit and close the socket with timeout.

        Also stops run_forever() from reconnecting.

        Args:
            timeout: Maximum seconds to wait for close.

        Returns:
            True if closed successfully, False if timed out.
        """
        self._closing = True
        self._closed.set()
        writer = self._writer
        if writer is None:
            return True
        try:
            await asyncio.wait_for(self._shutdown(writer), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False
        finally:
            self._registered = False

    async def _shutdown(self, writer: asyncio.StreamWriter) -> None:
        try:
            await self.quit()
        except (IRCConnectionError, OSError):
            logger.debug("QUIT could not be sent")
        writer.close()
        try:
            await writer.wait_closed()
        except (OSError, ssl.SSLError):
            logger.debug("Error while closing the socket", exc_info=True)
