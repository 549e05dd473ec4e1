"""Health check HTTP server."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from aiohttp import web

if TYPE_CHECKING:
    from relaybot.infrastructure.events.loop import EventLoop
    from relaybot.infrastructure.events.queue import EventQueue
    from relaybot.infrastructure.irc.client import IRCConnection

logger = logging.getLogger(__name__)


class HealthServer:
    """HTTP server for health check endpoints.

    /live reports whether events are still being processed, /ready
    additionally requires the IRC registration to be complete.
    """

    def __init__(
        self,
        event_loop: EventLoop,
        event_queue: EventQueue,
        irc_connection: IRCConnection,
        port: int = 8080,
    ) -> None:
        """Initialize the health server.

        Args:
            event_loop: EventLoop instance.
            event_queue: EventQueue instance (for the backlog size).
            irc_connection: IRCConnection instance.
            port: Port to listen on. Use 0 for any available port.
        """
        self._event_loop = event_loop
        self._event_queue = event_queue
        self._irc_connection = irc_connection
        self._port = port
        self._actual_port = port
        self._runner: web.AppRunner | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Check if the server is running."""
        return self._running

    @property
    def port(self) -> int:
        """Get the port the server is listening on."""
        return self._actual_port

    async def check_liveness(self) -> dict[str, Any]:
        """Check if the application is alive."""
        is_alive = self._event_loop.is_running
        return {
            "status": "alive" if is_alive else "dead",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def check_readiness(self) -> dict[str, Any]:
        """Check if the bot is connected and processing events.

        Returns:
            Readiness status with component health details.
        """
        event_loop_ok = self._event_loop.is_running
        irc_ok = self._irc_connection.is_registered

        return {
            "ready": event_loop_ok and irc_ok,
            "event_loop": event_loop_ok,
            "irc": irc_ok,
            "nick": self._irc_connection.nick,
            "pending_events": self._event_queue.pending_count,
            "processed_events": self._event_loop.processed_count,
        }

    async def _handle_live(self, request: web.Request) -> web.Response:
        result = await self.check_liveness()
        return web.json_response(result)

    async def _handle_ready(self, request: web.Request) -> web.Response:
        result = await self.check_readiness()
        status = 200 if result["ready"] else 503
        return web.json_response(result, status=status)

    def create_app(self) -> web.Application:
        """Build the aiohttp application with the health routes."""
        app = web.Application()
        app.router.add_get("/live", self._handle_live)
        app.router.add_get("/ready", self._handle_ready)
        return app

    async def start(self) -> None:
        """Start the HTTP server."""
        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()

        site = web.TCPSite(self._runner, "0.0.0.0", self._port)
        await site.start()

        # Resolve the real port when port=0 was requested
        for address in self._runner.addresses:
            if isinstance(address, tuple) and len(address) >= 2:
                self._actual_port = address[1]
                break

        self._running = True
        logger.info("Health server started on port %d", self.port)

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

        self._running = False
        logger.info("Health server stopped")
