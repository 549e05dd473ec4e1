"""HTTP endpoints."""

from relaybot.infrastructure.http.health_server import HealthServer

__all__ = ["HealthServer"]
