"""Health check endpoints for canvas-relay.

Provides /health and /ready endpoints for container orchestration
and load balancer health checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import ClassVar

from litestar import Controller, get

from canvas_relay import __version__
from canvas_relay.realtime.registry import ConnectionRegistry  # noqa: TC001


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status of an individual component."""

    name: str
    status: HealthStatus
    message: str | None = None
    details: dict[str, int] = field(default_factory=dict)


@dataclass
class HealthResponse:
    """Health check response."""

    status: HealthStatus
    version: str = __version__
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    components: list[ComponentHealth] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "status": self.status.value,
            "version": self.version,
            "timestamp": self.timestamp,
            "components": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "details": c.details,
                }
                for c in self.components
            ],
        }


class HealthController(Controller):
    """Health check controller.

    Provides liveness and readiness probes. The relay is stateless apart
    from its live connections, so both probes only report on the registry.
    """

    path = ""
    include_in_schema: ClassVar[bool] = True
    tags: ClassVar[list[str]] = ["Health"]

    @get("/health")
    async def health(self, registry: ConnectionRegistry) -> dict:
        """Liveness probe endpoint.

        Returns:
            Health status with the number of live relay connections.
        """
        components = [
            ComponentHealth(
                name="relay",
                status=HealthStatus.HEALTHY,
                message="Relay is accepting connections",
                details={"connections": registry.total_connections},
            )
        ]
        return HealthResponse(status=HealthStatus.HEALTHY, components=components).to_dict()

    @get("/ready")
    async def ready(self) -> dict:
        """Readiness probe endpoint.

        Returns:
            Readiness status with individual check results.
        """
        checks = {"application": True}
        return {
            "ready": all(checks.values()),
            "timestamp": datetime.now(UTC).isoformat(),
            "checks": checks,
        }
