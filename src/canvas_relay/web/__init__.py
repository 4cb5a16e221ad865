"""HTTP endpoints for canvas-relay."""

from __future__ import annotations

from canvas_relay.web.health import HealthController

__all__ = ["HealthController"]
