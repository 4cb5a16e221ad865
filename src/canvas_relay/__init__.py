"""canvas-relay: real-time broadcast relay for a shared drawing canvas."""

from __future__ import annotations

__version__ = "0.1.0"

from canvas_relay.plugin import RelayConfig, RelayPlugin  # noqa: E402

__all__ = ["RelayConfig", "RelayPlugin", "__version__"]
