"""Minimal example mounting the canvas relay in your own Litestar app.

The application will:
    - Create one ConnectionRegistry shared by every connection
    - Mount the relay WebSocket endpoint at /draw
    - Expose /health and /ready

Running the Application:
    uvicorn examples.app:app --port 8000

Then connect two WebSocket clients to ws://127.0.0.1:8000/draw and send:
    {"type": "Draw", "data": {"prev": [0, 0], "cur": [10, 10], "color": "#ff0000", "brush_size": 4}}

The other client receives the same event; the sender receives nothing.
"""

from __future__ import annotations

from litestar import Litestar, get

from canvas_relay import RelayConfig, RelayPlugin
from canvas_relay.core.logging import CorrelationIdMiddleware, configure_logging
from canvas_relay.realtime.registry import ConnectionRegistry

configure_logging(debug=True)

registry = ConnectionRegistry()


@get("/participants")
async def participants() -> dict:
    """List the identifiers of everyone currently connected."""
    return {"connections": registry.connection_ids()}


app = Litestar(
    route_handlers=[participants],
    plugins=[RelayPlugin(RelayConfig(ws_path="/draw", registry=registry))],
    middleware=[CorrelationIdMiddleware],
)
