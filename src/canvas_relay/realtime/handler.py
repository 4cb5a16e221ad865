"""WebSocket handler for the canvas relay endpoint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from litestar import Router, WebSocket, websocket

from canvas_relay.realtime.session import RelaySession

if TYPE_CHECKING:
    from canvas_relay.realtime.registry import ConnectionRegistry

logger = structlog.get_logger(__name__)


class RelayWebSocketHandler:
    """Handler for relay WebSocket connections.

    Each accepted connection gets its own :class:`RelaySession`; all sessions
    share the registry given here.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        """Initialize the WebSocket handler.

        Args:
            registry: The shared connection registry.
        """
        self._registry = registry

    @property
    def registry(self) -> ConnectionRegistry:
        """The registry shared by this handler's sessions."""
        return self._registry

    async def handle_connection(self, socket: WebSocket) -> None:
        """Serve one WebSocket connection until it closes.

        Args:
            socket: The WebSocket connection.
        """
        client = socket.client
        logger.debug("WebSocket connection opened", client=client.host if client else None)

        session = RelaySession(socket, self._registry)
        await session.run()


def create_relay_handler(path: str, registry: ConnectionRegistry) -> Router:
    """Create a WebSocket router for the canvas relay.

    Args:
        path: Path of the relay endpoint.
        registry: The shared connection registry.

    Returns:
        A Litestar Router with the relay WebSocket handler.
    """
    handler = RelayWebSocketHandler(registry)

    @websocket(path="/")
    async def relay_websocket(socket: WebSocket) -> None:
        """WebSocket endpoint relaying drawing events between participants.

        Args:
            socket: The WebSocket connection.
        """
        await handler.handle_connection(socket)

    return Router(path=path, route_handlers=[relay_websocket], tags=["WebSocket"])
