"""Connection registry shared by all relay sessions."""

from __future__ import annotations

import asyncio
import itertools
from typing import TYPE_CHECKING

import structlog

from canvas_relay.exceptions import RegistryInvariantViolation

if TYPE_CHECKING:
    from canvas_relay.realtime.channel import OutboundChannel

logger = structlog.get_logger(__name__)


class ConnectionRegistry:
    """Maps live connection identifiers to their outbound channels.

    The registry hands out process-unique, monotonically increasing
    identifiers and tracks which connections are eligible to receive
    broadcasts. Structural changes and snapshots are serialized by a lock,
    so a snapshot never observes a half-applied insert or removal.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._channels: dict[int, OutboundChannel] = {}
        self._lock = asyncio.Lock()
        self._ids = itertools.count(1)

    def next_id(self) -> int:
        """Allocate a new connection identifier. Identifiers are never reused."""
        return next(self._ids)

    async def register(self, connection_id: int, channel: OutboundChannel) -> None:
        """Add a connection to the registry.

        Args:
            connection_id: The connection's identifier.
            channel: The producer side of the connection's outbound channel.

        Raises:
            RegistryInvariantViolation: If the identifier is already registered.
        """
        async with self._lock:
            if connection_id in self._channels:
                raise RegistryInvariantViolation(connection_id)
            self._channels[connection_id] = channel

            logger.info(
                "Connection registered",
                connection_id=connection_id,
                total_connections=len(self._channels),
            )

    async def deregister(self, connection_id: int) -> None:
        """Remove a connection. Does nothing if it is not registered.

        Args:
            connection_id: The connection's identifier.
        """
        async with self._lock:
            if self._channels.pop(connection_id, None) is not None:
                logger.info(
                    "Connection deregistered",
                    connection_id=connection_id,
                    remaining_connections=len(self._channels),
                )

    async def snapshot_others(self, excluding: int) -> list[tuple[int, OutboundChannel]]:
        """Get every registered connection except one.

        Args:
            excluding: The identifier to leave out, usually the sender.

        Returns:
            ``(connection_id, channel)`` pairs as of the moment of the call.
        """
        async with self._lock:
            return [(cid, channel) for cid, channel in self._channels.items() if cid != excluding]

    def connection_ids(self) -> list[int]:
        """Get the identifiers of all registered connections."""
        return sorted(self._channels)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._channels

    @property
    def total_connections(self) -> int:
        """Get the number of registered connections."""
        return len(self._channels)
