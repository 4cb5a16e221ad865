"""Per-connection outbound message channel."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from canvas_relay.exceptions import RecipientSendError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

_CLOSED = object()


class OutboundChannel:
    """Unbounded FIFO queue of encoded messages for one connection.

    Any number of sessions may call :meth:`send`; exactly one delivery loop
    consumes the channel by iterating over it. Sending never blocks. Once the
    channel is closed, further sends raise :class:`RecipientSendError` and
    iteration stops.
    """

    def __init__(self, connection_id: int | None = None) -> None:
        """Initialize the channel.

        Args:
            connection_id: The connection that owns the consumer side.
        """
        self.connection_id = connection_id
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._closed = False

    def send(self, message: str) -> None:
        """Queue a message for delivery.

        Args:
            message: The encoded message text.

        Raises:
            RecipientSendError: If the channel has been closed.
        """
        if self._closed:
            raise RecipientSendError(self.connection_id)
        self._queue.put_nowait(message)

    def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)

    @property
    def closed(self) -> bool:
        """Whether the channel has been closed."""
        return self._closed

    @property
    def pending(self) -> int:
        """Number of messages waiting for delivery."""
        return max(self._queue.qsize() - int(self._closed), 0)

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]
