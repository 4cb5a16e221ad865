"""Relay session: one per connected client."""

from __future__ import annotations

import asyncio
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import structlog

from canvas_relay.exceptions import (
    DecodeError,
    RecipientSendError,
    TransportError,
    TransportReadError,
    TransportWriteError,
)
from canvas_relay.realtime.channel import OutboundChannel
from canvas_relay.realtime.events import decode, encode

if TYPE_CHECKING:
    from litestar import WebSocket

    from canvas_relay.realtime.events import Event
    from canvas_relay.realtime.registry import ConnectionRegistry

logger = structlog.get_logger(__name__)


class SessionState(StrEnum):
    """Lifecycle states of a relay session."""

    CONNECTING = "connecting"
    ACTIVE = "active"
    DISCONNECTED = "disconnected"


async def broadcast(registry: ConnectionRegistry, event: Event, originator_id: int) -> int:
    """Queue an event for every connection except its originator.

    A recipient whose channel is already closed is skipped; delivery to the
    others continues and nothing is raised to the caller.

    Args:
        registry: The shared connection registry.
        event: The event to relay.
        originator_id: The connection the event came from.

    Returns:
        The number of recipients the event was queued for.
    """
    message = encode(event)
    recipients = await registry.snapshot_others(originator_id)

    queued = 0
    for connection_id, channel in recipients:
        try:
            channel.send(message)
        except RecipientSendError:
            logger.debug(
                "Recipient already disconnected",
                connection_id=connection_id,
                originator_id=originator_id,
            )
        else:
            queued += 1
    return queued


class RelaySession:
    """Relays one client's events to everyone else and delivers theirs back.

    The session runs two tasks: a reader that decodes inbound messages and
    fans them out through the registry, and a delivery loop that drains this
    connection's outbound channel onto the socket. When either ends, the
    other is cancelled and the session is torn down.
    """

    def __init__(self, socket: WebSocket, registry: ConnectionRegistry) -> None:
        """Initialize the session.

        Args:
            socket: The client's WebSocket connection.
            registry: The shared connection registry.
        """
        self._socket = socket
        self._registry = registry
        self._state = SessionState.CONNECTING
        self._connection_id: int | None = None
        self._channel: OutboundChannel | None = None
        self._tasks: list[asyncio.Task[None]] = []
        self._registered = False
        self._log: Any = logger

    @property
    def connection_id(self) -> int | None:
        """The identifier assigned at registration, or None before that."""
        return self._connection_id

    @property
    def state(self) -> SessionState:
        """The current lifecycle state."""
        return self._state

    async def run(self) -> None:
        """Serve the connection until the client leaves or the transport fails."""
        self._connection_id = self._registry.next_id()
        self._channel = OutboundChannel(self._connection_id)
        self._log = logger.bind(connection_id=self._connection_id)

        reason = "cancelled"
        try:
            await self._registry.register(self._connection_id, self._channel)
            self._registered = True
            await self._socket.accept()
            self._state = SessionState.ACTIVE
            self._log.info("Session active")

            reader = asyncio.create_task(self._read_loop(), name=f"relay-read-{self._connection_id}")
            writer = asyncio.create_task(self._delivery_loop(), name=f"relay-write-{self._connection_id}")
            self._tasks = [reader, writer]

            done, _ = await asyncio.wait(self._tasks, return_when=asyncio.FIRST_COMPLETED)
            reason = self._outcome(reader if reader in done else writer)
        except Exception:
            reason = "error"
            self._log.exception("Relay session failed")
        finally:
            await self._disconnect(reason)

    def _outcome(self, task: asyncio.Task[None]) -> str:
        """Describe why a finished loop ended, logging any failure."""
        if task.cancelled():
            return "cancelled"
        exc = task.exception()
        if exc is None:
            return "client_closed"
        if isinstance(exc, TransportError):
            self._log.warning("Transport failure", error=str(exc), cause=repr(exc.__cause__))
            return "read_error" if isinstance(exc, TransportReadError) else "write_error"
        self._log.error("Unexpected relay loop error", exc_info=exc)
        return "error"

    async def _read_loop(self) -> None:
        """Read inbound messages until the client disconnects."""
        messages = self._socket.iter_data(mode="text")
        while True:
            try:
                raw = await anext(messages)
            except StopAsyncIteration:
                return
            except Exception as e:
                raise TransportReadError(self._connection_id) from e

            await self._handle_message(raw)

    async def _handle_message(self, raw: str) -> None:
        try:
            event = decode(raw)
        except DecodeError as e:
            self._log.warning("Dropping malformed message", reason=e.reason)
            return

        recipients = await broadcast(self._registry, event, self._connection_id)  # type: ignore[arg-type]
        self._log.debug("Event relayed", event_type=event.type.value, recipients=recipients)

    async def _delivery_loop(self) -> None:
        """Write queued messages to the socket in order."""
        assert self._channel is not None
        async for message in self._channel:
            try:
                await self._socket.send_text(message)
            except Exception as e:
                raise TransportWriteError(self._connection_id) from e

    async def _disconnect(self, reason: str) -> None:
        if self._state is SessionState.DISCONNECTED:
            return

        try:
            if self._registered:
                # Removal must finish even if teardown itself is cancelled.
                await asyncio.shield(self._registry.deregister(self._connection_id))  # type: ignore[arg-type]
        finally:
            self._state = SessionState.DISCONNECTED
            if self._channel is not None:
                self._channel.close()
            for task in self._tasks:
                if not task.done():
                    task.cancel()

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

        if self._socket.connection_state != "disconnect":
            try:
                await self._socket.close()
            except Exception as e:  # noqa: BLE001
                self._log.debug("Socket close failed", error=str(e))

        self._log.info("Session disconnected", reason=reason)
