"""Pytest configuration and fixtures for canvas-relay tests."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest
from litestar.testing import TestClient

from canvas_relay.app import create_app
from canvas_relay.plugin import RelayConfig
from canvas_relay.realtime.registry import ConnectionRegistry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Iterator

    from litestar import Litestar


class FakeSocket:
    """In-memory stand-in for a Litestar WebSocket."""

    def __init__(self, *, fail_send: bool = False) -> None:
        self.connection_state = "init"
        self.sent: list[str] = []
        self.closed = False
        self.client = None
        self._inbound: asyncio.Queue[Any] = asyncio.Queue()
        self._fail_send = fail_send

    async def accept(self) -> None:
        self.connection_state = "connect"

    async def iter_data(self, mode: str = "text") -> AsyncIterator[str]:
        while True:
            item = await self._inbound.get()
            if item is None:
                self.connection_state = "disconnect"
                return
            if isinstance(item, Exception):
                raise item
            # Litestar yields "" for a binary frame received in text mode.
            yield "" if isinstance(item, bytes) else item

    async def send_text(self, data: str) -> None:
        if self._fail_send:
            msg = "connection reset by peer"
            raise ConnectionResetError(msg)
        # The real transport frames text as UTF-8.
        data.encode("utf-8")
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed = True
        self.connection_state = "disconnect"

    def push(self, message: str | bytes | Exception) -> None:
        """Simulate an inbound message (or a transport failure)."""
        self._inbound.put_nowait(message)

    def disconnect(self) -> None:
        """Simulate the client closing the connection."""
        self._inbound.put_nowait(None)


@pytest.fixture
def registry() -> ConnectionRegistry:
    """Create a fresh ConnectionRegistry for each test."""
    return ConnectionRegistry()


@pytest.fixture
def socket_factory() -> Callable[..., FakeSocket]:
    """Factory for in-memory WebSocket doubles."""
    return FakeSocket


@pytest.fixture
def wait_until() -> Callable[..., Any]:
    """Poll a condition until it holds or a timeout expires."""

    async def _wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
        async with asyncio.timeout(timeout):
            while not predicate():
                await asyncio.sleep(0.005)

    return _wait_until


# App and client fixtures


@pytest.fixture
def app() -> Litestar:
    """Create the relay application for testing."""
    return create_app(config=RelayConfig())


@pytest.fixture
def client(app: Litestar) -> Iterator[TestClient[Litestar]]:
    """Create a test client sharing one event loop across all connections."""
    with TestClient(app=app) as client:
        yield client
