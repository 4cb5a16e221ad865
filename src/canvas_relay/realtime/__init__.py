"""Real-time WebSocket relay for canvas-relay.

This module provides the connection registry, the per-connection relay
session and the drawing event codec.
"""

from __future__ import annotations

from canvas_relay.realtime.channel import OutboundChannel
from canvas_relay.realtime.events import (
    ClearEvent,
    DrawEvent,
    EraseEvent,
    Event,
    EventType,
    decode,
    encode,
)
from canvas_relay.realtime.handler import RelayWebSocketHandler, create_relay_handler
from canvas_relay.realtime.registry import ConnectionRegistry
from canvas_relay.realtime.session import RelaySession, SessionState, broadcast

__all__ = [
    "ClearEvent",
    "ConnectionRegistry",
    "DrawEvent",
    "EraseEvent",
    "Event",
    "EventType",
    "OutboundChannel",
    "RelaySession",
    "RelayWebSocketHandler",
    "SessionState",
    "broadcast",
    "create_relay_handler",
    "decode",
    "encode",
]
