"""Drawing events exchanged over the relay and their wire codec.

Every message is a tagged JSON object::

    {"type": "Draw", "data": {"prev": [x, y], "cur": [x, y], "color": "#000", "brush_size": 4}}
    {"type": "Erase", "data": {"prev": [x, y], "cur": [x, y], "brush_size": 4}}
    {"type": "Clear"}
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeAlias

from canvas_relay.exceptions import DecodeError

BRUSH_SIZE_MAX = 2**32 - 1

Coordinate: TypeAlias = tuple[float, float]


class EventType(StrEnum):
    """Discriminant values of the ``type`` field."""

    DRAW = "Draw"
    ERASE = "Erase"
    CLEAR = "Clear"


@dataclass(frozen=True)
class DrawEvent:
    """A stroke segment drawn with a color."""

    prev: Coordinate
    cur: Coordinate
    color: str
    brush_size: int

    type = EventType.DRAW

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dictionary."""
        return {
            "type": self.type.value,
            "data": {
                "prev": list(self.prev),
                "cur": list(self.cur),
                "color": self.color,
                "brush_size": self.brush_size,
            },
        }


@dataclass(frozen=True)
class EraseEvent:
    """A stroke segment erased back to the background."""

    prev: Coordinate
    cur: Coordinate
    brush_size: int

    type = EventType.ERASE

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dictionary."""
        return {
            "type": self.type.value,
            "data": {
                "prev": list(self.prev),
                "cur": list(self.cur),
                "brush_size": self.brush_size,
            },
        }


@dataclass(frozen=True)
class ClearEvent:
    """Wipe the whole canvas."""

    type = EventType.CLEAR

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire dictionary."""
        return {"type": self.type.value}


Event: TypeAlias = DrawEvent | EraseEvent | ClearEvent


def _reject_constant(name: str) -> Any:
    msg = f"non-finite number {name} is not allowed"
    raise ValueError(msg)


def _parse_coordinate(value: Any, field_name: str, raw: str) -> Coordinate:
    if not isinstance(value, list) or len(value) != 2:
        raise DecodeError(f"{field_name} must be a two-element array", raw)
    numbers: list[float] = []
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int | float):
            raise DecodeError(f"{field_name} must contain numbers", raw)
        try:
            number = float(item)
        except OverflowError as e:
            raise DecodeError(f"{field_name} is out of range", raw) from e
        if not math.isfinite(number):
            raise DecodeError(f"{field_name} is out of range", raw)
        numbers.append(number)
    return (numbers[0], numbers[1])


def _parse_brush_size(value: Any, raw: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError("brush_size must be an integer", raw)
    if not 0 <= value <= BRUSH_SIZE_MAX:
        raise DecodeError("brush_size is out of range", raw)
    return value


def _parse_color(value: Any, raw: str) -> str:
    if not isinstance(value, str):
        raise DecodeError("color must be a string", raw)
    # JSON escapes can produce lone surrogates, which no UTF-8 transport can carry.
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise DecodeError("color is not valid unicode", raw) from e
    return value


def _require_data(message: dict[str, Any], raw: str) -> dict[str, Any]:
    data = message.get("data")
    if not isinstance(data, dict):
        raise DecodeError("data must be an object", raw)
    for key in ("prev", "cur", "brush_size"):
        if key not in data:
            raise DecodeError(f"missing field {key}", raw)
    return data


def decode(raw: str) -> Event:
    """Parse a wire message into an event.

    Unknown keys are ignored; everything else must match one of the three
    event shapes exactly.

    Args:
        raw: The message text received from a client.

    Returns:
        The decoded event.

    Raises:
        DecodeError: If the text is not valid JSON or does not match a known shape.
    """
    try:
        message = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:
        raise DecodeError(f"invalid JSON: {e}", raw) from e
    except RecursionError as e:
        raise DecodeError("invalid JSON: nesting too deep", raw) from e

    if not isinstance(message, dict):
        raise DecodeError("message must be an object", raw)

    event_type = message.get("type")
    if event_type == EventType.CLEAR:
        if message.get("data") is not None:
            raise DecodeError("Clear takes no data", raw)
        return ClearEvent()

    if event_type == EventType.DRAW:
        data = _require_data(message, raw)
        if "color" not in data:
            raise DecodeError("missing field color", raw)
        return DrawEvent(
            prev=_parse_coordinate(data["prev"], "prev", raw),
            cur=_parse_coordinate(data["cur"], "cur", raw),
            color=_parse_color(data["color"], raw),
            brush_size=_parse_brush_size(data["brush_size"], raw),
        )

    if event_type == EventType.ERASE:
        data = _require_data(message, raw)
        return EraseEvent(
            prev=_parse_coordinate(data["prev"], "prev", raw),
            cur=_parse_coordinate(data["cur"], "cur", raw),
            brush_size=_parse_brush_size(data["brush_size"], raw),
        )

    raise DecodeError(f"unknown event type {event_type!r}", raw)


def encode(event: Event) -> str:
    """Serialize an event to its canonical wire text.

    Args:
        event: The event to encode.

    Returns:
        Compact JSON text.
    """
    return json.dumps(event.to_dict(), separators=(",", ":"), ensure_ascii=False)
