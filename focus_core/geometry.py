"""Identifier, direction and rectangle helpers shared by the focus engine (pure, no Qt)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

WidgetId = int
Position = Tuple[int, int]

MAX_WIDGET_ID = (1 << 64) - 1
MAX_COORD = 0xFFFF


class Direction(Enum):
    """Arrow-key direction for spatial navigation."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, token: Any) -> Optional["Direction"]:
        if isinstance(token, cls):
            return token
        if not isinstance(token, str):
            return None
        try:
            return cls(token.strip().lower())
        except ValueError:
            return None

    @property
    def horizontal(self) -> bool:
        return self in (Direction.LEFT, Direction.RIGHT)


@dataclass(frozen=True)
class Rect:
    """Screen-space rectangle in cell units."""

    x: int
    y: int
    width: int
    height: int

    def center(self) -> Position:
        cx = min(self.x + self.width // 2, MAX_COORD)
        cy = min(self.y + self.height // 2, MAX_COORD)
        return cx, cy

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


def is_widget_id(value: Any) -> bool:
    """True for a plain int in the unsigned 64-bit range; bools and floats never qualify."""

    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_WIDGET_ID


def validate_widget_id(value: Any) -> WidgetId:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Widget id must be an integer, got {value!r}")
    if not 0 <= value <= MAX_WIDGET_ID:
        raise ValueError(f"Widget id {value} is outside the unsigned 64-bit range")
    return value


def validate_coord(value: Any, axis: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{axis} coordinate must be an integer, got {value!r}")
    if not 0 <= value <= MAX_COORD:
        raise ValueError(f"{axis} coordinate {value} is outside 0..{MAX_COORD}")
    return value


def validate_rect(rect: Rect) -> Rect:
    validate_coord(rect.x, "x")
    validate_coord(rect.y, "y")
    validate_coord(rect.width, "width")
    validate_coord(rect.height, "height")
    return rect
