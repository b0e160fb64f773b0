"""Directional (arrow-key) candidate search over positioned widgets."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from focus_core.geometry import Direction, Position, WidgetId


def in_direction(origin: Position, candidate: Position, direction: Direction) -> bool:
    cx, cy = origin
    x, y = candidate
    if direction is Direction.RIGHT:
        return x > cx
    if direction is Direction.LEFT:
        return x < cx
    if direction is Direction.DOWN:
        return y > cy
    return y < cy


def direction_score(origin: Position, candidate: Position, direction: Direction) -> int:
    """Distance along the travel axis plus the perpendicular offset."""

    dx = abs(candidate[0] - origin[0])
    dy = abs(candidate[1] - origin[1])
    travel, across = (dx, dy) if direction.horizontal else (dy, dx)
    return travel + across


def find_candidate(
    origin_id: WidgetId,
    origin: Position,
    direction: Direction,
    candidates: Iterable[Tuple[WidgetId, Position]],
) -> Optional[WidgetId]:
    """Return the best candidate in ``direction`` or ``None``.

    ``candidates`` must be in registry order; equal scores keep the earliest entry.
    """

    best: Optional[WidgetId] = None
    best_score = 0
    for widget_id, position in candidates:
        if widget_id == origin_id or not in_direction(origin, position, direction):
            continue
        score = direction_score(origin, position, direction)
        if best is None or score < best_score:
            best = widget_id
            best_score = score
    return best
