"""Ordered registry of focusable widget ids with optional geometry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from focus_core.geometry import (
    Position,
    Rect,
    WidgetId,
    validate_coord,
    validate_rect,
    validate_widget_id,
)


@dataclass
class FocusableEntry:
    widget_id: WidgetId
    position: Optional[Position] = None
    bounds: Optional[Rect] = None


class FocusRegistry:
    """Insertion-ordered set of widget ids.

    Re-registering an id updates its geometry in place and keeps its original
    order slot; removals never reorder the remaining entries.
    """

    def __init__(self) -> None:
        self._entries: Dict[WidgetId, FocusableEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, widget_id: object) -> bool:
        return widget_id in self._entries

    def register(self, widget_id: WidgetId) -> FocusableEntry:
        widget_id = validate_widget_id(widget_id)
        entry = self._entries.get(widget_id)
        if entry is None:
            entry = FocusableEntry(widget_id)
            self._entries[widget_id] = entry
        return entry

    def register_with_position(self, widget_id: WidgetId, x: int, y: int) -> FocusableEntry:
        position = (validate_coord(x, "x"), validate_coord(y, "y"))
        entry = self.register(widget_id)
        entry.position = position
        return entry

    def register_with_bounds(self, widget_id: WidgetId, bounds: Rect) -> FocusableEntry:
        bounds = validate_rect(bounds)
        entry = self.register(widget_id)
        entry.bounds = bounds
        entry.position = bounds.center()
        return entry

    def unregister(self, widget_id: WidgetId) -> bool:
        return self._entries.pop(widget_id, None) is not None

    def ids(self) -> Tuple[WidgetId, ...]:
        return tuple(self._entries)

    def position(self, widget_id: WidgetId) -> Optional[Position]:
        entry = self._entries.get(widget_id)
        return entry.position if entry is not None else None

    def bounds(self, widget_id: WidgetId) -> Optional[Rect]:
        entry = self._entries.get(widget_id)
        return entry.bounds if entry is not None else None

    def positioned(self, scope: Iterable[WidgetId]) -> List[Tuple[WidgetId, Position]]:
        """Return ``(id, position)`` pairs for positioned members of ``scope`` in registry order."""

        wanted = set(scope)
        return [
            (widget_id, entry.position)
            for widget_id, entry in self._entries.items()
            if widget_id in wanted and entry.position is not None
        ]

    def widget_at(self, x: int, y: int, scope: Optional[Iterable[WidgetId]] = None) -> Optional[WidgetId]:
        wanted = set(scope) if scope is not None else None
        for widget_id, entry in self._entries.items():
            if wanted is not None and widget_id not in wanted:
                continue
            if entry.bounds is not None and entry.bounds.contains(x, y):
                return widget_id
        return None
