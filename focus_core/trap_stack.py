"""LIFO stack of focus trap frames for modals and nested dialogs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable, Iterable, List, Optional, Tuple

from focus_core.geometry import WidgetId


@dataclass(frozen=True)
class FocusTrapConfig:
    """Per-trap behaviour."""

    restore_on_release: bool = True
    loop_focus: bool = True
    initial_focus: Optional[WidgetId] = None


@dataclass
class TrapFrame:
    container: Hashable
    allowed: List[WidgetId] = field(default_factory=list)
    saved_focus: Optional[WidgetId] = None
    config: FocusTrapConfig = field(default_factory=FocusTrapConfig)

    def add(self, widget_id: WidgetId) -> bool:
        if widget_id in self.allowed:
            return False
        self.allowed.append(widget_id)
        return True


def unique_ids(ids: Iterable[WidgetId]) -> List[WidgetId]:
    return list(dict.fromkeys(ids))


class TrapStack:
    """Ordered trap frames; the last pushed frame is active."""

    def __init__(self) -> None:
        self._frames: List[TrapFrame] = []

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def top(self) -> Optional[TrapFrame]:
        return self._frames[-1] if self._frames else None

    def frames(self) -> Tuple[TrapFrame, ...]:
        return tuple(self._frames)

    def push(self, frame: TrapFrame) -> None:
        self._frames.append(frame)

    def pop(self) -> Optional[TrapFrame]:
        if not self._frames:
            return None
        return self._frames.pop()

    def add_to_top(self, widget_id: WidgetId) -> bool:
        frame = self.top
        if frame is None:
            return False
        return frame.add(widget_id)

    def purge(self, widget_id: WidgetId) -> None:
        """Drop ``widget_id`` from every frame's subset and saved focus."""

        for frame in self._frames:
            if widget_id in frame.allowed:
                frame.allowed = [member for member in frame.allowed if member != widget_id]
            if frame.saved_focus == widget_id:
                frame.saved_focus = None
