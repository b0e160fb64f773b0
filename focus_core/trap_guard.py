"""Scoped focus trap helper for modals and dialogs.

Example::

    trap = FocusTrap("confirm-dialog").with_children([3, 4]).initial_focus(4)
    with trap.engaged(coordinator):
        ...  # Tab cycles 3 and 4 only
    # focus is back where it was before the dialog opened
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from typing import TYPE_CHECKING, Hashable, Iterable, Iterator, List

from focus_core.geometry import WidgetId
from focus_core.trap_stack import FocusTrapConfig

if TYPE_CHECKING:
    from focus_core.coordinator import FocusCoordinator


class FocusTrap:
    """Pairs one ``push_trap``/``pop_trap`` around a modal's visible lifetime."""

    def __init__(self, container: Hashable) -> None:
        self._container = container
        self._children: List[WidgetId] = []
        self._config = FocusTrapConfig()
        self._active = False

    @property
    def container(self) -> Hashable:
        return self._container

    @property
    def children(self) -> tuple[WidgetId, ...]:
        return tuple(self._children)

    @property
    def config(self) -> FocusTrapConfig:
        return self._config

    @property
    def is_active(self) -> bool:
        return self._active

    def with_children(self, children: Iterable[WidgetId]) -> "FocusTrap":
        self._children = list(dict.fromkeys(children))
        return self

    def add_child(self, widget_id: WidgetId) -> "FocusTrap":
        if widget_id not in self._children:
            self._children.append(widget_id)
        return self

    def initial_focus(self, widget_id: WidgetId) -> "FocusTrap":
        self._config = replace(self._config, initial_focus=widget_id)
        return self

    def restore_focus_on_release(self, restore: bool) -> "FocusTrap":
        self._config = replace(self._config, restore_on_release=bool(restore))
        return self

    def loop_focus(self, loop: bool) -> "FocusTrap":
        self._config = replace(self._config, loop_focus=bool(loop))
        return self

    def activate(self, coordinator: "FocusCoordinator") -> None:
        if self._active:
            return
        coordinator.push_trap(self._container, self._children, self._config)
        self._active = True

    def deactivate(self, coordinator: "FocusCoordinator") -> None:
        if not self._active:
            return
        coordinator.pop_trap()
        self._active = False

    @contextmanager
    def engaged(self, coordinator: "FocusCoordinator") -> Iterator["FocusTrap"]:
        self.activate(coordinator)
        try:
            yield self
        finally:
            self.deactivate(coordinator)
