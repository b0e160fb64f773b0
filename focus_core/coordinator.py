"""Focus coordinator: registry, navigators and trap stack behind one API (pure, no Qt)."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Hashable, Iterable, Iterator, List, Optional, Tuple

from focus_core.geometry import Direction, Rect, WidgetId, is_widget_id
from focus_core.linear import next_in_scope, previous_in_scope
from focus_core.registry import FocusRegistry
from focus_core.spatial import find_candidate
from focus_core.trap_stack import FocusTrapConfig, TrapFrame, TrapStack, unique_ids

LOGGER = logging.getLogger("ModernFocus.Coordinator")

FocusListener = Callable[[Optional[WidgetId], Optional[WidgetId]], None]
TrapListener = Callable[[int], None]


class FocusCoordinator:
    """Owns the current focus for one UI root.

    Navigation never raises for empty or degenerate state: operations that have
    nowhere valid to go leave focus untouched and report ``False`` where they
    report anything at all.

    Registry, trap stack and current focus are guarded together by one lock.
    Listeners run after the lock is released, so they may call back in.
    """

    def __init__(self) -> None:
        self._registry = FocusRegistry()
        self._traps = TrapStack()
        self._current: Optional[WidgetId] = None
        self._lock = threading.RLock()
        self._mutation_depth = 0
        self._focus_listeners: List[FocusListener] = []
        self._trap_listeners: List[TrapListener] = []

    # Listeners ---------------------------------------------------------
    def add_focus_listener(self, listener: FocusListener) -> None:
        if listener not in self._focus_listeners:
            self._focus_listeners.append(listener)

    def remove_focus_listener(self, listener: FocusListener) -> None:
        if listener in self._focus_listeners:
            self._focus_listeners.remove(listener)

    def add_trap_listener(self, listener: TrapListener) -> None:
        if listener not in self._trap_listeners:
            self._trap_listeners.append(listener)

    def remove_trap_listener(self, listener: TrapListener) -> None:
        if listener in self._trap_listeners:
            self._trap_listeners.remove(listener)

    @contextmanager
    def _mutating(self) -> Iterator[None]:
        with self._lock:
            outermost = self._mutation_depth == 0
            before = (self._current, self._traps.depth)
            self._mutation_depth += 1
            try:
                yield
            finally:
                self._mutation_depth -= 1
            after = (self._current, self._traps.depth)
        if outermost:
            self._notify(before, after)

    def _notify(self, before: Tuple[Optional[WidgetId], int], after: Tuple[Optional[WidgetId], int]) -> None:
        old_focus, old_depth = before
        new_focus, new_depth = after
        if old_focus != new_focus:
            for listener in list(self._focus_listeners):
                self._dispatch(listener, old_focus, new_focus)
        if old_depth != new_depth:
            for trap_listener in list(self._trap_listeners):
                self._dispatch(trap_listener, new_depth)

    @staticmethod
    def _dispatch(listener: Callable[..., Any], *args: Any) -> None:
        try:
            listener(*args)
        except Exception as exc:
            LOGGER.warning("Focus listener %r raised: %s", listener, exc, exc_info=exc)

    # Registry ----------------------------------------------------------
    def register(self, widget_id: WidgetId) -> None:
        with self._mutating():
            self._registry.register(widget_id)

    def register_with_position(self, widget_id: WidgetId, x: int, y: int) -> None:
        with self._mutating():
            self._registry.register_with_position(widget_id, x, y)

    def register_with_bounds(self, widget_id: WidgetId, bounds: Rect) -> None:
        with self._mutating():
            self._registry.register_with_bounds(widget_id, bounds)

    def unregister(self, widget_id: WidgetId) -> bool:
        if not is_widget_id(widget_id):
            return False
        with self._mutating():
            removed = self._registry.unregister(widget_id)
            self._traps.purge(widget_id)
            if self._current == widget_id:
                self._current = None
                LOGGER.debug("Focused widget %s unregistered; focus cleared", widget_id)
            return removed

    def is_registered(self, widget_id: WidgetId) -> bool:
        with self._lock:
            return is_widget_id(widget_id) and widget_id in self._registry

    def registered_ids(self) -> Tuple[WidgetId, ...]:
        with self._lock:
            return self._registry.ids()

    # Focus -------------------------------------------------------------
    def focus(self, widget_id: WidgetId) -> bool:
        """Focus ``widget_id`` if it is registered; otherwise leave focus as it was."""

        with self._mutating():
            if not is_widget_id(widget_id) or widget_id not in self._registry:
                return False
            self._current = widget_id
            return True

    def blur(self) -> None:
        with self._mutating():
            self._current = None

    def current_focus(self) -> Optional[WidgetId]:
        with self._lock:
            return self._current

    def is_focused(self, widget_id: WidgetId) -> bool:
        with self._lock:
            return self._current is not None and is_widget_id(widget_id) and self._current == widget_id

    def _active_scope(self) -> Tuple[WidgetId, ...]:
        frame = self._traps.top
        if frame is not None:
            members = tuple(member for member in frame.allowed if member in self._registry)
            if members:
                return members
        return self._registry.ids()

    def _loops(self) -> bool:
        frame = self._traps.top
        return frame.config.loop_focus if frame is not None else True

    def focusable_ids(self) -> Tuple[WidgetId, ...]:
        """Ids eligible for navigation right now."""

        with self._lock:
            return self._active_scope()

    # Linear navigation -------------------------------------------------
    def next(self) -> Optional[WidgetId]:
        with self._mutating():
            target = next_in_scope(self._active_scope(), self._current, wrap=self._loops())
            if target is not None:
                self._current = target
            return self._current

    def previous(self) -> Optional[WidgetId]:
        with self._mutating():
            target = previous_in_scope(self._active_scope(), self._current, wrap=self._loops())
            if target is not None:
                self._current = target
            return self._current

    # Spatial navigation ------------------------------------------------
    def move_focus(self, direction: Direction | str) -> bool:
        resolved = Direction.parse(direction)
        if resolved is None:
            LOGGER.debug("Ignoring unknown focus direction %r", direction)
            return False
        with self._mutating():
            current = self._current
            if current is None:
                return False
            origin = self._registry.position(current)
            if origin is None:
                return False
            candidates = self._registry.positioned(self._active_scope())
            target = find_candidate(current, origin, resolved, candidates)
            if target is None:
                return False
            self._current = target
            return True

    def focus_at(self, x: int, y: int) -> bool:
        """Focus the earliest-registered widget in scope whose bounds contain ``(x, y)``."""

        with self._mutating():
            target = self._registry.widget_at(x, y, self._active_scope())
            if target is None:
                return False
            self._current = target
            return True

    # Traps -------------------------------------------------------------
    def trap_focus(self, container: Hashable, *, initial_focus: Optional[WidgetId] = None) -> None:
        """Push a trap whose members are added later with :meth:`add_to_trap`."""

        with self._mutating():
            self._traps.push(TrapFrame(container=container, saved_focus=self._current))
            LOGGER.debug("Focus trap %r started (depth=%d)", container, self._traps.depth)
            if is_widget_id(initial_focus) and initial_focus in self._registry:
                self._current = initial_focus

    def add_to_trap(self, widget_id: WidgetId) -> bool:
        if not is_widget_id(widget_id):
            return False
        with self._mutating():
            return self._traps.add_to_top(widget_id)

    def push_trap(
        self,
        container: Hashable,
        children: Iterable[WidgetId] = (),
        config: Optional[FocusTrapConfig] = None,
    ) -> None:
        config = config or FocusTrapConfig()
        members = unique_ids(child for child in children if is_widget_id(child))
        with self._mutating():
            frame = TrapFrame(container=container, allowed=members, saved_focus=self._current, config=config)
            self._traps.push(frame)
            targets = [config.initial_focus, *members] if is_widget_id(config.initial_focus) else members
            self._current = None
            if members:
                self._current = next((target for target in targets if target in self._registry), None)
            LOGGER.debug(
                "Focus trap %r pushed with %d member(s) (depth=%d, focus=%s)",
                container,
                len(members),
                self._traps.depth,
                self._current,
            )

    def pop_trap(self) -> bool:
        """Pop the active trap and restore the focus saved when it was pushed."""

        return self._pop(restore=True)

    def release_trap(self) -> bool:
        """Pop the active trap and keep the current focus."""

        return self._pop(restore=False)

    def _pop(self, *, restore: bool) -> bool:
        with self._mutating():
            frame = self._traps.pop()
            if frame is None:
                return False
            if restore and frame.config.restore_on_release:
                saved = frame.saved_focus
                self._current = saved if saved is not None and saved in self._registry else None
            LOGGER.debug(
                "Focus trap %r released (depth=%d, focus=%s)",
                frame.container,
                self._traps.depth,
                self._current,
            )
            return True

    def trap_container(self) -> Optional[Hashable]:
        with self._lock:
            frame = self._traps.top
            return frame.container if frame is not None else None

    def is_trapped(self) -> bool:
        with self._lock:
            return self._traps.depth > 0

    def trap_depth(self) -> int:
        with self._lock:
            return self._traps.depth

    def saved_focus(self) -> Optional[WidgetId]:
        with self._lock:
            frame = self._traps.top
            return frame.saved_focus if frame is not None else None

    def trap_members(self) -> Tuple[WidgetId, ...]:
        with self._lock:
            frame = self._traps.top
            return tuple(frame.allowed) if frame is not None else ()
