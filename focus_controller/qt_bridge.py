"""PyQt6 glue: focus-change signals and a key-press filter driving focus bindings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from PyQt6.QtCore import QEvent, QObject, Qt, pyqtSignal

from focus_core.coordinator import FocusCoordinator

if TYPE_CHECKING:
    from focus_controller.input_bindings import FocusBindingManager

LOGGER = logging.getLogger("ModernFocus.Qt")


def _as_int(value: Any) -> int:
    return int(getattr(value, "value", value))


_NAMED_KEYS = {
    _as_int(Qt.Key.Key_Tab): "Tab",
    _as_int(Qt.Key.Key_Backtab): "Tab",
    _as_int(Qt.Key.Key_Up): "Up",
    _as_int(Qt.Key.Key_Down): "Down",
    _as_int(Qt.Key.Key_Left): "Left",
    _as_int(Qt.Key.Key_Right): "Right",
    _as_int(Qt.Key.Key_Escape): "Escape",
    _as_int(Qt.Key.Key_Return): "Return",
    _as_int(Qt.Key.Key_Enter): "KP_Enter",
    _as_int(Qt.Key.Key_Space): "space",
}
_BACKTAB = _as_int(Qt.Key.Key_Backtab)
_KEY_A = _as_int(Qt.Key.Key_A)
_KEY_Z = _as_int(Qt.Key.Key_Z)
_SHIFT = _as_int(Qt.KeyboardModifier.ShiftModifier)
_CONTROL = _as_int(Qt.KeyboardModifier.ControlModifier)
_ALT = _as_int(Qt.KeyboardModifier.AltModifier)


def qt_key_sequence(key: Any, modifiers: Any = Qt.KeyboardModifier.NoModifier) -> Optional[str]:
    """Translate a Qt key code and modifiers into a ``<Modifier-Key>`` binding sequence."""

    code = _as_int(key)
    mods = _as_int(modifiers)
    shift = bool(mods & _SHIFT) or code == _BACKTAB

    if code in _NAMED_KEYS:
        name = _NAMED_KEYS[code]
    elif _KEY_A <= code <= _KEY_Z:
        letter = chr(code)
        name = letter if shift else letter.lower()
        shift = False
    else:
        return None

    prefixes = []
    if mods & _CONTROL:
        prefixes.append("Control")
    if mods & _ALT:
        prefixes.append("Alt")
    if shift:
        prefixes.append("Shift")
    return "<" + "-".join([*prefixes, name]) + ">"


class FocusSignals(QObject):
    """Re-emits coordinator changes as Qt signals for Qt-hosted renderers.

    Signals:
        focus_changed(object): new focused id, or None
        trap_depth_changed(int): trap depth after a push or pop
    """

    focus_changed = pyqtSignal(object)
    trap_depth_changed = pyqtSignal(int)

    def __init__(self, coordinator: FocusCoordinator, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._coordinator = coordinator
        coordinator.add_focus_listener(self._on_focus_changed)
        coordinator.add_trap_listener(self._on_trap_changed)

    def detach(self) -> None:
        self._coordinator.remove_focus_listener(self._on_focus_changed)
        self._coordinator.remove_trap_listener(self._on_trap_changed)

    def _on_focus_changed(self, _old: Optional[int], new: Optional[int]) -> None:
        self.focus_changed.emit(new)

    def _on_trap_changed(self, depth: int) -> None:
        self.trap_depth_changed.emit(depth)


class FocusKeyFilter(QObject):
    """Event filter that consumes key presses bound to focus actions."""

    def __init__(self, bindings: "FocusBindingManager", parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._bindings = bindings

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if event.type() != QEvent.Type.KeyPress:
            return False
        sequence = qt_key_sequence(event.key(), event.modifiers())  # type: ignore[attr-defined]
        if sequence is None:
            return False
        handled = self._bindings.handle_sequence(sequence, event)
        if handled:
            LOGGER.debug("Key %s dispatched to focus binding", sequence)
        return handled
