"""Configurable control schemes mapping key sequences to focus actions."""

from __future__ import annotations

import inspect
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from focus_core.geometry import Direction

if TYPE_CHECKING:
    from focus_core.coordinator import FocusCoordinator

DEFAULT_CONFIG_PATH = Path(__file__).with_name("keybindings.json")
CONFIG_PATH_ENV_VAR = "MODERN_FOCUS_KEYBINDINGS_PATH"
LOGGER = logging.getLogger("ModernFocus.Bindings")

# Default layout that can be extended by the user later on.
DEFAULT_CONFIG = {
    "active_scheme": "keyboard_default",
    "schemes": {
        "keyboard_default": {
            "device_type": "keyboard",
            "display_name": "Keyboard (default)",
            "bindings": {
                "focus_next": ["<Tab>"],
                "focus_prev": ["<Shift-Tab>"],
                "focus_up": ["<Up>"],
                "focus_down": ["<Down>"],
                "focus_left": ["<Left>"],
                "focus_right": ["<Right>"],
                "release_trap": ["<Escape>"],
            },
        },
        "vim": {
            "device_type": "keyboard",
            "display_name": "Vim keys",
            "bindings": {
                "focus_next": ["<Tab>"],
                "focus_prev": ["<Shift-Tab>"],
                "focus_up": ["<k>"],
                "focus_down": ["<j>"],
                "focus_left": ["<h>"],
                "focus_right": ["<l>"],
                "release_trap": ["<Escape>", "<q>"],
                "clear_focus": ["<Control-g>"],
            },
        },
    },
}


@dataclass
class ControlScheme:
    """Container for a set of bindings and some metadata."""

    name: str
    device_type: str
    display_name: str
    bindings: Dict[str, List[str]]


def _sequence_list(scheme: str, action: str, inputs: object) -> List[str]:
    """A lone string is one sequence; anything else must be a list of them."""

    if inputs is None:
        return []
    if isinstance(inputs, str):
        return [inputs]
    if isinstance(inputs, (list, tuple)):
        return list(inputs)
    raise ValueError(
        f"Bindings for action '{action}' in scheme '{scheme}' must be a string or a list, got {inputs!r}"
    )


@dataclass
class BindingConfig:
    """Representation of the configuration file contents."""

    schemes: Dict[str, ControlScheme]
    active_scheme: str
    source_path: Path

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "BindingConfig":
        """Load config from disk, creating the default file if missing."""

        path = path or Path(os.environ.get(CONFIG_PATH_ENV_VAR, DEFAULT_CONFIG_PATH))
        if not path.exists():
            path.write_text(json.dumps(DEFAULT_CONFIG, indent=2), encoding="utf-8")

        payload = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_payload(payload, source_path=path)

    @classmethod
    def from_payload(cls, payload: Dict[str, object], source_path: Path = DEFAULT_CONFIG_PATH) -> "BindingConfig":
        raw_schemes = payload.get("schemes")
        schemes = {
            name: ControlScheme(
                name=name,
                device_type=entry.get("device_type", "keyboard"),
                display_name=entry.get("display_name", name),
                bindings={
                    action: _sequence_list(name, action, inputs)
                    for action, inputs in (entry.get("bindings") or {}).items()
                },
            )
            for name, entry in (raw_schemes if isinstance(raw_schemes, dict) else {}).items()
            if isinstance(entry, dict)
        }

        active = payload.get("active_scheme")
        if active not in schemes:
            raise ValueError(
                f"Active scheme '{active}' is not defined in keybindings file {source_path}"
            )

        return cls(schemes=schemes, active_scheme=active, source_path=source_path)

    def get_scheme(self, name: Optional[str] = None) -> ControlScheme:
        """Return the requested scheme or the currently active one."""

        scheme_name = name or self.active_scheme
        try:
            return self.schemes[scheme_name]
        except KeyError as exc:
            raise ValueError(f"Unknown control scheme '{scheme_name}'") from exc


def _move(coordinator: "FocusCoordinator", direction: Direction) -> Callable[[], bool]:
    def _handler() -> bool:
        return coordinator.move_focus(direction)

    return _handler


class FocusBindingManager:
    """Routes normalized key sequences from the active scheme to coordinator actions."""

    def __init__(self, coordinator: "FocusCoordinator", config: BindingConfig) -> None:
        self.coordinator = coordinator
        self.config = config
        self._handlers: Dict[str, Callable] = {}
        self._cached_wrappers: Dict[str, Callable] = {}
        self._sequence_actions: Dict[str, str] = {}
        self._register_default_actions()

    def _register_default_actions(self) -> None:
        coordinator = self.coordinator
        self.register_action("focus_next", coordinator.next)
        self.register_action("focus_prev", coordinator.previous)
        self.register_action("focus_up", _move(coordinator, Direction.UP))
        self.register_action("focus_down", _move(coordinator, Direction.DOWN))
        self.register_action("focus_left", _move(coordinator, Direction.LEFT))
        self.register_action("focus_right", _move(coordinator, Direction.RIGHT))
        self.register_action("release_trap", coordinator.pop_trap)
        self.register_action("clear_focus", coordinator.blur)

    def register_action(self, action_name: str, handler: Callable) -> None:
        """Associate an action identifier with a callable."""

        self._handlers[action_name] = handler
        # Drop cached wrapper so a future dispatch re-evaluates the signature.
        self._cached_wrappers.pop(action_name, None)

    def activate(self, scheme_name: Optional[str] = None) -> None:
        """Build the sequence table for the requested or active scheme."""

        self._sequence_actions.clear()
        scheme = self.config.get_scheme(scheme_name)
        for action, sequences in scheme.bindings.items():
            if action not in self._handlers:
                LOGGER.debug("No handler registered for action '%s'; skipping", action)
                continue
            for sequence in sequences:
                try:
                    normalized = self._normalize_sequence(sequence)
                except Exception as exc:
                    LOGGER.warning(
                        "Skipping invalid binding for action '%s': sequence='%s' (%s)",
                        action,
                        sequence,
                        exc,
                    )
                    continue
                previous = self._sequence_actions.get(normalized)
                if previous is not None and previous != action:
                    LOGGER.warning(
                        "Sequence '%s' is bound to both '%s' and '%s'; keeping '%s'",
                        normalized,
                        previous,
                        action,
                        previous,
                    )
                    continue
                self._sequence_actions[normalized] = action

    def _get_wrapped_handler(self, action: str) -> Callable:
        if action in self._cached_wrappers:
            return self._cached_wrappers[action]

        handler = self._handlers[action]
        takes_event = self._handler_accepts_event(handler)

        def _callback(event: object) -> object:
            if takes_event:
                return handler(event)
            return handler()

        self._cached_wrappers[action] = _callback
        return _callback

    @staticmethod
    def _handler_accepts_event(handler: Callable) -> bool:
        try:
            signature = inspect.signature(handler)
        except (TypeError, ValueError):
            return False
        params = list(signature.parameters.values())
        return len(params) >= 1

    @staticmethod
    def _normalize_sequence(sequence: str) -> str:
        seq = sequence.strip()
        if not seq:
            raise ValueError("Binding sequence cannot be empty")
        if not seq.startswith("<"):
            seq = f"<{seq}>"
        return seq

    def action_for(self, sequence: str) -> Optional[str]:
        try:
            normalized = self._normalize_sequence(sequence)
        except ValueError:
            return None
        return self._sequence_actions.get(normalized)

    def handle_sequence(self, sequence: str, event: object | None = None) -> bool:
        """Dispatch a key sequence; return True when an action consumed it."""

        action = self.action_for(sequence)
        if action is None:
            return False
        return self._invoke(action, event)

    def get_sequences(self, action_name: str, scheme_name: Optional[str] = None) -> List[str]:
        """Return normalized sequences for the requested action."""

        scheme = self.config.get_scheme(scheme_name)
        sequences = scheme.bindings.get(action_name, [])
        normalized: List[str] = []
        for sequence in sequences:
            try:
                normalized.append(self._normalize_sequence(sequence))
            except Exception:
                continue
        return normalized

    def trigger_action(self, action_name: str) -> bool:
        """Invoke a registered action without a key event."""

        if action_name not in self._handlers:
            return False
        return self._invoke(action_name, None)

    def _invoke(self, action_name: str, event: object | None) -> bool:
        callback = self._get_wrapped_handler(action_name)
        try:
            callback(event)
        except Exception as exc:
            LOGGER.warning("Action '%s' handler raised: %s", action_name, exc)
            return False
        return True

    def has_action(self, action_name: str) -> bool:
        """Return True if an action handler is registered."""

        return action_name in self._handlers
