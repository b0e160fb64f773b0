from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from focus_controller import input_bindings
from focus_controller.input_bindings import DEFAULT_CONFIG, BindingConfig, FocusBindingManager
from focus_core.coordinator import FocusCoordinator


def _grid() -> FocusCoordinator:
    fc = FocusCoordinator()
    fc.register_with_position(1, 0, 0)
    fc.register_with_position(2, 10, 0)
    fc.register_with_position(3, 0, 10)
    return fc


def _manager(fc: FocusCoordinator, scheme: str | None = None) -> FocusBindingManager:
    manager = FocusBindingManager(fc, BindingConfig.from_payload(DEFAULT_CONFIG))
    manager.activate(scheme)
    return manager


def test_load_creates_default_file_when_missing(tmp_path: Path) -> None:
    path = tmp_path / "keybindings.json"

    config = BindingConfig.load(path)

    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == DEFAULT_CONFIG
    assert config.active_scheme == "keyboard_default"
    assert config.source_path == path
    assert config.get_scheme().bindings["focus_next"] == ["<Tab>"]


def test_load_honours_environment_override(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "custom.json"
    payload = {
        "active_scheme": "mine",
        "schemes": {"mine": {"bindings": {"focus_next": ["n"]}}},
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    monkeypatch.setenv(input_bindings.CONFIG_PATH_ENV_VAR, str(path))

    config = BindingConfig.load()

    scheme = config.get_scheme()
    assert scheme.display_name == "mine"
    assert scheme.device_type == "keyboard"
    assert scheme.bindings == {"focus_next": ["n"]}


def test_unknown_active_scheme_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"active_scheme": "missing", "schemes": {}}), encoding="utf-8")

    with pytest.raises(ValueError, match="missing"):
        BindingConfig.load(path)


def test_single_string_binding_is_one_sequence() -> None:
    payload = {"active_scheme": "k", "schemes": {"k": {"bindings": {"focus_next": "<Tab>"}}}}
    config = BindingConfig.from_payload(payload)
    manager = FocusBindingManager(_grid(), config)
    manager.activate()

    assert config.get_scheme().bindings == {"focus_next": ["<Tab>"]}
    assert manager.action_for("<Tab>") == "focus_next"
    assert manager.action_for("<a>") is None
    assert manager.action_for("<T>") is None


def test_non_list_binding_is_rejected() -> None:
    payload = {"active_scheme": "k", "schemes": {"k": {"bindings": {"focus_next": 9}}}}

    with pytest.raises(ValueError, match="focus_next"):
        BindingConfig.from_payload(payload)


def test_get_scheme_unknown_name_raises() -> None:
    config = BindingConfig.from_payload(DEFAULT_CONFIG)

    with pytest.raises(ValueError, match="Unknown control scheme"):
        config.get_scheme("joystick")


def test_tab_sequences_drive_linear_navigation() -> None:
    fc = _grid()
    manager = _manager(fc)

    assert manager.handle_sequence("<Tab>") is True
    assert fc.current_focus() == 1
    assert manager.handle_sequence("Tab") is True
    assert fc.current_focus() == 2
    assert manager.handle_sequence("<Shift-Tab>") is True
    assert fc.current_focus() == 1


def test_arrow_sequences_drive_spatial_navigation() -> None:
    fc = _grid()
    fc.focus(1)
    manager = _manager(fc)

    manager.handle_sequence("<Right>")
    assert fc.current_focus() == 2
    manager.handle_sequence("<Left>")
    manager.handle_sequence("<Down>")
    assert fc.current_focus() == 3


def test_vim_scheme_and_trap_release() -> None:
    fc = _grid()
    fc.focus(1)
    manager = _manager(fc, "vim")
    fc.push_trap("dialog", [2, 3])

    # Bound keys are consumed even when the trap leaves nowhere to move.
    assert manager.handle_sequence("<l>") is True
    assert fc.current_focus() == 2
    assert manager.handle_sequence("<q>") is True
    assert not fc.is_trapped()
    assert fc.current_focus() == 1
    assert manager.handle_sequence("<Control-g>") is True
    assert fc.current_focus() is None


def test_unbound_sequence_is_not_consumed() -> None:
    manager = _manager(_grid())

    assert manager.handle_sequence("<F5>") is False
    assert manager.handle_sequence("   ") is False
    assert manager.action_for("<Escape>") == "release_trap"


def test_invalid_sequences_are_skipped_with_warning(caplog) -> None:
    payload = {
        "active_scheme": "odd",
        "schemes": {"odd": {"bindings": {"focus_next": ["", "<Tab>"], "focus_prev": ["<Tab>"]}}},
    }
    manager = FocusBindingManager(FocusCoordinator(), BindingConfig.from_payload(payload))

    with caplog.at_level(logging.WARNING, logger="ModernFocus.Bindings"):
        manager.activate()

    messages = [record.getMessage() for record in caplog.records]
    assert any("Skipping invalid binding for action 'focus_next'" in msg for msg in messages)
    assert any("bound to both 'focus_next' and 'focus_prev'" in msg for msg in messages)
    assert manager.action_for("<Tab>") == "focus_next"


def test_custom_action_receives_event() -> None:
    fc = _grid()
    payload = {
        "active_scheme": "custom",
        "schemes": {"custom": {"bindings": {"open_palette": ["<Control-p>"]}}},
    }
    manager = FocusBindingManager(fc, BindingConfig.from_payload(payload))
    received: list[object] = []
    manager.register_action("open_palette", received.append)
    manager.activate()

    marker = object()
    assert manager.handle_sequence("<Control-p>", marker) is True
    assert received == [marker]


def test_trigger_action_reports_handler_failure(caplog) -> None:
    manager = _manager(_grid())

    def _boom() -> None:
        raise RuntimeError("nope")

    manager.register_action("focus_next", _boom)

    with caplog.at_level(logging.WARNING, logger="ModernFocus.Bindings"):
        assert manager.trigger_action("focus_next") is False
    assert manager.trigger_action("does_not_exist") is False
    assert any("Action 'focus_next' handler raised" in r.getMessage() for r in caplog.records)


def test_get_sequences_normalizes() -> None:
    payload = {
        "active_scheme": "s",
        "schemes": {"s": {"bindings": {"focus_up": ["Up", " <k> ", ""]}}},
    }
    manager = FocusBindingManager(FocusCoordinator(), BindingConfig.from_payload(payload))

    assert manager.get_sequences("focus_up") == ["<Up>", "<k>"]
    assert manager.has_action("focus_up")
    assert not manager.has_action("open_palette")
