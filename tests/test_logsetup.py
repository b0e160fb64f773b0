from __future__ import annotations

import logging

import pytest

import focus_core
from focus_core import logsetup


@pytest.fixture
def clean_logger(monkeypatch):
    logger = logging.getLogger(logsetup.LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    monkeypatch.setattr(logsetup, "_dev_notice_emitted", False)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_configure_logger_is_idempotent(clean_logger, monkeypatch) -> None:
    monkeypatch.setenv(logsetup.DEV_MODE_ENV_VAR, "0")
    logsetup.configure_logger()
    logger = logsetup.configure_logger()

    tagged = [h for h in logger.handlers if getattr(h, "_modern_focus_handler", False)]
    assert logger is clean_logger
    assert logger.level == logging.INFO
    assert len(tagged) == 1
    assert logger.propagate is False
    assert "[ModernFocus]" in tagged[0].formatter._fmt


def test_dev_override_forces_debug_and_announces_once(clean_logger, caplog, monkeypatch) -> None:
    monkeypatch.setenv(logsetup.DEV_MODE_ENV_VAR, "yes")
    clean_logger.addHandler(caplog.handler)

    assert logsetup.configure_logger(logging.WARNING).level == logging.DEBUG
    logsetup.configure_logger(logging.WARNING)

    notices = [r for r in caplog.records if "forcing ModernFocus logger to DEBUG" in r.getMessage()]
    assert len(notices) == 1
    assert "requested WARNING" in notices[0].getMessage()

    monkeypatch.setenv(logsetup.DEV_MODE_ENV_VAR, "off")
    assert logsetup.configure_logger(logging.WARNING).level == logging.WARNING


def test_packaged_version_is_a_dev_build(monkeypatch) -> None:
    monkeypatch.delenv(logsetup.DEV_MODE_ENV_VAR, raising=False)

    assert focus_core.__version__.endswith(".dev0")
    assert logsetup.is_dev_build() is True
    assert logsetup.effective_log_level(logging.ERROR) == logging.DEBUG


@pytest.mark.parametrize(
    "identifier, expected",
    [
        ("0.1.0.dev0", True),
        ("2.3.dev", True),
        ("0.7.6-dev", True),
        ("1.0.0", False),
        ("1.0.0rc1", False),
        ("devtools-1.0", False),
        ("", False),
    ],
)
def test_is_dev_build_markers(identifier, expected) -> None:
    assert logsetup.is_dev_build(identifier, environ={}) is expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1", True),
        (" On ", True),
        ("no", False),
        ("maybe", None),
    ],
)
def test_dev_mode_override_parsing(raw, expected) -> None:
    environ = {logsetup.DEV_MODE_ENV_VAR: raw}

    assert logsetup.dev_mode_override(environ) is expected
    if expected is not None:
        assert logsetup.is_dev_build("1.0.0", environ=environ) is expected
    else:
        assert logsetup.is_dev_build("1.0.0", environ=environ) is False


def test_dev_mode_override_unset() -> None:
    assert logsetup.dev_mode_override({}) is None
