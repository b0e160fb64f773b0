"""Logger wiring for the ModernFocus logger tree.

Dev builds (a PEP 440 ``.devN`` release, or a ``-dev`` suffix) log at DEBUG
regardless of the requested level. ``MODERN_FOCUS_DEV_MODE`` overrides the
build check in either direction.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Mapping, Optional

from ._version import __version__

LOGGER_NAME = "ModernFocus"
LOG_TAG = LOGGER_NAME
DEFAULT_LOG_LEVEL = logging.INFO
DEV_MODE_ENV_VAR = "MODERN_FOCUS_DEV_MODE"

_DEV_MARKER = re.compile(r"(?:\.dev\d*|-dev)$", re.IGNORECASE)
_ENV_SWITCHES = {
    "1": True,
    "true": True,
    "yes": True,
    "on": True,
    "0": False,
    "false": False,
    "no": False,
    "off": False,
}
_dev_notice_emitted = False


def dev_mode_override(environ: Optional[Mapping[str, str]] = None) -> Optional[bool]:
    """Return the forced dev-mode state from the environment, or None when unset or unrecognised."""

    raw = (environ if environ is not None else os.environ).get(DEV_MODE_ENV_VAR)
    if raw is None:
        return None
    return _ENV_SWITCHES.get(raw.strip().lower())


def is_dev_build(version: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> bool:
    override = dev_mode_override(environ)
    if override is not None:
        return override
    identifier = (__version__ if version is None else version).strip()
    return bool(_DEV_MARKER.search(identifier))


def effective_log_level(level: Optional[int] = None) -> int:
    """Return the level ModernFocus loggers should use; dev builds force DEBUG."""

    if level is None:
        level = DEFAULT_LOG_LEVEL
    if is_dev_build() and level > logging.DEBUG:
        return logging.DEBUG
    return level


def configure_logger(level: Optional[int] = None) -> logging.Logger:
    global _dev_notice_emitted

    requested = DEFAULT_LOG_LEVEL if level is None else level
    effective = effective_log_level(requested)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(effective)
    if not any(getattr(handler, "_modern_focus_handler", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler._modern_focus_handler = True  # type: ignore[attr-defined]
        formatter = logging.Formatter(f"[%(asctime)s] [{LOG_TAG}] %(message)s", "%H:%M:%S")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.propagate = False
    if effective < requested and not _dev_notice_emitted:
        _dev_notice_emitted = True
        logger.info(
            "Dev build %s forcing ModernFocus logger to DEBUG (requested %s)",
            __version__,
            logging.getLevelName(requested),
        )
    return logger
