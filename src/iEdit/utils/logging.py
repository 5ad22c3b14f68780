"""Logging helpers for iEdit."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def get_logger() -> logging.Logger:
    """Return the package logger configured for iEdit."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("iEdit")
        if not _LOGGER.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
            handler.setFormatter(formatter)
            _LOGGER.addHandler(handler)
        _LOGGER.setLevel(logging.INFO)
    return _LOGGER


def set_level(level: str | int) -> None:
    """Adjust the package logger level from a name such as ``"debug"``."""

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    get_logger().setLevel(level)
