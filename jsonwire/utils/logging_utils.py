"""Loguru helpers for library-scoped logging."""

from __future__ import annotations

import sys

from loguru import logger

_SINK_IDS: dict[str, int] = {}

LOG_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> | <level>{level: <8}</level> | <cyan>{name}</cyan> | <level>{message}</level>"


def configure_logging(enabled: bool = True, level: str = "INFO") -> None:
    """Enable or silence jsonwire log output and keep one stderr sink at the given level."""
    if not enabled:
        logger.disable("jsonwire")
        return
    logger.enable("jsonwire")
    previous = _SINK_IDS.pop("stderr", None)
    if previous is not None:
        logger.remove(previous)
    _SINK_IDS["stderr"] = logger.add(
        sys.stderr,
        level=level.upper(),
        format=LOG_FORMAT,
        filter="jsonwire",
        backtrace=False,
        diagnose=False,
    )
