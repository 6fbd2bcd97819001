"""Centralized logging configuration for the tracker.

- ``configure_logging(...)``: attach a single ``StreamHandler`` to the
  ``"tally"`` root logger. Called once by ``main.py`` at startup.
- ``get_logger(name)``: acquire a ``"tally.<area>"`` logger; attaches a
  ``NullHandler`` to the root until configuration runs so library use stays
  silent.

Modules never attach their own handlers.
"""

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "tally"
_CONFIGURED = False


def _parse_level_name(value: str) -> int | None:
    value = value.strip().upper()
    if value.isdigit():
        return int(value)
    numeric = getattr(logging, value, None)
    return numeric if isinstance(numeric, int) else None


def _parse_level(level: int | str | None) -> int:
    """Argument first, then ``TALLY_LOG_LEVEL``; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        parsed = _parse_level_name(level)
        if parsed is not None:
            return parsed
    env_val = os.getenv("TALLY_LOG_LEVEL")
    if env_val:
        parsed = _parse_level_name(env_val)
        if parsed is not None:
            return parsed
    return logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configure the ``tally`` logger exactly once.

    ``level`` falls back to ``TALLY_LOG_LEVEL`` and then INFO.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(
        logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s %(message)s")
    )

    logger.setLevel(resolved)
    logger.addHandler(handler)
    logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
