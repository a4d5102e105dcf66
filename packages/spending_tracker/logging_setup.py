"""Logging for the ``spending_tracker`` package.

Modules log through loggers named under the ``spending_tracker`` namespace
and never install handlers themselves. The CLI installs the single stream
handler with :func:`configure_logging`; until then the package logger only
carries a ``NullHandler`` so library use stays silent.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

from .config import LOG_LEVEL_ENV

PACKAGE_LOGGER = "spending_tracker"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_installed: logging.Handler | None = None
_null_handler = logging.NullHandler()


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` into a numeric logging level.

    ``None`` or a blank string defers to ``$SPENDING_TRACKER_LOG_LEVEL``.
    Names are case-insensitive; unknown names resolve to ``INFO``.
    """

    if isinstance(level, int):
        return level
    text = (level or "").strip() or os.environ.get(LOG_LEVEL_ENV, "").strip()
    if text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text.upper(), logging.INFO)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> logging.Handler:
    """Install the package stream handler and return it.

    Only the first call has an effect; later calls return the handler that is
    already installed.
    """

    global _installed
    if _installed is not None:
        return _installed

    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.removeHandler(_null_handler)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    pkg.addHandler(handler)
    pkg.setLevel(resolve_level(level))
    pkg.propagate = False
    _installed = handler
    return handler


def reset_logging() -> None:
    """Remove the installed handler and restore propagation (tests)."""

    global _installed
    pkg = logging.getLogger(PACKAGE_LOGGER)
    if _installed is not None:
        pkg.removeHandler(_installed)
        _installed = None
    pkg.setLevel(logging.NOTSET)
    pkg.propagate = True


def get_logger(name: str) -> logging.Logger:
    if _installed is None:
        pkg = logging.getLogger(PACKAGE_LOGGER)
        if _null_handler not in pkg.handlers:
            pkg.addHandler(_null_handler)
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "reset_logging", "resolve_level"]
