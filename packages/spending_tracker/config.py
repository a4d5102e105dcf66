"""Runtime settings read from the environment.

The CLI loads a local ``.env`` (``python-dotenv``, no override) before calling
:func:`load_settings`; library callers may construct :class:`Settings`
directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATABASE_URL_ENV = "SPENDING_TRACKER_DATABASE_URL"
LOG_LEVEL_ENV = "SPENDING_TRACKER_LOG_LEVEL"
DEFAULT_DB_FILENAME = ".spending_tracker.db"


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str
    log_level: str | None = None


def _default_database_url() -> str:
    return f"sqlite+pysqlite:///{(Path.cwd() / DEFAULT_DB_FILENAME).resolve()}"


def load_settings(*, database_url: str | None = None) -> Settings:
    """Resolve settings: explicit argument, then env vars, then defaults.

    Database URL precedence: ``database_url`` argument,
    ``SPENDING_TRACKER_DATABASE_URL``, ``DATABASE_URL``, then a SQLite file in
    the current working directory.
    """

    url = (
        database_url
        or os.getenv(DATABASE_URL_ENV)
        or os.getenv("DATABASE_URL")
        or _default_database_url()
    )
    level = os.getenv(LOG_LEVEL_ENV) or None
    return Settings(database_url=url.strip(), log_level=level)


__all__ = ["Settings", "load_settings", "DATABASE_URL_ENV", "LOG_LEVEL_ENV"]
