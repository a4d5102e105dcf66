"""Pytest configuration for test isolation.

Every test gets its own SQLite database file under ``tmp_path`` (exported via
``SPENDING_TRACKER_DATABASE_URL``) and runs with ``tmp_path`` as the working
directory, so default export files and ``.env`` lookups never touch the
repository tree. Cached engines and the package logger are reset afterwards.
"""

# ruff: noqa: E402
from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

# Make sure the workspace package dirs are on sys.path so `spending_tracker`
# and `db` are importable without an install.
_ROOT = Path(__file__).resolve().parents[1]
_PATHS = [_ROOT / "packages", _ROOT / "libs" / "db" / "src", _ROOT]
sys.path[:0] = [str(p) for p in _PATHS if str(p) not in sys.path]

import pytest
from db.client import dispose_engines

from spending_tracker.logging_setup import reset_logging
from spending_tracker.store import TrackerStore


@pytest.fixture(autouse=True)
def _isolate_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[str]:
    """Point the store at a per-test database and clear process-wide state."""

    db_file = tmp_path / "tracker.db"
    url = f"sqlite+pysqlite:///{db_file}"
    monkeypatch.setenv("SPENDING_TRACKER_DATABASE_URL", url)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("SPENDING_TRACKER_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    yield url
    dispose_engines()
    reset_logging()


@pytest.fixture
def database_url() -> str:
    return os.environ["SPENDING_TRACKER_DATABASE_URL"]


@pytest.fixture
def store(database_url: str) -> TrackerStore:
    return TrackerStore(database_url=database_url)
