"""CSV reading and provenance detection for imported transaction files.

Header contract (exact, case-sensitive names):
``Authorized Date, Description, Amount`` are required;
``Detailed Category`` and ``Primary Category`` are optional. Other columns
are carried through untouched and ignored downstream.

Failure modes
-------------
- Missing required columns, no header, or malformed CSV → ``ParseError``.
- Header present but no data rows → ``EmptyOrUnreadableFile``.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import Any, TextIO

from ..errors import EmptyOrUnreadableFile, ParseError
from ..normalizers import REQUIRED_COLUMNS

REEXPORT_PREFIX = "exported"

type CsvSource = str | PathLike[str] | TextIO


def is_reexport_filename(filename_hint: str | PathLike[str] | None) -> bool:
    """Return True when the file name marks one of our own exports.

    Only the base name is inspected; directories are ignored.
    """

    if filename_hint is None:
        return False
    name = Path(filename_hint).name
    return name.startswith(REEXPORT_PREFIX)


def _is_blank(row: Mapping[str, Any]) -> bool:
    return all(v is None or (isinstance(v, str) and not v.strip()) for v in row.values())


def read_rows_from_stream(stream: TextIO, *, source: str = "<stream>") -> list[dict[str, Any]]:
    """Parse ``stream`` into header-keyed rows, skipping blank lines."""

    text = stream.read()
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"{source} is not UTF-8 text: {e}") from e
    # Tolerate a UTF-8 BOM left by spreadsheet tools
    text = text.lstrip("\ufeff")
    if not text.strip():
        raise EmptyOrUnreadableFile(f"{source} is empty")

    try:
        reader = csv.DictReader(io.StringIO(text, newline=""))
        headers = [h.strip() for h in (reader.fieldnames or []) if h is not None]
        if not headers:
            raise ParseError(f"CSV appears to have no header row: {source}")
        missing = sorted(h for h in REQUIRED_COLUMNS if h not in headers)
        if missing:
            raise ParseError(
                f"CSV header mismatch in {source}. Missing columns: " + ", ".join(missing)
            )
        reader.fieldnames = headers
        rows = [dict(r) for r in reader if not _is_blank(r)]
    except csv.Error as e:
        raise ParseError(f"Failed to parse CSV {source}: {e}") from e

    if not rows:
        raise EmptyOrUnreadableFile(f"No transaction rows found in {source}")
    return rows


def read_rows(source: CsvSource) -> list[dict[str, Any]]:
    """Read a CSV path or open text stream into header-keyed rows."""

    if isinstance(source, str | PathLike):
        path = Path(source)
        try:
            with path.open(encoding="utf-8", newline="") as f:
                return read_rows_from_stream(f, source=str(path))
        except FileNotFoundError as e:
            raise ParseError(f"File not found: {path}") from e
        except PermissionError as e:
            raise ParseError(f"Permission denied: {path}") from e
        except UnicodeDecodeError as e:
            raise ParseError(f"{path} is not UTF-8 text: {e}") from e
    return read_rows_from_stream(source, source=str(getattr(source, "name", "<stream>")))


__all__ = [
    "REEXPORT_PREFIX",
    "CsvSource",
    "is_reexport_filename",
    "read_rows",
    "read_rows_from_stream",
]
