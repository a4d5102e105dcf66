"""CSV export in the exact shape the importer recognizes as a re-export.

Columns (in order): ``Authorized Date, Description, Amount, Detailed Category``.
``Amount`` carries a leading ``-`` for expenses and no sign for income. The
default file name starts with ``exported`` so importing it back is detected as
our own export and skips reclassification and review.
"""

from __future__ import annotations

import csv
from collections.abc import Iterable
from datetime import date
from os import PathLike
from pathlib import Path
from typing import TextIO

from .ingest.csv_reader import REEXPORT_PREFIX
from .models import Transaction
from .normalizers import COL_AMOUNT, COL_DATE, COL_DESCRIPTION, COL_DETAILED_CATEGORY

EXPORT_COLUMNS: tuple[str, ...] = (COL_DATE, COL_DESCRIPTION, COL_AMOUNT, COL_DETAILED_CATEGORY)


def export_filename(today: date | None = None) -> str:
    """Return ``exported-transactions-YYYY-MM-DD.csv`` for ``today``."""

    d = today or date.today()
    return f"{REEXPORT_PREFIX}-transactions-{d.isoformat()}.csv"


def format_amount(tx: Transaction) -> str:
    sign = "-" if tx.is_expense else ""
    return f"{sign}{tx.amount:.2f}"


def write_transactions(transactions: Iterable[Transaction], stream: TextIO) -> int:
    """Write ``transactions`` as CSV to ``stream``; returns the row count."""

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    count = 0
    for tx in transactions:
        writer.writerow([tx.date, tx.description, format_amount(tx), tx.category])
        count += 1
    return count


def export_transactions(
    transactions: Iterable[Transaction], destination: str | PathLike[str] | TextIO
) -> int:
    """Export to a file path (created/overwritten) or an open text stream."""

    if isinstance(destination, str | PathLike):
        path = Path(destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="") as f:
            return write_transactions(transactions, f)
    return write_transactions(transactions, destination)


__all__ = [
    "EXPORT_COLUMNS",
    "export_filename",
    "export_transactions",
    "format_amount",
    "write_transactions",
]
