"""Row normalizer: raw CSV record → validated transaction candidate.

Each recognized column is read by its exact (case-sensitive) header name.
Amounts must parse as finite numbers; anything else raises
:class:`~spending_tracker.errors.InvalidAmount`, which the pipeline treats as
fatal for the whole batch.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from .errors import InvalidAmount
from .models import RawRecord, TransactionType, quantize_amount

COL_DATE = "Authorized Date"
COL_DESCRIPTION = "Description"
COL_AMOUNT = "Amount"
COL_DETAILED_CATEGORY = "Detailed Category"
COL_PRIMARY_CATEGORY = "Primary Category"

REQUIRED_COLUMNS: frozenset[str] = frozenset({COL_DATE, COL_DESCRIPTION, COL_AMOUNT})

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


@dataclass(frozen=True, slots=True)
class NormalizedRow:
    """A validated candidate built from one raw record."""

    date: str
    description: str
    signed_amount: Decimal
    detailed_category: str | None
    primary_category: str | None

    @property
    def type(self) -> TransactionType:
        return "expense" if self.signed_amount < 0 else "income"

    @property
    def amount(self) -> Decimal:
        return abs(self.signed_amount)

    @property
    def classification_text(self) -> str:
        """Description and bank categories joined for keyword matching only."""

        parts = (self.description, self.detailed_category, self.primary_category)
        return " ".join(p for p in parts if p)


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    cleaned = re.sub(r"\s+", " ", str(value)).strip()
    return cleaned or None


def _normalize_date(value: Any) -> str:
    s = "" if value is None else str(value).strip()
    if not s:
        return ""
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date().isoformat()
        except ValueError:
            continue
    # Keep unrecognized dates verbatim; month-based reports skip them.
    return s


def parse_amount(raw: Any) -> Decimal | None:
    """Parse a signed amount, returning ``None`` when it is not a finite number."""

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, int | float):
        value = Decimal(str(raw))
    else:
        s = str(raw).strip()
        if not _NUMBER_RE.fullmatch(s):
            return None
        try:
            value = Decimal(s)
        except InvalidOperation:
            return None
    if not value.is_finite():
        return None
    try:
        return quantize_amount(value)
    except InvalidOperation:
        # More digits than the decimal context can hold at cent precision
        return None


def normalize_row(row: RawRecord, *, row_number: int | None = None) -> NormalizedRow:
    """Validate one raw record and return its normalized candidate.

    Raises
    ------
    InvalidAmount
        When ``Amount`` is missing, empty, or not a finite number.
    """

    description = _clean_text(row.get(COL_DESCRIPTION)) or ""
    raw_amount = row.get(COL_AMOUNT)
    signed = parse_amount(raw_amount)
    if signed is None:
        raise InvalidAmount(description, raw_amount, row_number=row_number)

    return NormalizedRow(
        date=_normalize_date(row.get(COL_DATE)),
        description=description,
        signed_amount=signed,
        detailed_category=_clean_text(row.get(COL_DETAILED_CATEGORY)),
        primary_category=_clean_text(row.get(COL_PRIMARY_CATEGORY)),
    )


__all__ = [
    "COL_DATE",
    "COL_DESCRIPTION",
    "COL_AMOUNT",
    "COL_DETAILED_CATEGORY",
    "COL_PRIMARY_CATEGORY",
    "REQUIRED_COLUMNS",
    "NormalizedRow",
    "normalize_row",
    "parse_amount",
]
