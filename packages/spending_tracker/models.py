"""Data models and type aliases for ``spending_tracker``.

``Transaction`` and ``Category`` are pydantic models because they round-trip
through the persistent store and must be re-validated on load. Results that
only live in process memory are frozen dataclasses.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

# ---------------------------------------------------------------------------
# Raw input
# ---------------------------------------------------------------------------

# One CSV row keyed by header name, values as read from the file. Recognized
# keys: "Authorized Date", "Description", "Amount", "Detailed Category",
# "Primary Category". Unknown keys are ignored.
type RawRecord = Mapping[str, Any]

type TransactionType = Literal["income", "expense"]

CENTS = Decimal("0.01")


def quantize_amount(value: Decimal) -> Decimal:
    """Round a monetary value to 2 decimal places (half-up)."""

    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


# ---------------------------------------------------------------------------
# Persisted records
# ---------------------------------------------------------------------------


class Transaction(BaseModel):
    """A single imported transaction.

    ``amount`` is always a non-negative magnitude; the direction of the money
    lives in ``type`` and is never re-derived from ``amount``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    date: str
    description: str
    amount: Decimal
    type: Literal["income", "expense"]
    category: str

    @field_validator("amount")
    @classmethod
    def _amount_is_magnitude(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("amount must be a finite number")
        if v < 0:
            raise ValueError("amount must be a non-negative magnitude")
        try:
            return quantize_amount(v)
        except InvalidOperation:
            raise ValueError("amount has too many digits to store in cents") from None

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("id must be non-empty")
        return v

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    @property
    def signed_amount(self) -> Decimal:
        return -self.amount if self.is_expense else self.amount

    def with_category(self, category: str) -> Transaction:
        return self.model_copy(update={"category": category})


class Category(BaseModel):
    """A catalog entry. ``name`` is the identity key; ``color`` is display-only."""

    model_config = ConfigDict(frozen=True, extra="ignore", str_strip_whitespace=True)

    name: str
    color: str = ""


# ---------------------------------------------------------------------------
# Pipeline and API results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IngestResult:
    """Outcome of one ingestion batch.

    ``clean`` holds every accepted transaction in input order and is what gets
    merged into the main collection; flagged rows appear there tagged
    ``"Needs Review"``. ``needs_review`` holds the same flagged rows (same ids)
    with their pre-sentinel category, ready for the review queue.
    """

    clean: tuple[Transaction, ...] = ()
    needs_review: tuple[Transaction, ...] = ()
    ignored_count: int = 0


@dataclass(frozen=True, slots=True)
class ImportSummary:
    appended: int
    flagged_for_review: int
    ignored: int = 0
    reexport: bool = False
    transaction_ids: tuple[str, ...] = field(default=(), repr=False)


__all__ = [
    "RawRecord",
    "TransactionType",
    "Transaction",
    "Category",
    "IngestResult",
    "ImportSummary",
    "quantize_amount",
    "CENTS",
]
