"""Typed access to the persisted state slices.

Each slice is stored under its own key in the ``db`` key-value table and is
read and written independently; there is no cross-slice transaction.

Slices
------
- ``transactions``: list of :class:`~spending_tracker.models.Transaction`
- ``reviewQueue``: list of Transaction pending review
- ``categories``: list of :class:`~spending_tracker.models.Category`
- ``categoryBudgets``: mapping of category name → non-negative monthly limit
- ``MonthlyIncome``: the declared monthly income, stored as entered

Reads fall back to the slice default when the key is absent. When a value is
present but does not decode, a :class:`~spending_tracker.errors.StorageReadError`
is logged and the default is returned; persisted state is advisory, so the
error never reaches the caller.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from decimal import Decimal
from typing import Annotated, Any, TypeVar

from db.client import session_scope
from db.models.kv import KvEntry
from pydantic import Field, TypeAdapter, ValidationError
from sqlalchemy import delete, select

from .categories import DEFAULT_CATEGORIES
from .config import Settings
from .errors import StorageReadError
from .logging_setup import get_logger
from .models import Category, Transaction

KEY_TRANSACTIONS = "transactions"
KEY_REVIEW_QUEUE = "reviewQueue"
KEY_CATEGORIES = "categories"
KEY_CATEGORY_BUDGETS = "categoryBudgets"
KEY_MONTHLY_INCOME = "MonthlyIncome"

ALL_KEYS: tuple[str, ...] = (
    KEY_TRANSACTIONS,
    KEY_REVIEW_QUEUE,
    KEY_CATEGORIES,
    KEY_CATEGORY_BUDGETS,
    KEY_MONTHLY_INCOME,
)

BudgetAmount = Annotated[Decimal, Field(ge=0, allow_inf_nan=False)]

_TRANSACTIONS = TypeAdapter(list[Transaction])
_CATEGORIES = TypeAdapter(list[Category])
_BUDGETS = TypeAdapter(dict[str, BudgetAmount])

T = TypeVar("T")

_logger = get_logger("spending_tracker.store")


def _decode(key: str, raw: str, adapter: TypeAdapter[T]) -> T:
    try:
        return adapter.validate_json(raw)
    except ValidationError as e:
        raise StorageReadError(key, f"{e.error_count()} validation error(s)") from e


class TrackerStore:
    """Slice-oriented facade over the ``db`` key-value table."""

    def __init__(self, *, database_url: str) -> None:
        self.database_url = database_url

    @classmethod
    def from_settings(cls, settings: Settings) -> TrackerStore:
        return cls(database_url=settings.database_url)

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"TrackerStore(database_url={self.database_url!r})"

    # -- raw key/value ------------------------------------------------------

    def read_raw(self, key: str) -> str | None:
        with session_scope(database_url=self.database_url) as session:
            return session.scalar(select(KvEntry.value).where(KvEntry.key == key))

    def write_raw(self, key: str, value: str) -> None:
        with session_scope(database_url=self.database_url) as session:
            session.merge(KvEntry(key=key, value=value))

    def keys(self) -> list[str]:
        with session_scope(database_url=self.database_url) as session:
            return list(session.scalars(select(KvEntry.key).order_by(KvEntry.key)))

    def clear(self, keys: Iterable[str] | None = None) -> None:
        """Delete the given slices (all slices when ``keys`` is ``None``)."""

        stmt = delete(KvEntry)
        if keys is not None:
            stmt = stmt.where(KvEntry.key.in_(list(keys)))
        with session_scope(database_url=self.database_url) as session:
            session.execute(stmt)

    def _load(self, key: str, adapter: TypeAdapter[T], default: Callable[[], T]) -> T:
        raw = self.read_raw(key)
        if raw is None:
            return default()
        try:
            return _decode(key, raw, adapter)
        except StorageReadError as e:
            _logger.warning("%s; falling back to default", e)
            return default()

    def _save(self, key: str, adapter: TypeAdapter[Any], value: Any) -> None:
        self.write_raw(key, adapter.dump_json(value).decode("utf-8"))

    # -- typed slices -------------------------------------------------------

    def load_transactions(self) -> list[Transaction]:
        return self._load(KEY_TRANSACTIONS, _TRANSACTIONS, list)

    def save_transactions(self, transactions: Iterable[Transaction]) -> None:
        self._save(KEY_TRANSACTIONS, _TRANSACTIONS, list(transactions))

    def load_review_queue(self) -> list[Transaction]:
        return self._load(KEY_REVIEW_QUEUE, _TRANSACTIONS, list)

    def save_review_queue(self, entries: Iterable[Transaction]) -> None:
        self._save(KEY_REVIEW_QUEUE, _TRANSACTIONS, list(entries))

    def load_categories(self) -> list[Category]:
        return self._load(KEY_CATEGORIES, _CATEGORIES, lambda: list(DEFAULT_CATEGORIES))

    def save_categories(self, categories: Iterable[Category]) -> None:
        self._save(KEY_CATEGORIES, _CATEGORIES, list(categories))

    def load_budgets(self) -> dict[str, Decimal]:
        return self._load(KEY_CATEGORY_BUDGETS, _BUDGETS, dict)

    def save_budgets(self, budgets: Mapping[str, Decimal]) -> None:
        self._save(KEY_CATEGORY_BUDGETS, _BUDGETS, dict(budgets))

    def load_monthly_income(self) -> str:
        return self.read_raw(KEY_MONTHLY_INCOME) or ""

    def save_monthly_income(self, value: str) -> None:
        self.write_raw(KEY_MONTHLY_INCOME, value.strip())


__all__ = [
    "TrackerStore",
    "ALL_KEYS",
    "KEY_TRANSACTIONS",
    "KEY_REVIEW_QUEUE",
    "KEY_CATEGORIES",
    "KEY_CATEGORY_BUDGETS",
    "KEY_MONTHLY_INCOME",
]
