"""Public API used by the presentation layer (CLI or any other host).

Every state-changing call follows the same shape: load the slices it needs
from the :class:`~spending_tracker.store.TrackerStore`, compute, then write the
slices back. Calls are serialized by a process-wide lock so that a second
import observes the first one's completed merge and review resolutions never
interleave with a batch merge.

Parse failures (``ParseError`` and subclasses) are raised before any write,
so a failed import leaves stored state untouched.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from decimal import Decimal
from os import PathLike
from pathlib import Path
from typing import TextIO

from .categories import find_category
from .export import export_filename, export_transactions
from .ingest.csv_reader import CsvSource, is_reexport_filename, read_rows
from .logging_setup import get_logger
from .models import ImportSummary, Transaction
from .pipeline import ingest_rows
from .reports import MonthlyTotals, get_monthly_totals, parse_budget_value
from .review import ReviewQueue
from .rules import DEFAULT_RULES, RuleSet
from .store import ALL_KEYS, KEY_CATEGORIES, KEY_REVIEW_QUEUE, KEY_TRANSACTIONS, TrackerStore

_STATE_LOCK = threading.RLock()

_logger = get_logger("spending_tracker.api")


def _filename_of(file: CsvSource, filename_hint: str | PathLike[str] | None) -> str | None:
    if filename_hint is not None:
        return str(filename_hint)
    if isinstance(file, str | PathLike):
        return str(file)
    name = getattr(file, "name", None)
    return name if isinstance(name, str) else None


def import_file(
    file: CsvSource,
    filename_hint: str | PathLike[str] | None = None,
    *,
    store: TrackerStore,
    rules: RuleSet = DEFAULT_RULES,
    reexport: bool | None = None,
) -> ImportSummary:
    """Import one CSV file and merge it into the stored state.

    Parameters
    ----------
    file:
        A path or an open text stream with the CSV content.
    filename_hint:
        Original file name used for provenance detection; defaults to the
        path (or the stream's ``name``).
    store:
        Where the transactions and review queue are loaded from and saved to.
    rules:
        Keyword tables for classification.
    reexport:
        Explicit provenance; ``None`` detects it from the file name prefix.

    Raises
    ------
    ParseError, EmptyOrUnreadableFile, InvalidAmount
        Nothing is written when any of these is raised.
    """

    name = _filename_of(file, filename_hint)
    is_reexport = reexport if reexport is not None else is_reexport_filename(name)

    with _STATE_LOCK:
        rows = read_rows(file)
        result = ingest_rows(rows, is_reexport=is_reexport, rules=rules)
        transactions = store.load_transactions()
        transactions.extend(result.clean)
        queue = ReviewQueue(store.load_review_queue())
        queue.enqueue(result.needs_review)
        store.save_transactions(transactions)
        store.save_review_queue(queue.entries())

    summary = ImportSummary(
        appended=len(result.clean),
        flagged_for_review=len(result.needs_review),
        ignored=result.ignored_count,
        reexport=is_reexport,
        transaction_ids=tuple(tx.id for tx in result.clean),
    )
    _logger.info(
        "imported %s: %d appended, %d flagged, %d ignored",
        name or "<stream>",
        summary.appended,
        summary.flagged_for_review,
        summary.ignored,
    )
    return summary


def pending_reviews(*, store: TrackerStore) -> list[Transaction]:
    """Return the review queue in serving order."""

    return store.load_review_queue()


def resolve_review(tx_id: str, category: str, *, store: TrackerStore) -> Transaction | None:
    """Assign ``category`` to a pending transaction and drop it from the queue.

    A category matching a catalog entry case-insensitively is stored with the
    catalog's spelling. Unknown ids are a no-op and return ``None``.
    """

    with _STATE_LOCK:
        match = find_category(store.load_categories(), category)
        final = match.name if match is not None else category.strip()
        queue = ReviewQueue(store.load_review_queue())
        if tx_id not in queue:
            return None
        transactions = store.load_transactions()
        resolved = queue.resolve(tx_id, final, transactions)
        store.save_transactions(transactions)
        store.save_review_queue(queue.entries())
    _logger.info("resolved %s as %r", tx_id, final)
    return resolved


def skip_review(tx_id: str, *, store: TrackerStore) -> bool:
    """Move a pending transaction to the back of the queue."""

    with _STATE_LOCK:
        queue = ReviewQueue(store.load_review_queue())
        if not queue.skip(tx_id):
            return False
        store.save_review_queue(queue.entries())
    return True


def update_transaction(tx: Transaction, *, store: TrackerStore) -> bool:
    """Replace the stored transaction with the same id (manual edits).

    Returns False when no stored transaction has ``tx.id``.
    """

    with _STATE_LOCK:
        transactions = store.load_transactions()
        for pos, existing in enumerate(transactions):
            if existing.id == tx.id:
                transactions[pos] = tx
                store.save_transactions(transactions)
                return True
    return False


def monthly_totals(month: str | int, *, store: TrackerStore) -> MonthlyTotals:
    return get_monthly_totals(store.load_transactions(), month)


def export_to(
    destination: str | PathLike[str] | TextIO | None = None, *, store: TrackerStore
) -> tuple[str | None, int]:
    """Export all stored transactions.

    ``destination`` may be a file path, a directory (the default export file
    name is used inside it), an open stream, or ``None`` for the default file
    name in the current directory. Returns ``(path or None, row count)``.
    """

    transactions = store.load_transactions()
    if destination is None or (
        isinstance(destination, str | PathLike) and Path(destination).is_dir()
    ):
        base = Path(destination) if destination is not None else Path.cwd()
        target: str | PathLike[str] | TextIO = base / export_filename()
    else:
        target = destination
    count = export_transactions(transactions, target)
    path = str(target) if isinstance(target, str | PathLike) else None
    _logger.info("exported %d transaction(s) to %s", count, path or "<stream>")
    return path, count


def set_category_budget(category: str, amount: str | Decimal, *, store: TrackerStore) -> Decimal:
    """Set one category's monthly budget; unparsable or negative input → 0."""

    value = amount if isinstance(amount, Decimal) else parse_budget_value(amount)
    if not value.is_finite() or value < 0:
        value = Decimal("0.00")
    with _STATE_LOCK:
        match = find_category(store.load_categories(), category)
        name = match.name if match is not None else category.strip()
        budgets = store.load_budgets()
        budgets[name] = value
        store.save_budgets(budgets)
    return value


def set_monthly_income(amount: str, *, store: TrackerStore) -> None:
    with _STATE_LOCK:
        store.save_monthly_income(amount)


def ensure_catalog(*, store: TrackerStore) -> None:
    """Mirror the category catalog into the store when it is absent."""

    with _STATE_LOCK:
        if store.read_raw(KEY_CATEGORIES) is None:
            store.save_categories(store.load_categories())


def clear_all(*, store: TrackerStore, keys: Iterable[str] = ALL_KEYS) -> None:
    """Delete stored slices; the review queue goes with the transactions."""

    selected = tuple(keys)
    if KEY_TRANSACTIONS in selected and KEY_REVIEW_QUEUE not in selected:
        selected += (KEY_REVIEW_QUEUE,)
    with _STATE_LOCK:
        store.clear(selected)
    _logger.info("cleared stored state: %s", ", ".join(selected))


__all__ = [
    "import_file",
    "pending_reviews",
    "resolve_review",
    "skip_review",
    "update_transaction",
    "get_monthly_totals",
    "monthly_totals",
    "export_to",
    "set_category_budget",
    "set_monthly_income",
    "ensure_catalog",
    "clear_all",
]
