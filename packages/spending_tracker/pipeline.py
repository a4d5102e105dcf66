"""Ingestion pipeline: raw rows → {all transactions, review queue entries}.

Per row: normalize → drop ignorable rows → classify → choose the final
category → decide whether manual review is needed. The batch is atomic: the
first invalid amount aborts it and nothing is returned.

Re-exported files (our own export, see ``ingest.csv_reader``) are trusted as
already final. Their ``Detailed Category`` is used verbatim and they never
enter review, so importing the same export twice flags nothing.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable

from .categories import NEEDS_REVIEW, UNCATEGORIZED
from .logging_setup import get_logger
from .models import IngestResult, RawRecord, Transaction
from .normalizers import NormalizedRow, normalize_row
from .rules import DEFAULT_RULES, RuleSet, classify, is_ambiguous, should_ignore

_logger = get_logger("spending_tracker.pipeline")


def new_transaction_id() -> str:
    return uuid.uuid4().hex


def _final_category(norm: NormalizedRow, custom_category: str, *, is_reexport: bool) -> str:
    if is_reexport:
        return norm.detailed_category or UNCATEGORIZED
    if custom_category != UNCATEGORIZED:
        return custom_category
    return norm.detailed_category or custom_category


def needs_manual_review(
    norm: NormalizedRow, custom_category: str, *, is_reexport: bool, rules: RuleSet
) -> bool:
    """Expense, ambiguous, unclassified by keyword, and not a re-export."""

    return (
        not is_reexport
        and norm.type == "expense"
        and custom_category == UNCATEGORIZED
        and is_ambiguous(norm.classification_text, rules)
    )


def ingest_rows(
    rows: Iterable[RawRecord],
    *,
    is_reexport: bool = False,
    rules: RuleSet = DEFAULT_RULES,
    id_factory: Callable[[], str] = new_transaction_id,
) -> IngestResult:
    """Classify a batch of raw rows.

    Parameters
    ----------
    rows:
        Header-keyed CSV rows in file order.
    is_reexport:
        True when the source file is one of our own exports.
    rules:
        Keyword tables used for ignore/classify/ambiguity decisions.
    id_factory:
        Produces a fresh transaction id per accepted row.

    Raises
    ------
    InvalidAmount
        On the first row whose amount is not a finite number. No partial
        result is produced.
    """

    clean: list[Transaction] = []
    needs_review: list[Transaction] = []
    ignored = 0

    # Row numbers are 1-based data rows (header excluded) for error messages.
    for row_number, row in enumerate(rows, start=1):
        norm = normalize_row(row, row_number=row_number)

        if should_ignore(norm.description, norm.detailed_category, rules):
            ignored += 1
            _logger.debug("ignored row %d: %r", row_number, norm.description)
            continue

        custom_category = classify(norm.classification_text, rules)
        tx = Transaction(
            id=id_factory(),
            date=norm.date,
            description=norm.description,
            amount=norm.amount,
            type=norm.type,
            category=_final_category(norm, custom_category, is_reexport=is_reexport),
        )

        if needs_manual_review(norm, custom_category, is_reexport=is_reexport, rules=rules):
            needs_review.append(tx)
            clean.append(tx.with_category(NEEDS_REVIEW))
        else:
            clean.append(tx)

    _logger.info(
        "ingested batch: %d accepted, %d flagged for review, %d ignored (reexport=%s)",
        len(clean),
        len(needs_review),
        ignored,
        is_reexport,
    )
    return IngestResult(clean=tuple(clean), needs_review=tuple(needs_review), ignored_count=ignored)


__all__ = ["ingest_rows", "needs_manual_review", "new_transaction_id"]
