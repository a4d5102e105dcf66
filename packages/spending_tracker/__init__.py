"""Public interface for the ``spending_tracker`` package.

Only symbol re-exports live here; see ``spending_tracker.api`` for the
operations and ``spending_tracker.cli`` for the console entry point.
"""

from .api import (
    clear_all,
    export_to,
    get_monthly_totals,
    import_file,
    pending_reviews,
    resolve_review,
    set_category_budget,
    set_monthly_income,
    skip_review,
)
from .errors import (
    EmptyOrUnreadableFile,
    InvalidAmount,
    ParseError,
    StorageReadError,
    TrackerError,
)
from .models import Category, ImportSummary, IngestResult, Transaction
from .pipeline import ingest_rows
from .review import ReviewQueue
from .rules import DEFAULT_RULES, RuleSet
from .store import TrackerStore

__all__ = [
    # API
    "import_file",
    "pending_reviews",
    "resolve_review",
    "skip_review",
    "get_monthly_totals",
    "export_to",
    "set_category_budget",
    "set_monthly_income",
    "clear_all",
    "ingest_rows",
    # Models / types
    "Transaction",
    "Category",
    "IngestResult",
    "ImportSummary",
    "ReviewQueue",
    "RuleSet",
    "DEFAULT_RULES",
    "TrackerStore",
    # Errors
    "TrackerError",
    "ParseError",
    "EmptyOrUnreadableFile",
    "InvalidAmount",
    "StorageReadError",
]
