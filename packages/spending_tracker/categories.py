"""Category catalog and the sentinel category labels.

The catalog is fixed configuration: it is mirrored into the store so the
presentation layer can read it, but the core never adds or removes entries.
Transactions are assigned either a catalog name, a pass-through bank category
(``Detailed Category``), or one of the sentinels below.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .models import Category

UNCATEGORIZED = "Uncategorized"
NEEDS_REVIEW = "Needs Review"

DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(name="Investments", color="var(--chart-1)"),
    Category(name="Rent & Utilities", color="var(--chart-2)"),
    Category(name="Groceries", color="var(--chart-3)"),
    Category(name="Student Loans", color="var(--chart-4)"),
    Category(name="Dates", color="var(--chart-5)"),
    Category(name="Family", color="var(--chart-6)"),
    Category(name="Life & Extras", color="var(--chart-7)"),
    Category(name="Hobbies", color="var(--chart-8)"),
    Category(name="Takeout", color="var(--chart-9)"),
    Category(name="Transportation", color="var(--chart-10)"),
    Category(name="Monthly Savings", color="var(--chart-11)"),
    Category(name="House Savings", color="var(--chart-12)"),
)


def normalize_name(name: str) -> str:
    """Return a trimmed, single-spaced representation of ``name``.

    Case is preserved; lookups compare case-insensitively.
    """

    return " ".join(name.strip().split())


def category_names(catalog: Iterable[Category]) -> list[str]:
    """Return catalog names in catalog order."""

    return [c.name for c in catalog]


def find_category(catalog: Sequence[Category], name: str) -> Category | None:
    """Case/whitespace-insensitive lookup of ``name`` in ``catalog``."""

    wanted = normalize_name(name).casefold()
    if not wanted:
        return None
    for cat in catalog:
        if normalize_name(cat.name).casefold() == wanted:
            return cat
    return None


__all__ = [
    "UNCATEGORIZED",
    "NEEDS_REVIEW",
    "DEFAULT_CATEGORIES",
    "normalize_name",
    "category_names",
    "find_category",
]
