"""Deterministic keyword rules: ignore, classify, and ambiguity checks.

Pure functions over an explicit :class:`RuleSet`; no database access and no
module-level mutable state. All matching is a case-insensitive substring test
against the full classification string.

Keyword order matters for :func:`classify`: when several keywords occur in the
same text, the first one declared in ``RuleSet.category_keywords`` wins. The
table is therefore a tuple of pairs rather than a dict or set.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .categories import UNCATEGORIZED


@dataclass(frozen=True, slots=True)
class RuleSet:
    """Keyword tables driving classification.

    Attributes
    ----------
    category_keywords:
        Ordered ``(keyword, category)`` pairs. Keywords are compared
        lower-cased.
    ambiguous_keywords:
        Terms whose presence means a transaction could belong to several
        categories (peer-payment apps, generic merchants).
    ignored_categories:
        Bank categories whose rows are dropped outright (exact match).
    ignored_phrases:
        Description fragments whose rows are dropped outright.
    """

    category_keywords: tuple[tuple[str, str], ...]
    ambiguous_keywords: tuple[str, ...]
    ignored_categories: frozenset[str] = frozenset({"Wages"})
    ignored_phrases: tuple[str, ...] = ("transfer to", "transfer from")

    @classmethod
    def from_mapping(
        cls,
        category_keywords: Mapping[str, str] | Iterable[tuple[str, str]],
        ambiguous_keywords: Iterable[str],
        **kwargs,
    ) -> RuleSet:
        """Build a rule set from a mapping or pair iterable, keeping its order."""

        pairs = (
            category_keywords.items()
            if isinstance(category_keywords, Mapping)
            else category_keywords
        )
        return cls(
            category_keywords=tuple((str(k), str(v)) for k, v in pairs),
            ambiguous_keywords=tuple(str(k) for k in ambiguous_keywords),
            **kwargs,
        )


DEFAULT_RULES = RuleSet(
    category_keywords=(
        ("education", "Student Loans"),
        ("investment", "Investments"),
        ("deposit", "Monthly Savings"),
        ("housing", "Rent & Utilities"),
        ("nebu", "Takeout"),
        ("gas", "Transportation"),
        ("uber", "Transportation"),
        ("shopping", "Life & Extras"),
        ("gambling", "Life & Extras"),
        ("chipotle", "Takeout"),
        ("chick-fil-a", "Takeout"),
        ("raising cane's", "Takeout"),
        ("subway", "Takeout"),
        ("popeye", "Takeout"),
        ("mo bettahs", "Takeout"),
        ("games", "Hobbies"),
        ("books", "Hobbies"),
        ("music", "Hobbies"),
    ),
    ambiguous_keywords=(
        "paypal",
        "venmo",
        "cash app",
        "zelle",
        "7-eleven",
        "restaurant",
        "coffee",
        "entertainment",
        "amazon",
    ),
)


def should_ignore(
    description: str | None, category: str | None, rules: RuleSet = DEFAULT_RULES
) -> bool:
    """Return True when the row should be dropped from the batch entirely."""

    if category is not None and category in rules.ignored_categories:
        return True
    text = (description or "").lower()
    return any(phrase.lower() in text for phrase in rules.ignored_phrases)


def classify(text: str, rules: RuleSet = DEFAULT_RULES) -> str:
    """Return the category of the first declared keyword found in ``text``.

    Returns ``"Uncategorized"`` when no keyword matches.
    """

    lowered = text.lower()
    for keyword, category in rules.category_keywords:
        if keyword and keyword.lower() in lowered:
            return category
    return UNCATEGORIZED


def is_ambiguous(text: str, rules: RuleSet = DEFAULT_RULES) -> bool:
    """Return True when ``text`` contains any ambiguous keyword."""

    lowered = text.lower()
    return any(k and k.lower() in lowered for k in rules.ambiguous_keywords)


__all__ = ["RuleSet", "DEFAULT_RULES", "should_ignore", "classify", "is_ambiguous"]
