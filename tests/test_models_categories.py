from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from spending_tracker.categories import DEFAULT_CATEGORIES, category_names, find_category
from spending_tracker.models import Transaction


def _tx(amount: str) -> Transaction:
    return Transaction(
        id="1",
        date="2024-03-05",
        description="x",
        amount=Decimal(amount),
        type="expense",
        category="Takeout",
    )


def test_transaction_amount_is_quantized_magnitude():
    assert _tx("12.345").amount == Decimal("12.35")


@pytest.mark.parametrize("amount", ["-1", "NaN", "1e30"])
def test_transaction_rejects_negative_non_finite_and_oversized_amounts(amount):
    with pytest.raises(ValidationError):
        _tx(amount)


def test_default_catalog_is_the_shared_household_list():
    assert category_names(DEFAULT_CATEGORIES) == [
        "Investments",
        "Rent & Utilities",
        "Groceries",
        "Student Loans",
        "Dates",
        "Family",
        "Life & Extras",
        "Hobbies",
        "Takeout",
        "Transportation",
        "Monthly Savings",
        "House Savings",
    ]


def test_find_category_ignores_case_and_spacing():
    assert find_category(DEFAULT_CATEGORIES, "  rent   &  utilities ").name == "Rent & Utilities"
    assert find_category(DEFAULT_CATEGORIES, "Jazmin Purchases") is None
    assert find_category(DEFAULT_CATEGORIES, "   ") is None
