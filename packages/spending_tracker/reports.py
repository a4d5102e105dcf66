"""Monthly aggregates and budget tracking over the transaction collection.

All sums are ``Decimal`` and rounded to cents. A month is selected either by
``"YYYY-MM"`` or by month number (1-12, any year). Transactions whose date
cannot be parsed are left out of month-based figures.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation

from .logging_setup import get_logger
from .models import Category, Transaction, quantize_amount

ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

type MonthSelector = str | int

_logger = get_logger("spending_tracker.reports")


@dataclass(frozen=True, slots=True)
class MonthlyTotals:
    income: Decimal = ZERO
    expense: Decimal = ZERO
    # Expense totals per category, in first-seen order; zero categories omitted.
    by_category: dict[str, Decimal] = field(default_factory=dict)

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True, slots=True)
class MonthComparison:
    month: str
    previous_month: str
    current: Decimal
    previous: Decimal
    change: Decimal
    percent: Decimal


@dataclass(frozen=True, slots=True)
class BudgetStatus:
    category: str
    budget: Decimal
    spent: Decimal
    remaining: Decimal
    percent_used: Decimal
    over_budget: bool

    @property
    def overage(self) -> Decimal:
        return max(self.spent - self.budget, ZERO)


@dataclass(frozen=True, slots=True)
class BudgetPlan:
    income: Decimal
    total_budgeted: Decimal
    remaining_income: Decimal


# ----------------------------------------------------------------------------
# Month helpers
# ----------------------------------------------------------------------------


def _tx_month(tx: Transaction) -> tuple[int, int] | None:
    try:
        d = date.fromisoformat(tx.date[:10])
    except ValueError:
        return None
    return d.year, d.month


def _matches(month_key: tuple[int, int] | None, selector: tuple[int | None, int]) -> bool:
    if month_key is None:
        return False
    year, month = selector
    return month_key[1] == month and (year is None or month_key[0] == year)


def parse_month(month: MonthSelector) -> tuple[int | None, int]:
    """Parse ``"YYYY-MM"`` or a month number into ``(year | None, month)``."""

    if isinstance(month, int) and not isinstance(month, bool):
        if 1 <= month <= 12:
            return None, month
        raise ValueError(f"month must be within 1..12, got {month}")
    s = str(month).strip()
    if s.isdigit():
        return parse_month(int(s))
    try:
        year_s, month_s = s.split("-", 1)
        year, mon = int(year_s), int(month_s)
    except ValueError:
        raise ValueError(f"month must be 'YYYY-MM' or 1..12, got {month!r}") from None
    if not 1 <= mon <= 12:
        raise ValueError(f"month must be within 1..12, got {mon}")
    return year, mon


def filter_month(transactions: Iterable[Transaction], month: MonthSelector) -> list[Transaction]:
    selector = parse_month(month)
    return [tx for tx in transactions if _matches(_tx_month(tx), selector)]


# ----------------------------------------------------------------------------
# Aggregates
# ----------------------------------------------------------------------------


def summarize(transactions: Iterable[Transaction]) -> MonthlyTotals:
    """Income, expense and per-category expense totals for ``transactions``."""

    income = ZERO
    expense = ZERO
    by_category: defaultdict[str, Decimal] = defaultdict(lambda: ZERO)
    for tx in transactions:
        if tx.is_expense:
            expense += tx.amount
            by_category[tx.category] += tx.amount
        else:
            income += tx.amount
    return MonthlyTotals(
        income=quantize_amount(income),
        expense=quantize_amount(expense),
        by_category={k: quantize_amount(v) for k, v in by_category.items() if v > 0},
    )


def get_monthly_totals(transactions: Iterable[Transaction], month: MonthSelector) -> MonthlyTotals:
    """Totals for the transactions dated within ``month``."""

    return summarize(filter_month(transactions, month))


def monthly_net_totals(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Net (income - expense) per ``YYYY-MM``, sorted by month."""

    totals: defaultdict[str, Decimal] = defaultdict(lambda: ZERO)
    skipped = 0
    for tx in transactions:
        key = _tx_month(tx)
        if key is None:
            skipped += 1
            continue
        totals[f"{key[0]:04d}-{key[1]:02d}"] += tx.signed_amount
    if skipped:
        _logger.debug("skipped %d transaction(s) with unparseable dates", skipped)
    return {k: quantize_amount(totals[k]) for k in sorted(totals)}


def _previous_month(year: int, month: int) -> tuple[int, int]:
    return (year - 1, 12) if month == 1 else (year, month - 1)


def month_over_month(transactions: Iterable[Transaction], month: str) -> MonthComparison:
    """Compare the net of ``month`` (``YYYY-MM``) with the month before it.

    ``percent`` is relative to the absolute previous net; when the previous
    month nets to zero it is reported as 100.
    """

    year, mon = parse_month(month)
    if year is None:
        raise ValueError("month_over_month requires a 'YYYY-MM' month")
    py, pm = _previous_month(year, mon)
    current_key = f"{year:04d}-{mon:02d}"
    previous_key = f"{py:04d}-{pm:02d}"

    nets = monthly_net_totals(transactions)
    current = nets.get(current_key, ZERO)
    previous = nets.get(previous_key, ZERO)
    change = current - previous
    if previous != 0:
        percent = (change / abs(previous) * HUNDRED).quantize(Decimal("0.1"))
    else:
        percent = Decimal("100.0")
    return MonthComparison(
        month=current_key,
        previous_month=previous_key,
        current=current,
        previous=previous,
        change=quantize_amount(change),
        percent=percent,
    )


# ----------------------------------------------------------------------------
# Budgets
# ----------------------------------------------------------------------------


def parse_budget_value(text: str | None) -> Decimal:
    """Parse user input for a budget or income; invalid or negative input → 0."""

    if text is None:
        return ZERO
    try:
        value = Decimal(str(text).strip().replace(",", ""))
    except InvalidOperation:
        return ZERO
    if not value.is_finite() or value < 0:
        return ZERO
    try:
        return quantize_amount(value)
    except InvalidOperation:
        return ZERO


def budget_overview(
    transactions: Iterable[Transaction],
    month: MonthSelector,
    budgets: Mapping[str, Decimal],
    catalog: Sequence[Category],
) -> list[BudgetStatus]:
    """Spending against each catalog category's monthly budget."""

    spent_by_cat = get_monthly_totals(transactions, month).by_category
    out: list[BudgetStatus] = []
    for cat in catalog:
        budget = quantize_amount(Decimal(budgets.get(cat.name, ZERO)))
        spent = spent_by_cat.get(cat.name, ZERO)
        if budget > 0:
            percent = min(spent / budget * HUNDRED, HUNDRED).quantize(Decimal("0.1"))
        else:
            percent = Decimal("0.0")
        out.append(
            BudgetStatus(
                category=cat.name,
                budget=budget,
                spent=spent,
                remaining=max(budget - spent, ZERO),
                percent_used=percent,
                over_budget=spent > budget,
            )
        )
    return out


def budget_plan(budgets: Mapping[str, Decimal], monthly_income: str | None) -> BudgetPlan:
    """Declared income against the sum of all category budgets."""

    income = parse_budget_value(monthly_income)
    total = quantize_amount(sum((Decimal(v) for v in budgets.values()), ZERO))
    return BudgetPlan(income=income, total_budgeted=total, remaining_income=income - total)


__all__ = [
    "MonthlyTotals",
    "MonthComparison",
    "BudgetStatus",
    "BudgetPlan",
    "parse_month",
    "filter_month",
    "summarize",
    "get_monthly_totals",
    "monthly_net_totals",
    "month_over_month",
    "parse_budget_value",
    "budget_overview",
    "budget_plan",
]
