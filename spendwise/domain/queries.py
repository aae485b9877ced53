"""Pure functions for searching, sorting and summarising transactions.

This module contains the functional core for read-side operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Input sequences are never mutated; new tuples are returned
- Easy to test

All monetary amounts are in cents (Money type).
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Literal, TypedDict

from spendwise.dates import month_of, month_range, parse_month
from spendwise.domain.models import CategoryName, Money
from spendwise.domain.transactions import EXPENSE, INCOME, Transaction, TransactionType

SortKey = Literal["date", "amount", "description", "category"]
SortDirection = Literal["asc", "desc"]

SORT_KEYS: tuple[SortKey, ...] = ("date", "amount", "description", "category")
SORT_DIRECTIONS: tuple[SortDirection, ...] = ("asc", "desc")

RECENT_LIMIT = 5

CATEGORY_ICONS: dict[str, str] = {
    "Food": "fas fa-utensils",
    "Entertainment": "fas fa-film",
    "Transportation": "fas fa-car",
    "Education": "fas fa-graduation-cap",
    "Housing": "fas fa-home",
    "Income": "fas fa-money-check-alt",
    "Other": "fas fa-receipt",
}


class FilterCriteria(TypedDict, total=False):
    """Optional conjunctive filter criteria. Date bounds are inclusive."""

    type: TransactionType
    category: CategoryName
    min_amount: Money
    max_amount: Money
    start_date: str
    end_date: str


@dataclass(frozen=True)
class DashboardStats:
    """Immutable dashboard figures for one calendar month."""

    balance: Money
    income: Money
    expenses: Money
    savings: Money
    recent_transactions: tuple[Transaction, ...]


@dataclass(frozen=True)
class Totals:
    """Immutable lifetime totals."""

    income: Money
    expenses: Money
    balance: Money


@dataclass(frozen=True)
class BudgetStatus:
    """Immutable monthly budget usage."""

    budget: Money
    spent: Money
    remaining: Money
    percentage: float


def search(transactions: Sequence[Transaction], term: str | None) -> tuple[Transaction, ...]:
    """Case-insensitive substring search over description and category.

    Args:
        transactions: Transactions to search.
        term: Search text. Empty or None matches everything.

    Returns:
        Matching transactions in their original order.
    """
    if not term:
        return tuple(transactions)

    needle = term.lower()
    return tuple(t for t in transactions if needle in t.description.lower() or needle in t.category.lower())


def matches_criteria(transaction: Transaction, criteria: FilterCriteria) -> bool:
    """Check a transaction satisfies every criterion present."""
    if criteria.get("type") is not None and transaction.type != criteria["type"]:
        return False
    if criteria.get("category") is not None and transaction.category != criteria["category"]:
        return False
    if criteria.get("min_amount") is not None and transaction.amount < criteria["min_amount"]:
        return False
    if criteria.get("max_amount") is not None and transaction.amount > criteria["max_amount"]:
        return False
    if criteria.get("start_date") is not None and transaction.date < criteria["start_date"]:
        return False
    if criteria.get("end_date") is not None and transaction.date > criteria["end_date"]:
        return False
    return True


def advanced_filter(transactions: Sequence[Transaction], criteria: FilterCriteria) -> tuple[Transaction, ...]:
    """Keep only transactions matching all given criteria.

    Args:
        transactions: Transactions to filter.
        criteria: Criteria to apply; absent keys impose no constraint.

    Returns:
        Matching transactions in their original order.
    """
    return tuple(t for t in transactions if matches_criteria(t, criteria))


def _sort_value(transaction: Transaction, key: SortKey) -> Any:
    if key == "amount":
        return transaction.amount
    if key == "date":
        # ISO dates order chronologically as plain strings
        return transaction.date
    return getattr(transaction, key).lower()


def sort_transactions(
    transactions: Sequence[Transaction],
    key: SortKey = "date",
    direction: SortDirection = "desc",
) -> tuple[Transaction, ...]:
    """Stable sort of transactions.

    Args:
        transactions: Transactions to sort.
        key: One of "date", "amount", "description", "category".
        direction: "asc" or "desc".

    Returns:
        Sorted transactions. Equal keys keep their input order in both directions.

    Raises:
        ValueError: If key or direction is unknown.
    """
    if key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {key}")
    if direction not in SORT_DIRECTIONS:
        raise ValueError(f"Unknown sort direction: {direction}")

    return tuple(sorted(transactions, key=lambda t: _sort_value(t, key), reverse=direction == "desc"))


def filtered_view(
    transactions: Sequence[Transaction],
    search_term: str | None = None,
    sort_key: SortKey = "date",
    sort_direction: SortDirection = "desc",
    criteria: FilterCriteria | None = None,
) -> tuple[Transaction, ...]:
    """Search, filter, then sort a snapshot of transactions."""
    result = search(transactions, search_term)
    if criteria:
        result = advanced_filter(result, criteria)
    return sort_transactions(result, sort_key, sort_direction)


def sum_amounts(transactions: Sequence[Transaction], transaction_type: TransactionType) -> Money:
    """Sum amounts of all transactions of one type."""
    return Money(sum(t.amount for t in transactions if t.type == transaction_type))


def dashboard_stats(transactions: Sequence[Transaction], now: date | datetime) -> DashboardStats:
    """Compute dashboard figures for the calendar month of now.

    Args:
        transactions: Ledger snapshot in insertion order.
        now: Reference date; only transactions in its month and year are summed.

    Returns:
        DashboardStats. Recent transactions are the last five inserted,
        newest first, regardless of their dates.
    """
    current = month_of(now)
    monthly = [t for t in transactions if parse_month(t.date) == current]

    income = sum_amounts(monthly, INCOME)
    expenses = sum_amounts(monthly, EXPENSE)
    balance = Money(income - expenses)

    return DashboardStats(
        balance=balance,
        income=income,
        expenses=expenses,
        savings=Money(max(0, balance)),
        recent_transactions=tuple(reversed(transactions[-RECENT_LIMIT:])),
    )


def all_time_totals(transactions: Sequence[Transaction]) -> Totals:
    """Compute lifetime income, expenses and balance."""
    income = sum_amounts(transactions, INCOME)
    expenses = sum_amounts(transactions, EXPENSE)
    return Totals(income=income, expenses=expenses, balance=Money(income - expenses))


def calculate_budget_percentage(actual: Money, budget: Money) -> float:
    """Calculate percentage of budget used.

    Args:
        actual: Amount spent in cents.
        budget: Budget amount in cents.

    Returns:
        Percentage of budget used (0-100+).
    """
    if budget <= 0:
        return 0.0
    return (abs(actual) / budget) * 100


def budget_status(expenses: Money, monthly_budget: Money) -> BudgetStatus | None:
    """Compare monthly expenses against the monthly budget.

    Returns:
        BudgetStatus, or None when no budget is set.
    """
    if monthly_budget <= 0:
        return None

    return BudgetStatus(
        budget=monthly_budget,
        spent=expenses,
        remaining=Money(monthly_budget - expenses),
        percentage=calculate_budget_percentage(expenses, monthly_budget),
    )


def category_icon(category: str) -> str:
    """Map a category name to its icon identifier, falling back to the generic receipt."""
    return CATEGORY_ICONS.get(category, CATEGORY_ICONS["Other"])


def _this_month(today: date) -> FilterCriteria:
    first_day, _, _ = month_range(month_of(today))
    return FilterCriteria(start_date=first_day)


FILTER_PRESETS: dict[str, Callable[[date], FilterCriteria]] = {
    "food-expenses": lambda today: FilterCriteria(type=EXPENSE, category=CategoryName("Food")),
    "large": lambda today: FilterCriteria(min_amount=Money(10000)),
    "this-month": _this_month,
}


def preset_criteria(name: str, today: date) -> FilterCriteria:
    """Resolve a named filter preset.

    Args:
        name: Preset name (see FILTER_PRESETS).
        today: Date used by date-relative presets.

    Returns:
        FilterCriteria for the preset.

    Raises:
        ValueError: If the preset does not exist.
    """
    if name not in FILTER_PRESETS:
        raise ValueError(f"Unknown filter preset '{name}'. Available: {', '.join(FILTER_PRESETS)}")
    return FILTER_PRESETS[name](today)
