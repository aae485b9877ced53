"""Dashboard and list commands for viewing transaction data."""

import sys
from datetime import datetime

from rich.table import Table

from spendwise.commands.common import console, open_ledger, parse_date_option, report_error
from spendwise.dates import month_of, month_range
from spendwise.domain.currency import display_amount
from spendwise.domain.models import CategoryName, CurrencyCode
from spendwise.domain.queries import (
    SORT_DIRECTIONS,
    SORT_KEYS,
    BudgetStatus,
    FilterCriteria,
    preset_criteria,
)
from spendwise.domain.settings import Settings
from spendwise.domain.transactions import EXPENSE, TRANSACTION_TYPES, Transaction, parse_amount
from spendwise.errors import SpendwiseError


def format_budget_display_with_color(percentage: float) -> str:
    """Format budget display with color based on percentage.

    Args:
        percentage: Budget usage percentage.

    Returns:
        Colored string for budget display.
    """
    budget_text = f"({percentage:.0f}%)"
    if percentage > 100:
        return f"[red]{budget_text}[/red]"
    elif percentage > 90:
        return f"[yellow]{budget_text}[/yellow]"
    else:
        return f"[green]{budget_text}[/green]"


def transactions_table(
    title: str, transactions: tuple[Transaction, ...], settings: Settings, currency: CurrencyCode | None
) -> Table:
    """Build a rich table of transactions."""
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for txn in transactions:
        amount = display_amount(txn.amount, settings, currency)
        if txn.type == EXPENSE:
            amount_display = f"[red]-{amount}[/red]"
        else:
            amount_display = f"[green]+{amount}[/green]"
        table.add_row(txn.id, txn.date, txn.description, txn.category, amount_display)

    return table


def render_budget_line(status: BudgetStatus, settings: Settings, currency: CurrencyCode | None) -> None:
    """Render monthly budget usage."""
    spent = display_amount(status.spent, settings, currency)
    budget = display_amount(status.budget, settings, currency)
    console.print(f"  Budget: {spent} / {budget} {format_budget_display_with_color(status.percentage)}")


def dashboard_command(month: str | None = None, currency: str | None = None) -> None:
    """Show income, expenses, balance and savings for a month plus recent activity."""
    ledger = open_ledger()
    settings = ledger.settings
    target = CurrencyCode(currency.upper()) if currency else None

    try:
        now = datetime.strptime(month, "%Y-%m") if month else datetime.now()
    except ValueError:
        console.print(f"[red]Invalid month '{month}' (expected YYYY-MM)[/red]")
        sys.exit(1)

    _, _, label = month_range(month_of(now))

    try:
        stats = ledger.dashboard_stats(now)
        budget = ledger.budget_status(now)
        console.print(f"\n[bold]Dashboard - {label}[/bold]\n")
        console.print(f"  Balance:  {display_amount(stats.balance, settings, target)}")
        console.print(f"  Income:   [green]{display_amount(stats.income, settings, target)}[/green]")
        console.print(f"  Expenses: [red]{display_amount(stats.expenses, settings, target)}[/red]")
        console.print(f"  Savings:  {display_amount(stats.savings, settings, target)}")
        if budget is not None:
            render_budget_line(budget, settings, target)

        totals = ledger.totals()
        console.print(
            f"\n  [dim]All time: income {display_amount(totals.income, settings, target)}, "
            f"expenses {display_amount(totals.expenses, settings, target)}, "
            f"balance {display_amount(totals.balance, settings, target)}[/dim]"
        )
        console.print()

        if stats.recent_transactions:
            console.print(transactions_table("Recent transactions", stats.recent_transactions, settings, target))
        else:
            console.print("[yellow]No transactions yet[/yellow]")
    except SpendwiseError as e:
        report_error(e)


def build_criteria(
    transaction_type: str | None,
    category: str | None,
    min_amount: str | None,
    max_amount: str | None,
    start_date: str | None,
    end_date: str | None,
    preset: str | None,
) -> FilterCriteria:
    """Combine a preset with explicit filter options; explicit options win."""
    criteria = FilterCriteria()
    if preset:
        criteria.update(preset_criteria(preset, datetime.now().date()))

    if transaction_type:
        if transaction_type not in TRANSACTION_TYPES:
            raise ValueError(f"Type must be one of: {', '.join(TRANSACTION_TYPES)}")
        criteria["type"] = transaction_type  # type: ignore[typeddict-item]
    if category:
        criteria["category"] = CategoryName(category)
    if min_amount is not None:
        criteria["min_amount"] = parse_amount(min_amount)
    if max_amount is not None:
        criteria["max_amount"] = parse_amount(max_amount)
    if start_date:
        criteria["start_date"] = start_date
    if end_date:
        criteria["end_date"] = end_date
    return criteria


def list_command(
    search: str | None = None,
    sort: str = "date",
    direction: str = "desc",
    transaction_type: str | None = None,
    category: str | None = None,
    min_amount: str | None = None,
    max_amount: str | None = None,
    start_date: str | None = None,
    end_date: str | None = None,
    preset: str | None = None,
    limit: int = 50,
    all: bool = False,
    currency: str | None = None,
) -> None:
    """List transactions with search, filters and sorting."""
    if sort not in SORT_KEYS:
        console.print(f"[red]Sort must be one of: {', '.join(SORT_KEYS)}[/red]")
        sys.exit(1)
    if direction not in SORT_DIRECTIONS:
        console.print(f"[red]Direction must be one of: {', '.join(SORT_DIRECTIONS)}[/red]")
        sys.exit(1)

    try:
        criteria = build_criteria(
            transaction_type,
            category,
            min_amount,
            max_amount,
            parse_date_option(start_date),
            parse_date_option(end_date),
            preset,
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    ledger = open_ledger()
    settings = ledger.settings
    target = CurrencyCode(currency.upper()) if currency else None

    transactions = ledger.filtered_transactions(search, sort, direction, criteria)  # type: ignore[arg-type]
    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    shown = transactions if all else transactions[:limit]
    title = f"Transactions (showing {len(shown)} of {len(transactions)})"

    try:
        console.print(transactions_table(title, shown, settings, target))
    except SpendwiseError as e:
        report_error(e)
