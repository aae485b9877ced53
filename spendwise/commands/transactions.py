"""Transaction management commands (add, edit, delete)."""

from typing import Any

import typer

from spendwise.commands.common import console, open_ledger, parse_date_option, report_error
from spendwise.domain.currency import format_currency
from spendwise.domain.transactions import Transaction
from spendwise.errors import SpendwiseError


def print_transaction(transaction: Transaction, currency: str) -> None:
    """Print the fields of one transaction."""
    console.print(f"  ID: {transaction.id}")
    console.print(f"  Date: {transaction.date}")
    console.print(f"  Type: {transaction.type}")
    console.print(f"  Description: {transaction.description}")
    console.print(f"  Amount: {format_currency(transaction.amount, currency)}")
    console.print(f"  Category: {transaction.category}")


def add_command(
    transaction_type: str,
    description: str,
    amount: str,
    category: str,
    date: str | None = None,
) -> None:
    """Add a transaction.

    Args:
        transaction_type: "income" or "expense".
        description: Transaction description.
        amount: Amount in major units, at most two decimals (e.g. "12.50").
        category: Category name.
        date: Optional transaction date; defaults to today.
    """
    ledger = open_ledger()
    draft: dict[str, Any] = {
        "type": transaction_type,
        "description": description,
        "amount": amount,
        "category": category,
        "date": parse_date_option(date),
    }

    try:
        transaction = ledger.add_transaction(draft)
    except SpendwiseError as e:
        report_error(e)

    console.print("[green]✓[/green] Transaction added:")
    print_transaction(transaction, ledger.settings.base_currency)


def edit_command(
    transaction_id: str,
    transaction_type: str | None = None,
    description: str | None = None,
    amount: str | None = None,
    category: str | None = None,
    date: str | None = None,
) -> None:
    """Edit fields of an existing transaction. Only the given fields change."""
    ledger = open_ledger()
    fields: dict[str, Any] = {
        name: value
        for name, value in {
            "type": transaction_type,
            "description": description,
            "amount": amount,
            "category": category,
            "date": parse_date_option(date),
        }.items()
        if value is not None
    }

    if not fields:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    try:
        transaction = ledger.update_transaction(transaction_id, fields)
    except SpendwiseError as e:
        report_error(e)

    console.print(f"[green]✓[/green] Updated transaction {transaction_id}:")
    print_transaction(transaction, ledger.settings.base_currency)


def delete_command(transaction_id: str, yes: bool = False) -> None:
    """Delete a transaction after confirmation."""
    ledger = open_ledger()

    existing = next((t for t in ledger.snapshot() if t.id == transaction_id), None)
    if existing is None:
        console.print(f"[yellow]Transaction {transaction_id} not found, nothing deleted[/yellow]")
        return

    if not yes and not typer.confirm(f"Delete '{existing.description}' ({existing.date})?", default=False):
        console.print("[dim]Cancelled[/dim]")
        return

    try:
        ledger.delete_transaction(transaction_id)
    except SpendwiseError as e:
        report_error(e)

    console.print(f"[green]✓[/green] Deleted transaction {transaction_id}")
