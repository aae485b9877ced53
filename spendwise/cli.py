"""CLI entry point for spendwise."""

import os
import tomllib

import typer

from spendwise.commands.admin import backup_command, clear_command, export_command, import_command, init_command
from spendwise.commands.report import dashboard_command, list_command
from spendwise.commands.settings import convert_command, settings_command
from spendwise.commands.transactions import add_command, delete_command, edit_command
from spendwise.config import load_config_or_default
from spendwise.logging_setup import configure_logging

app = typer.Typer(
    name="spendwise",
    help="Spendwise - a personal income and expense tracker",
    add_completion=False,
)


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Spendwise - a personal income and expense tracker."""
    level = log_level or os.environ.get("SPENDWISE_LOG_LEVEL")
    if level is None:
        try:
            level = load_config_or_default().get("log_level")
        except tomllib.TOMLDecodeError:
            # Reported by the command itself when it loads the config
            level = None
    configure_logging(level)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Initialize spendwise database and configuration."""
    init_command(force)


@app.command()
def add(
    transaction_type: str = typer.Argument(..., metavar="TYPE", help="income or expense"),
    description: str = typer.Argument(..., help="What the money was for"),
    amount: str = typer.Argument(..., help="Amount, up to 2 decimals (e.g. 12.50)"),
    category: str = typer.Option("Other", "--category", "-c", help="Category name"),
    date: str = typer.Option(None, "--date", "-d", help="Transaction date (default: today)"),
) -> None:
    """Add an income or expense transaction."""
    add_command(transaction_type, description, amount, category, date)


@app.command()
def edit(
    transaction_id: str = typer.Argument(..., metavar="ID"),
    transaction_type: str = typer.Option(None, "--type", "-t", help="income or expense"),
    description: str = typer.Option(None, "--description", help="New description"),
    amount: str = typer.Option(None, "--amount", "-a", help="New amount"),
    category: str = typer.Option(None, "--category", "-c", help="New category"),
    date: str = typer.Option(None, "--date", "-d", help="New date"),
) -> None:
    """Edit an existing transaction."""
    edit_command(transaction_id, transaction_type, description, amount, category, date)


@app.command()
def delete(
    transaction_id: str = typer.Argument(..., metavar="ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a transaction."""
    delete_command(transaction_id, yes)


@app.command(name="list")
def list_transactions(
    search: str = typer.Option(None, "--search", "-s", help="Search description and category"),
    sort: str = typer.Option("date", "--sort", help="Sort by date, amount, description or category"),
    direction: str = typer.Option("desc", "--direction", help="asc or desc"),
    transaction_type: str = typer.Option(None, "--type", "-t", help="Only income or expense"),
    category: str = typer.Option(None, "--category", "-c", help="Only this category"),
    min_amount: str = typer.Option(None, "--min", help="Minimum amount"),
    max_amount: str = typer.Option(None, "--max", help="Maximum amount"),
    start_date: str = typer.Option(None, "--from", help="Earliest date"),
    end_date: str = typer.Option(None, "--to", help="Latest date"),
    preset: str = typer.Option(None, "--preset", "-p", help="food-expenses, large or this-month"),
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all matching transactions"),
    currency: str = typer.Option(None, "--currency", help="Display amounts in this currency"),
) -> None:
    """List your transactions."""
    list_command(
        search,
        sort,
        direction,
        transaction_type,
        category,
        min_amount,
        max_amount,
        start_date,
        end_date,
        preset,
        limit,
        all,
        currency,
    )


@app.command()
def dashboard(
    month: str = typer.Option(None, "--month", help="Specific month (YYYY-MM)"),
    currency: str = typer.Option(None, "--currency", help="Display amounts in this currency"),
) -> None:
    """Show this month's balance, income, expenses and savings."""
    dashboard_command(month, currency)


@app.command()
def convert(
    amount: str,
    from_currency: str = typer.Argument(..., metavar="FROM"),
    to_currency: str = typer.Argument(..., metavar="TO"),
) -> None:
    """Convert an amount between currencies."""
    convert_command(amount, from_currency, to_currency)


@app.command()
def settings(
    base_currency: str = typer.Option(None, "--base-currency", help="Set your base currency"),
    budget: str = typer.Option(None, "--budget", help="Set your monthly budget (0 to unset)"),
    rate: str = typer.Option(None, "--rate", help="Set a conversion rate, e.g. RWF=1250"),
) -> None:
    """Show or change your settings."""
    settings_command(base_currency, budget, rate)


@app.command()
def export(
    output: str = typer.Argument("spendwise-backup.json", help="File to write"),
) -> None:
    """Export all data to a JSON file."""
    export_command(output)


@app.command(name="import")
def import_data(
    input_path: str = typer.Argument(..., metavar="FILE"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Replace all data with a JSON export."""
    import_command(input_path, yes)


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Erase all transactions and settings."""
    clear_command(yes)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: next to the database)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


if __name__ == "__main__":
    app()
