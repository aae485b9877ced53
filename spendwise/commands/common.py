"""Helpers shared by CLI commands: opening the ledger and reporting errors."""

import sys
from typing import NoReturn

import pandas as pd
from rich.console import Console

from spendwise.config import default_settings, get_db_path_override, load_config_or_default
from spendwise.errors import SpendwiseError, ValidationError
from spendwise.ledger import Ledger
from spendwise.store.documents import SqliteDocumentStore
from spendwise.store.schema import get_db_path

console = Console()


def report_error(error: SpendwiseError) -> NoReturn:
    """Print a core error and exit with status 1.

    Validation errors are printed one line per field, everything else as a
    single message.
    """
    if isinstance(error, ValidationError):
        console.print("[red]Please fix the following:[/red]", style="bold")
        for field, message in sorted(error.errors.items()):
            console.print(f"  [yellow]{field}[/yellow]: {message}")
    else:
        console.print(f"[red]Error: {error.message}[/red]", style="bold")
    sys.exit(1)


def open_ledger() -> Ledger:
    """Build and initialize the ledger from config and the default database."""
    try:
        config = load_config_or_default()
        db_path = get_db_path_override(config) or get_db_path()
        ledger = Ledger(SqliteDocumentStore(db_path), default_settings(config))
        ledger.initialize()
    except SpendwiseError as e:
        report_error(e)
    except ValueError as e:
        console.print(f"[red]Invalid configuration: {e}[/red]", style="bold")
        sys.exit(1)
    return ledger


def normalize_date(raw_date: str) -> str:
    """Normalize a user supplied date string to ISO format (YYYY-MM-DD).

    Uses pandas.to_datetime so ISO, European (day first) and other common
    formats are all accepted.

    Raises:
        ValueError: If date cannot be parsed.
    """
    try:
        return pd.to_datetime(raw_date, dayfirst=True).strftime("%Y-%m-%d")
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e


def parse_date_option(raw_date: str | None) -> str | None:
    """Normalize an optional date option, exiting with a message when it is invalid."""
    if raw_date is None:
        return None
    try:
        return normalize_date(raw_date)
    except ValueError as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)
