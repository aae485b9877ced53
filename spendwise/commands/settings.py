"""Settings and currency conversion commands."""

import sys
from decimal import Decimal, InvalidOperation

from rich.table import Table

from spendwise.commands.common import console, open_ledger, report_error
from spendwise.domain.currency import currency_symbol, format_currency
from spendwise.domain.models import CurrencyCode
from spendwise.domain.settings import settings_to_dict, supported_currencies
from spendwise.domain.transactions import parse_amount
from spendwise.errors import SpendwiseError


def show_settings() -> None:
    """Print current settings and the rate table."""
    ledger = open_ledger()
    settings = ledger.settings

    console.print(f"\n[bold]Base currency:[/bold] {settings.base_currency}")
    if settings.monthly_budget > 0:
        budget = format_currency(settings.monthly_budget, settings.base_currency)
        console.print(f"[bold]Monthly budget:[/bold] {budget}")
    else:
        console.print("[bold]Monthly budget:[/bold] [dim]not set[/dim]")

    table = Table(title="Conversion rates (1 USD =)")
    table.add_column("Currency", style="cyan")
    table.add_column("Symbol")
    table.add_column("Rate", justify="right")
    for code in supported_currencies():
        rate = settings.conversion_rates.get(code)
        table.add_row(code, currency_symbol(code).strip(), f"{rate}" if rate is not None else "[dim]-[/dim]")
    console.print(table)


def settings_command(
    base_currency: str | None = None,
    budget: str | None = None,
    rate: str | None = None,
) -> None:
    """Show settings, or change base currency, monthly budget or one conversion rate."""
    if base_currency is None and budget is None and rate is None:
        show_settings()
        return

    ledger = open_ledger()

    try:
        if rate is not None:
            code, _, value = rate.partition("=")
            try:
                new_rate = Decimal(value)
            except InvalidOperation:
                console.print(f"[red]Invalid rate '{rate}' (expected CODE=RATE, e.g. RWF=1250)[/red]")
                sys.exit(1)
            ledger.update_conversion_rate(CurrencyCode(code.strip().upper()), new_rate)
            console.print(f"[green]✓[/green] 1 USD = {new_rate} {code.strip().upper()}")

        if base_currency is not None or budget is not None:
            document = settings_to_dict(ledger.settings)
            if base_currency is not None:
                document["baseCurrency"] = base_currency.upper()
            if budget is not None:
                document["monthlyBudget"] = budget
            settings = ledger.update_settings(document)
            console.print(f"[green]✓[/green] Base currency: {settings.base_currency}")
            console.print(
                f"[green]✓[/green] Monthly budget: {format_currency(settings.monthly_budget, settings.base_currency)}"
            )
    except SpendwiseError as e:
        report_error(e)


def convert_command(amount: str, from_currency: str, to_currency: str) -> None:
    """Convert an amount between two currencies with the configured rates."""
    try:
        cents = parse_amount(amount)
    except ValueError:
        console.print(f"[red]Invalid amount '{amount}'[/red]")
        sys.exit(1)

    ledger = open_ledger()
    source = CurrencyCode(from_currency.upper())
    target = CurrencyCode(to_currency.upper())

    try:
        converted = ledger.convert(cents, source, target)
    except SpendwiseError as e:
        report_error(e)

    console.print(f"{format_currency(cents, source)} = [bold]{format_currency(converted, target)}[/bold]")
