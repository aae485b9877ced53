"""Pure functions for currency conversion and display.

Rates are relative to the reference currency (USD = 1), so every conversion
goes through it. All monetary amounts are in minor units (Money type).
"""

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal

from spendwise.domain.models import CurrencyCode, Money
from spendwise.domain.settings import CURRENCY_SYMBOLS, Settings
from spendwise.errors import InvalidCurrencyError


def convert(
    amount: Money,
    from_currency: CurrencyCode,
    to_currency: CurrencyCode,
    rate_table: Mapping[CurrencyCode, Decimal],
) -> Money:
    """Convert an amount between two currencies.

    Args:
        amount: Amount in minor units of from_currency.
        from_currency: Source currency code.
        to_currency: Target currency code.
        rate_table: Rates relative to the reference currency.

    Returns:
        Amount in minor units of to_currency, rounded half-up.

    Raises:
        InvalidCurrencyError: If either code is missing from rate_table.
    """
    if from_currency == to_currency:
        return amount

    for code in (from_currency, to_currency):
        if code not in rate_table:
            raise InvalidCurrencyError(code)

    converted = Decimal(amount) / Decimal(str(rate_table[from_currency])) * Decimal(str(rate_table[to_currency]))
    return Money(int(converted.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def currency_symbol(currency: CurrencyCode) -> str:
    """Return the display symbol for a currency, or the code itself if unknown."""
    return CURRENCY_SYMBOLS.get(currency, currency)


def format_currency(amount: Money, currency: CurrencyCode) -> str:
    """Format money amount for display.

    Args:
        amount: Amount in minor units.
        currency: Currency code used to pick the symbol.

    Returns:
        Formatted string (e.g., "$1,234.50" or "-RF 12.00").
    """
    units = abs(amount) / 100
    formatted = f"{currency_symbol(currency)}{units:,.2f}"
    return f"-{formatted}" if amount < 0 else formatted


def display_amount(amount: Money, settings: Settings, target: CurrencyCode | None = None) -> str:
    """Convert an amount from the base currency and format it.

    Args:
        amount: Amount in minor units of the base currency.
        settings: Settings providing base currency and rates.
        target: Currency to display in. Defaults to the base currency.

    Returns:
        Formatted amount in the target currency.
    """
    target = target or settings.base_currency
    converted = convert(amount, settings.base_currency, target, settings.conversion_rates)
    return format_currency(converted, target)
