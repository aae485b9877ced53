"""Settings record and the canonical currency table.

Conversion rates are expressed relative to USD (USD = 1).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from spendwise.domain.models import CurrencyCode, Money
from spendwise.domain.transactions import money_to_units, parse_amount

REFERENCE_CURRENCY = CurrencyCode("USD")

SUPPORTED_CURRENCIES: tuple[CurrencyCode, ...] = (
    CurrencyCode("USD"),
    CurrencyCode("EUR"),
    CurrencyCode("GBP"),
    CurrencyCode("RWF"),
)

# Approximate static rates, 1 USD = rate units of the currency
DEFAULT_CONVERSION_RATES: dict[CurrencyCode, Decimal] = {
    CurrencyCode("USD"): Decimal("1"),
    CurrencyCode("EUR"): Decimal("0.92"),
    CurrencyCode("GBP"): Decimal("0.79"),
    CurrencyCode("RWF"): Decimal("1200"),
}

CURRENCY_SYMBOLS: dict[CurrencyCode, str] = {
    CurrencyCode("USD"): "$",
    CurrencyCode("EUR"): "€",
    CurrencyCode("GBP"): "£",
    CurrencyCode("RWF"): "RF ",
}


@dataclass(frozen=True)
class Settings:
    """Immutable application settings."""

    base_currency: CurrencyCode = REFERENCE_CURRENCY
    conversion_rates: dict[CurrencyCode, Decimal] = field(default_factory=lambda: dict(DEFAULT_CONVERSION_RATES))
    monthly_budget: Money = Money(0)


def supported_currencies() -> list[CurrencyCode]:
    """Return the currencies the application can convert between."""
    return list(SUPPORTED_CURRENCIES)


def settings_to_dict(settings: Settings) -> dict[str, Any]:
    """Serialize settings to their persisted JSON shape."""
    return {
        "baseCurrency": settings.base_currency,
        "conversionRates": {code: float(rate) for code, rate in settings.conversion_rates.items()},
        "monthlyBudget": money_to_units(settings.monthly_budget),
    }


def settings_from_dict(data: dict[str, Any], defaults: Settings | None = None) -> Settings:
    """Deserialize settings, filling absent fields from defaults.

    Args:
        data: Settings document (camelCase keys).
        defaults: Settings supplying values for missing keys.

    Returns:
        Settings instance.
    """
    if defaults is None:
        defaults = Settings()

    rates = dict(defaults.conversion_rates)
    for code, rate in (data.get("conversionRates") or {}).items():
        rates[CurrencyCode(code)] = Decimal(str(rate))

    budget = data.get("monthlyBudget")
    return Settings(
        base_currency=CurrencyCode(data.get("baseCurrency") or defaults.base_currency),
        conversion_rates=rates,
        monthly_budget=parse_amount(budget) if budget is not None else defaults.monthly_budget,
    )
