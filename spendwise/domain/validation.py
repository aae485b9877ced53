"""Pure validation rules for transactions and settings.

Every applicable rule is checked so callers can show all problems at once.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from spendwise.domain.settings import SUPPORTED_CURRENCIES
from spendwise.domain.transactions import MAX_AMOUNT, TRANSACTION_TYPES, amount_text

DESCRIPTION_PATTERN = re.compile(r"^[a-zA-Z0-9\s\-.,!?]+$")
AMOUNT_PATTERN = re.compile(r"^\d+(\.\d{1,2})?$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

TYPE_ERROR = "Transaction type must be income or expense"
DESCRIPTION_ERROR = "Description is required and can only contain letters, numbers, and common punctuation"
AMOUNT_ERROR = "Amount must be a positive number with up to 2 decimal places"
AMOUNT_LIMIT_ERROR = "Amount cannot exceed 999,999,999,999.99"
CATEGORY_ERROR = "Category is required"
DATE_ERROR = "Valid date is required (YYYY-MM-DD)"


@dataclass(frozen=True)
class ValidationResult:
    """Immutable validation outcome."""

    valid: bool
    errors: dict[str, str] = field(default_factory=dict)


def _result(errors: dict[str, str]) -> ValidationResult:
    return ValidationResult(valid=not errors, errors=errors)


def is_valid_description(value: Any) -> bool:
    """Check description is non-empty text from the allowed character class."""
    return isinstance(value, str) and bool(value.strip()) and DESCRIPTION_PATTERN.match(value) is not None


def is_valid_amount(value: Any) -> bool:
    """Check amount is a positive number with at most two decimal places."""
    text = amount_text(value)
    if text is None or not AMOUNT_PATTERN.match(text):
        return False
    return Decimal(text) > 0


def within_amount_limit(value: Any) -> bool:
    """Check a well-formed amount does not exceed MAX_AMOUNT."""
    return Decimal(amount_text(value)) * 100 <= MAX_AMOUNT


def is_valid_date(value: Any) -> bool:
    """Check value is a YYYY-MM-DD string naming a real calendar day."""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def validate_transaction(candidate: dict[str, Any]) -> ValidationResult:
    """Validate a transaction draft.

    Args:
        candidate: Draft with type, description, amount, category and date.

    Returns:
        ValidationResult with one message per violated field.
    """
    errors: dict[str, str] = {}

    if candidate.get("type") not in TRANSACTION_TYPES:
        errors["type"] = TYPE_ERROR

    if not is_valid_description(candidate.get("description")):
        errors["description"] = DESCRIPTION_ERROR

    amount = candidate.get("amount")
    if not is_valid_amount(amount):
        errors["amount"] = AMOUNT_ERROR
    elif not within_amount_limit(amount):
        errors["amount"] = AMOUNT_LIMIT_ERROR

    category = candidate.get("category")
    if not isinstance(category, str) or not category.strip():
        errors["category"] = CATEGORY_ERROR

    if not is_valid_date(candidate.get("date")):
        errors["date"] = DATE_ERROR

    return _result(errors)


def _as_decimal(value: Any) -> Decimal | None:
    text = amount_text(value)
    if text is None:
        return None
    try:
        return Decimal(text)
    except InvalidOperation:
        return None


def validate_settings(candidate: dict[str, Any]) -> ValidationResult:
    """Validate a settings document.

    Args:
        candidate: Settings with baseCurrency and optional monthlyBudget and conversionRates.

    Returns:
        ValidationResult with one message per violated field.
    """
    errors: dict[str, str] = {}

    if candidate.get("baseCurrency") not in SUPPORTED_CURRENCIES:
        errors["baseCurrency"] = "Invalid base currency"

    budget = candidate.get("monthlyBudget")
    if budget is not None:
        amount = _as_decimal(budget)
        if amount is None or not amount.is_finite():
            errors["monthlyBudget"] = "Monthly budget must be a number"
        elif amount < 0:
            errors["monthlyBudget"] = "Monthly budget cannot be negative"
        elif not AMOUNT_PATTERN.match(amount_text(budget)):
            errors["monthlyBudget"] = "Monthly budget can have at most 2 decimal places"
        elif not within_amount_limit(budget):
            errors["monthlyBudget"] = "Monthly budget cannot exceed 999,999,999,999.99"

    rates = candidate.get("conversionRates")
    if rates is not None:
        if not isinstance(rates, dict):
            errors["conversionRates"] = "Conversion rates must map currency codes to rates"
        else:
            missing = [code for code in SUPPORTED_CURRENCIES if code not in rates]
            bad = [code for code, rate in rates.items() if not _is_positive_rate(rate)]
            if missing:
                errors["conversionRates"] = f"Missing conversion rate for: {', '.join(missing)}"
            elif bad:
                errors["conversionRates"] = f"Conversion rates must be positive: {', '.join(sorted(bad))}"

    return _result(errors)


def _is_positive_rate(rate: Any) -> bool:
    value = _as_decimal(rate)
    return value is not None and value.is_finite() and value > 0
