"""Pure functions and types for transaction records.

This module contains the functional core for transaction data:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type). JSON documents carry amounts
in major units, so conversion happens only in the dict helpers below.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

from spendwise.domain.models import CategoryName, Description, Money, TransactionId

TransactionType = Literal["income", "expense"]

INCOME: TransactionType = "income"
EXPENSE: TransactionType = "expense"
TRANSACTION_TYPES: tuple[TransactionType, ...] = (INCOME, EXPENSE)

# Fields a caller may supply for a transaction; "id" is always assigned by the ledger.
DRAFT_FIELDS = ("type", "description", "amount", "category", "date")

# Largest amount a record or budget may hold: 999,999,999,999.99
MAX_AMOUNT = Money(99_999_999_999_999)


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction data."""

    id: TransactionId
    type: TransactionType
    description: Description
    amount: Money
    category: CategoryName
    date: str


def amount_text(value: Any) -> str | None:
    """Render a raw amount value as the text the validation pattern checks.

    Floats are written out in positional notation, so 1e16 reads as
    "10000000000000000" rather than "1e+16".

    Args:
        value: Amount as supplied by a caller (str, int, float or Decimal).

    Returns:
        Text form of the amount, or None if the value is not a number at all.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    if isinstance(value, (int, Decimal)):
        return str(value)
    return None


def parse_amount(value: Any) -> Money:
    """Convert a major-unit amount to cents.

    Args:
        value: Amount in major units (e.g. "85.30", 85.3, 2450).

    Returns:
        Amount in cents.

    Raises:
        ValueError: If the value is not a finite decimal number or has
            fractions of a cent.
    """
    text = amount_text(value)
    if text is None:
        raise ValueError(f"Not a numeric amount: {value!r}")
    try:
        cents = Decimal(text) * 100
    except InvalidOperation as e:
        raise ValueError(f"Not a numeric amount: {value!r}") from e
    if not cents.is_finite():
        raise ValueError(f"Not a numeric amount: {value!r}")
    if cents != cents.to_integral_value():
        raise ValueError(f"Amount has more than 2 decimal places: {value!r}")
    return Money(int(cents))


def money_to_units(amount: Money) -> float:
    """Convert cents to a major-unit number for JSON documents.

    Exact for every amount up to MAX_AMOUNT: such values have at most 14
    significant digits, which a float's repr reproduces unchanged.
    """
    return amount / 100


def build_transaction(transaction_id: TransactionId, draft: dict[str, Any]) -> Transaction:
    """Build a Transaction from an already validated draft.

    Args:
        transaction_id: Id to assign.
        draft: Validated draft with all DRAFT_FIELDS present.

    Returns:
        New Transaction.
    """
    return Transaction(
        id=transaction_id,
        type=draft["type"],
        description=Description(draft["description"]),
        amount=parse_amount(draft["amount"]),
        category=CategoryName(draft["category"]),
        date=draft["date"],
    )


def transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    """Serialize a transaction to its persisted JSON shape."""
    return {
        "id": transaction.id,
        "type": transaction.type,
        "description": transaction.description,
        "amount": money_to_units(transaction.amount),
        "category": transaction.category,
        "date": transaction.date,
    }


def transaction_from_dict(data: dict[str, Any]) -> Transaction:
    """Deserialize a transaction from its persisted JSON shape.

    Raises:
        KeyError: If a required field is missing.
        ValueError: If the amount is not numeric.
    """
    return build_transaction(TransactionId(str(data["id"])), data)


def transaction_to_draft(transaction: Transaction) -> dict[str, Any]:
    """Return the editable fields of a transaction as a draft dictionary."""
    data = transaction_to_dict(transaction)
    del data["id"]
    return data


def next_transaction_id(timestamp_ns: int, floor: int) -> TransactionId:
    """Derive a fresh transaction id from a high-resolution timestamp.

    Args:
        timestamp_ns: Current time in nanoseconds.
        floor: Highest numeric id ever handed out by this ledger.

    Returns:
        Id strictly greater than floor, so ids are never reused.
    """
    return TransactionId(str(max(timestamp_ns, floor + 1)))


def numeric_id(transaction_id: str) -> int:
    """Numeric value of an id, or 0 for ids that are not plain digits."""
    return int(transaction_id) if transaction_id.isdigit() else 0


DEMO_TRANSACTIONS: tuple[Transaction, ...] = (
    Transaction(
        id=TransactionId("1"),
        type=EXPENSE,
        description=Description("Grocery Shopping"),
        amount=Money(8530),
        category=CategoryName("Food"),
        date="2023-05-15",
    ),
    Transaction(
        id=TransactionId("2"),
        type=INCOME,
        description=Description("Salary Deposit"),
        amount=Money(245000),
        category=CategoryName("Income"),
        date="2023-05-10",
    ),
    Transaction(
        id=TransactionId("3"),
        type=EXPENSE,
        description=Description("Restaurant Dinner"),
        amount=Money(6420),
        category=CategoryName("Food"),
        date="2023-05-08",
    ),
    Transaction(
        id=TransactionId("4"),
        type=EXPENSE,
        description=Description("Netflix Subscription"),
        amount=Money(1599),
        category=CategoryName("Entertainment"),
        date="2023-05-05",
    ),
)
