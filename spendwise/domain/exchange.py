"""Pure functions for the export/import document format.

An export document looks like::

    {
        "transactions": [<transaction>, ...],
        "settings": {<settings>},
        "exportedAt": "2025-01-15T10:30:00+00:00",
        "version": "1.0.0"
    }

Parsing validates the whole document before anything is returned, so a
caller can replace its state in one step or not at all.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from spendwise.domain.settings import Settings, settings_from_dict, settings_to_dict
from spendwise.domain.transactions import Transaction, transaction_from_dict, transaction_to_dict
from spendwise.domain.validation import validate_settings, validate_transaction
from spendwise.errors import InvalidFormatError

EXPORT_VERSION = "1.0.0"


@dataclass(frozen=True)
class ImportPayload:
    """Immutable, fully validated import contents."""

    transactions: tuple[Transaction, ...]
    settings: Settings | None


def build_export(transactions: Sequence[Transaction], settings: Settings, exported_at: datetime) -> dict[str, Any]:
    """Build an export document.

    Args:
        transactions: Ledger snapshot in insertion order.
        settings: Current settings.
        exported_at: Timestamp recorded in the document.

    Returns:
        JSON-serializable export document.
    """
    return {
        "transactions": [transaction_to_dict(t) for t in transactions],
        "settings": settings_to_dict(settings),
        "exportedAt": exported_at.isoformat(),
        "version": EXPORT_VERSION,
    }


def parse_transactions(raw: Any) -> tuple[Transaction, ...]:
    """Validate and build a list of persisted transaction objects.

    Args:
        raw: Value of a "transactions" field.

    Returns:
        Transactions in document order.

    Raises:
        InvalidFormatError: If raw is not a list, an entry is not a valid
            transaction object, or ids repeat.
    """
    if not isinstance(raw, list):
        raise InvalidFormatError("'transactions' must be an array")

    transactions: list[Transaction] = []
    seen: set[str] = set()
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise InvalidFormatError(f"Transaction #{index} is not an object")

        raw_id = entry.get("id")
        if raw_id is None or isinstance(raw_id, bool) or str(raw_id).strip() == "":
            raise InvalidFormatError(f"Transaction #{index} has no id")
        if str(raw_id) in seen:
            raise InvalidFormatError(f"Duplicate transaction id: {raw_id}")
        seen.add(str(raw_id))

        result = validate_transaction(entry)
        if not result.valid:
            problems = "; ".join(f"{field}: {message}" for field, message in sorted(result.errors.items()))
            raise InvalidFormatError(f"Transaction #{index} is invalid ({problems})")

        transactions.append(transaction_from_dict(entry))

    return tuple(transactions)


def parse_settings(raw: Any, defaults: Settings) -> Settings:
    """Validate and build a settings object.

    Raises:
        InvalidFormatError: If raw is not a valid settings object.
    """
    if not isinstance(raw, dict):
        raise InvalidFormatError("'settings' must be an object")

    result = validate_settings(raw)
    if not result.valid:
        problems = "; ".join(f"{field}: {message}" for field, message in sorted(result.errors.items()))
        raise InvalidFormatError(f"Settings are invalid ({problems})")

    return settings_from_dict(raw, defaults)


def parse_import(document: Any, defaults: Settings) -> ImportPayload:
    """Validate an import document.

    Args:
        document: Decoded JSON document.
        defaults: Settings used to fill fields missing from the document settings.

    Returns:
        ImportPayload; settings is None when the document has none.

    Raises:
        InvalidFormatError: If the document is malformed.
    """
    if not isinstance(document, dict) or "transactions" not in document:
        raise InvalidFormatError("Import document must contain a 'transactions' array")

    transactions = parse_transactions(document["transactions"])

    settings = None
    if document.get("settings") is not None:
        settings = parse_settings(document["settings"], defaults)

    return ImportPayload(transactions=transactions, settings=settings)
