"""Ledger store: the single owner of transactions and settings.

Every mutator validates its input, writes the new state through the document
store and only then swaps it into memory. Readers receive tuples of frozen
dataclasses, never a handle on the internal collection.
"""

import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any, Protocol

from spendwise.dates import today_iso
from spendwise.domain.currency import convert
from spendwise.domain.exchange import ImportPayload, build_export, parse_import, parse_settings, parse_transactions
from spendwise.domain.models import CurrencyCode, Money
from spendwise.domain.queries import (
    BudgetStatus,
    DashboardStats,
    FilterCriteria,
    SortDirection,
    SortKey,
    Totals,
    all_time_totals,
    budget_status,
    dashboard_stats,
    filtered_view,
)
from spendwise.domain.settings import Settings, settings_from_dict, settings_to_dict
from spendwise.domain.transactions import (
    DEMO_TRANSACTIONS,
    DRAFT_FIELDS,
    Transaction,
    build_transaction,
    next_transaction_id,
    numeric_id,
    transaction_to_dict,
    transaction_to_draft,
)
from spendwise.domain.validation import validate_settings, validate_transaction
from spendwise.errors import InvalidCurrencyError, InvalidFormatError, NotFoundError, PersistenceError, ValidationError
from spendwise.logging_setup import get_logger

logger = get_logger(__name__)

TRANSACTIONS_KEY = "spendwise.transactions"
SETTINGS_KEY = "spendwise.settings"


class DocumentStore(Protocol):
    """Durable storage of named JSON-serializable documents."""

    def load(self, key: str, default: Any) -> Any: ...

    def save(self, documents: Mapping[str, Any]) -> None: ...

    def erase(self, keys: Iterable[str]) -> None: ...


def _field_errors(fields: Mapping[str, Any]) -> dict[str, str]:
    errors: dict[str, str] = {}
    for name in fields:
        if name == "id":
            errors["id"] = "Transaction id is assigned by the ledger and cannot be changed"
        elif name not in DRAFT_FIELDS:
            errors[name] = f"Unknown field '{name}'"
    return errors


class Ledger:
    """In-memory ledger backed by a document store."""

    def __init__(
        self,
        store: DocumentStore,
        default_settings: Settings | None = None,
        clock: Callable[[], datetime] = datetime.now,
        timestamp_ns: Callable[[], int] = time.time_ns,
    ) -> None:
        self._store = store
        self._default_settings = default_settings or Settings()
        self._clock = clock
        self._timestamp_ns = timestamp_ns

        result = validate_settings(settings_to_dict(self._default_settings))
        if not result.valid:
            raise ValidationError(result.errors)

        self._transactions: tuple[Transaction, ...] = ()
        self._settings = self._default_settings
        self._id_floor = 0
        self._loaded = False

    # -- loading ---------------------------------------------------------

    def initialize(self) -> None:
        """Load state from the store, seeding demonstration data into an empty ledger.

        Raises:
            PersistenceError: If the store cannot be read or holds invalid documents.
        """
        raw_transactions = self._store.load(TRANSACTIONS_KEY, [])
        raw_settings = self._store.load(SETTINGS_KEY, None)

        try:
            transactions = parse_transactions(raw_transactions)
            settings = (
                parse_settings(raw_settings, self._default_settings)
                if raw_settings is not None
                else self._default_settings
            )
        except InvalidFormatError as e:
            raise PersistenceError(f"Stored data is invalid: {e.message}") from e

        if not transactions:
            transactions = DEMO_TRANSACTIONS
            self._store.save({TRANSACTIONS_KEY: self._encode(transactions)})
            logger.info("Seeded %d demonstration transactions", len(transactions))

        self._transactions = transactions
        self._settings = settings
        self._raise_id_floor(transactions)
        self._loaded = True
        logger.debug("Loaded %d transactions", len(transactions))

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise RuntimeError("Ledger.initialize() must be called before use")

    def _raise_id_floor(self, transactions: Iterable[Transaction]) -> None:
        self._id_floor = max([self._id_floor, *(numeric_id(t.id) for t in transactions)])

    @staticmethod
    def _encode(transactions: Iterable[Transaction]) -> list[dict[str, Any]]:
        return [transaction_to_dict(t) for t in transactions]

    def _commit_transactions(self, transactions: tuple[Transaction, ...]) -> None:
        self._store.save({TRANSACTIONS_KEY: self._encode(transactions)})
        self._transactions = transactions

    # -- reads -------------------------------------------------------------

    def snapshot(self) -> tuple[Transaction, ...]:
        """Return all transactions in insertion order."""
        self._require_loaded()
        return self._transactions

    @property
    def settings(self) -> Settings:
        """Return a copy of the current settings."""
        self._require_loaded()
        return replace(self._settings, conversion_rates=dict(self._settings.conversion_rates))

    def get(self, transaction_id: str) -> Transaction:
        """Look up one transaction.

        Raises:
            NotFoundError: If no transaction has this id.
        """
        self._require_loaded()
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        raise NotFoundError(transaction_id)

    def dashboard_stats(self, now: date | datetime | None = None) -> DashboardStats:
        """Dashboard figures for the current (or given) month."""
        self._require_loaded()
        return dashboard_stats(self._transactions, now or self._clock())

    def filtered_transactions(
        self,
        search_term: str | None = None,
        sort_key: SortKey = "date",
        sort_direction: SortDirection = "desc",
        criteria: FilterCriteria | None = None,
    ) -> tuple[Transaction, ...]:
        """Searched, filtered and sorted view of the ledger."""
        self._require_loaded()
        return filtered_view(self._transactions, search_term, sort_key, sort_direction, criteria)

    def totals(self) -> Totals:
        """Lifetime income, expenses and balance."""
        self._require_loaded()
        return all_time_totals(self._transactions)

    def budget_status(self, now: date | datetime | None = None) -> BudgetStatus | None:
        """Monthly budget usage for the current (or given) month, None if unset."""
        stats = self.dashboard_stats(now)
        return budget_status(stats.expenses, self._settings.monthly_budget)

    def convert(self, amount: Money, from_currency: CurrencyCode, to_currency: CurrencyCode) -> Money:
        """Convert an amount using the configured rate table."""
        self._require_loaded()
        return convert(amount, from_currency, to_currency, self._settings.conversion_rates)

    # -- mutations ---------------------------------------------------------

    def add_transaction(self, draft: Mapping[str, Any]) -> Transaction:
        """Validate and store a new transaction.

        Args:
            draft: Transaction fields without id. A missing date defaults to today.

        Returns:
            The stored transaction.

        Raises:
            ValidationError: If the draft breaks any rule; nothing is stored.
            PersistenceError: If the write fails; nothing is stored.
        """
        self._require_loaded()

        candidate = dict(draft)
        if not candidate.get("date"):
            candidate["date"] = today_iso(self._clock().date())

        errors = {**_field_errors(candidate), **validate_transaction(candidate).errors}
        if errors:
            raise ValidationError(errors)

        transaction_id = next_transaction_id(self._timestamp_ns(), self._id_floor)
        transaction = build_transaction(transaction_id, candidate)

        self._commit_transactions((*self._transactions, transaction))
        self._raise_id_floor([transaction])
        logger.info("Added %s transaction %s (%s)", transaction.type, transaction.id, transaction.category)
        return transaction

    def update_transaction(self, transaction_id: str, fields: Mapping[str, Any]) -> Transaction:
        """Replace fields of an existing transaction.

        Args:
            transaction_id: Id of the transaction to update.
            fields: Field values to replace; id may only repeat the current id.

        Returns:
            The updated transaction.

        Raises:
            NotFoundError: If no transaction has this id.
            ValidationError: If the merged record breaks any rule; nothing changes.
            PersistenceError: If the write fails; nothing changes.
        """
        existing = self.get(transaction_id)

        changes = dict(fields)
        if changes.get("id") == existing.id:
            del changes["id"]

        candidate = {**transaction_to_draft(existing), **changes}
        errors = {**_field_errors(changes), **validate_transaction(candidate).errors}
        if errors:
            raise ValidationError(errors)

        updated = build_transaction(existing.id, candidate)
        self._commit_transactions(tuple(updated if t.id == existing.id else t for t in self._transactions))
        logger.info("Updated transaction %s", existing.id)
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Remove a transaction; unknown ids are ignored.

        Raises:
            PersistenceError: If the write fails; nothing changes.
        """
        self._require_loaded()
        remaining = tuple(t for t in self._transactions if t.id != transaction_id)
        existed = len(remaining) < len(self._transactions)
        self._commit_transactions(remaining)
        if existed:
            logger.info("Deleted transaction %s", transaction_id)
        else:
            logger.debug("Transaction %s not found, nothing deleted", transaction_id)

    def update_settings(self, new_settings: Mapping[str, Any]) -> Settings:
        """Validate and replace settings.

        Args:
            new_settings: Settings document (baseCurrency, conversionRates, monthlyBudget).
                Fields left out take the configured defaults.

        Returns:
            The new settings.

        Raises:
            ValidationError: If the settings break any rule; nothing changes.
            PersistenceError: If the write fails; nothing changes.
        """
        self._require_loaded()

        candidate = dict(new_settings)
        result = validate_settings(candidate)
        if not result.valid:
            raise ValidationError(result.errors)

        settings = settings_from_dict(candidate, self._default_settings)
        self._store.save({SETTINGS_KEY: settings_to_dict(settings)})
        self._settings = settings
        logger.info("Updated settings (base currency %s)", settings.base_currency)
        return self.settings

    def update_conversion_rate(self, currency: CurrencyCode, rate: Decimal) -> Settings:
        """Change the rate of a currency already in the rate table.

        Raises:
            InvalidCurrencyError: If the currency has no rate yet.
            ValidationError: If the rate is not positive.
            PersistenceError: If the write fails; nothing changes.
        """
        self._require_loaded()

        if currency not in self._settings.conversion_rates:
            raise InvalidCurrencyError(currency)
        rate = Decimal(str(rate))
        if not rate.is_finite() or rate <= 0:
            raise ValidationError({"conversionRates": f"Conversion rate for {currency} must be positive"})

        rates = {**self._settings.conversion_rates, currency: rate}
        settings = replace(self._settings, conversion_rates=rates)
        self._store.save({SETTINGS_KEY: settings_to_dict(settings)})
        self._settings = settings
        logger.info("Set conversion rate %s = %s", currency, rate)
        return self.settings

    def clear_all(self) -> None:
        """Erase all transactions and settings from memory and the store.

        Raises:
            PersistenceError: If the erase fails; nothing changes.
        """
        self._require_loaded()
        self._store.erase([TRANSACTIONS_KEY, SETTINGS_KEY])
        self._transactions = ()
        self._settings = self._default_settings
        logger.info("Cleared all data")

    # -- export / import ---------------------------------------------------

    def export_data(self, exported_at: datetime | None = None) -> dict[str, Any]:
        """Build an export document of the whole ledger, stamped in UTC by default."""
        self._require_loaded()
        return build_export(self._transactions, self._settings, exported_at or datetime.now(UTC))

    def import_data(self, document: Any) -> ImportPayload:
        """Replace the ledger with the contents of an export document.

        Transactions are replaced wholesale; settings only when the document
        carries them. Both are written in one store call.

        Raises:
            InvalidFormatError: If the document is malformed; nothing changes.
            PersistenceError: If the write fails; nothing changes.
        """
        self._require_loaded()

        payload = parse_import(document, self._default_settings)
        settings = payload.settings or self._settings

        self._store.save(
            {
                TRANSACTIONS_KEY: self._encode(payload.transactions),
                SETTINGS_KEY: settings_to_dict(settings),
            }
        )
        self._transactions = payload.transactions
        self._settings = settings
        self._raise_id_floor(payload.transactions)
        logger.info("Imported %d transactions", len(payload.transactions))
        return payload

