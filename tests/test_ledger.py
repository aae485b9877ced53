"""Tests for the Ledger store."""

import itertools
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from spendwise.domain.models import CurrencyCode, Money
from spendwise.domain.settings import Settings
from spendwise.domain.transactions import DEMO_TRANSACTIONS
from spendwise.errors import (
    InvalidCurrencyError,
    InvalidFormatError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from spendwise.ledger import SETTINGS_KEY, TRANSACTIONS_KEY, Ledger
from spendwise.store import SqliteDocumentStore

NOW = datetime(2023, 5, 20, 12, 0)


class MemoryStore:
    """Document store keeping JSON documents in a dict."""

    def __init__(self, documents=None):
        self.documents = dict(documents or {})
        self.saves = 0

    def load(self, key, default):
        return self.documents.get(key, default)

    def save(self, documents):
        self.saves += 1
        self.documents.update(documents)

    def erase(self, keys):
        for key in keys:
            self.documents.pop(key, None)


class FailingStore(MemoryStore):
    """Document store whose writes fail once armed."""

    def __init__(self, documents=None):
        super().__init__(documents)
        self.fail = False

    def save(self, documents):
        if self.fail:
            raise PersistenceError("disk full")
        super().save(documents)

    def erase(self, keys):
        if self.fail:
            raise PersistenceError("disk full")
        super().erase(keys)


def make_ledger(store=None, default_settings=None):
    ticks = itertools.count(1_700_000_000_000_000_000)
    ledger = Ledger(
        store if store is not None else MemoryStore(),
        default_settings=default_settings,
        clock=lambda: NOW,
        timestamp_ns=lambda: next(ticks),
    )
    ledger.initialize()
    return ledger


DRAFT = {"type": "expense", "description": "Bus ticket", "amount": "2.50", "category": "Transportation", "date": "2023-05-19"}


class TestInitialize:
    """Tests for loading and seeding."""

    def test_seeds_empty_store(self) -> None:
        """Should seed demonstration data into an empty store and persist it."""
        store = MemoryStore()

        ledger = make_ledger(store)

        assert ledger.snapshot() == DEMO_TRANSACTIONS
        assert len(store.documents[TRANSACTIONS_KEY]) == 4

    def test_seeding_is_idempotent(self) -> None:
        """Should not seed again when data exists."""
        store = MemoryStore()
        make_ledger(store)
        saves = store.saves

        ledger = make_ledger(store)

        assert len(ledger.snapshot()) == 4
        assert store.saves == saves

    def test_loads_existing_data(self) -> None:
        """Should load stored transactions and settings."""
        first = make_ledger(MemoryStore())
        first.add_transaction(DRAFT)
        first.update_settings({"baseCurrency": "EUR", "monthlyBudget": 300})

        second = make_ledger(MemoryStore(first._store.documents))

        assert second.snapshot() == first.snapshot()
        assert second.settings.base_currency == "EUR"
        assert second.settings.monthly_budget == 30000

    def test_invalid_stored_data_raises(self) -> None:
        """Should raise PersistenceError when stored documents are malformed."""
        store = MemoryStore({TRANSACTIONS_KEY: [{"id": "1", "type": "bogus"}]})

        with pytest.raises(PersistenceError):
            make_ledger(store)

    def test_use_before_initialize_raises(self) -> None:
        """Should refuse reads before initialize."""
        ledger = Ledger(MemoryStore())

        with pytest.raises(RuntimeError):
            ledger.snapshot()

    def test_invalid_default_settings_rejected(self) -> None:
        """Should reject default settings that fail validation."""
        with pytest.raises(ValidationError):
            Ledger(MemoryStore(), default_settings=Settings(base_currency=CurrencyCode("JPY")))


class TestAddTransaction:
    """Tests for add_transaction."""

    def test_adds_and_persists(self) -> None:
        """Should append the transaction and write it through."""
        store = MemoryStore()
        ledger = make_ledger(store)

        transaction = ledger.add_transaction(DRAFT)

        assert ledger.snapshot()[-1] == transaction
        assert transaction.amount == Money(250)
        assert store.documents[TRANSACTIONS_KEY][-1]["id"] == transaction.id

    def test_ids_unique_and_increasing(self) -> None:
        """Should assign a fresh id to every transaction."""
        store = MemoryStore()
        ledger = make_ledger(store)
        ids = [ledger.add_transaction(DRAFT).id for _ in range(5)]

        assert len(set(ids)) == 5
        assert [int(i) for i in ids] == sorted(int(i) for i in ids)
        assert len(store.documents[TRANSACTIONS_KEY]) == 9

    def test_ids_unique_when_clock_stalls(self) -> None:
        """Should not repeat ids when the timestamp does not advance."""
        ledger = Ledger(MemoryStore(), clock=lambda: NOW, timestamp_ns=lambda: 5)
        ledger.initialize()

        first = ledger.add_transaction(DRAFT)
        second = ledger.add_transaction(DRAFT)

        assert first.id != second.id

    def test_defaults_date_to_today(self) -> None:
        """Should use the clock's date when none is given."""
        ledger = make_ledger()
        draft = {key: value for key, value in DRAFT.items() if key != "date"}

        assert ledger.add_transaction(draft).date == "2023-05-20"

    def test_invalid_draft_leaves_ledger_unchanged(self) -> None:
        """Should raise ValidationError and store nothing."""
        ledger = make_ledger()

        with pytest.raises(ValidationError) as exc_info:
            ledger.add_transaction({**DRAFT, "amount": "12.345", "description": ""})

        assert set(exc_info.value.errors) == {"amount", "description"}
        assert len(ledger.snapshot()) == 4

    def test_rejects_id_and_unknown_fields(self) -> None:
        """Should not accept caller-supplied ids or unknown fields."""
        ledger = make_ledger()

        with pytest.raises(ValidationError) as exc_info:
            ledger.add_transaction({**DRAFT, "id": "42", "tags": "x"})

        assert set(exc_info.value.errors) == {"id", "tags"}

    def test_persistence_failure_leaves_memory_unchanged(self) -> None:
        """Should keep the previous state when the write fails."""
        store = FailingStore()
        ledger = make_ledger(store)
        store.fail = True

        with pytest.raises(PersistenceError):
            ledger.add_transaction(DRAFT)

        assert ledger.snapshot() == DEMO_TRANSACTIONS


class TestUpdateAndDelete:
    """Tests for update_transaction and delete_transaction."""

    def test_update_replaces_fields(self) -> None:
        """Should merge the given fields into the record."""
        ledger = make_ledger()

        updated = ledger.update_transaction("1", {"amount": "90.00", "category": "Groceries"})

        assert updated.amount == Money(9000)
        assert updated.category == "Groceries"
        assert updated.description == "Grocery Shopping"
        assert ledger.get("1") == updated
        assert [t.id for t in ledger.snapshot()] == ["1", "2", "3", "4"]

    def test_update_with_same_id_allowed(self) -> None:
        """Should accept an id equal to the current one."""
        ledger = make_ledger()

        assert ledger.update_transaction("2", {"id": "2", "description": "Pay"}).description == "Pay"

    def test_update_cannot_change_id(self) -> None:
        """Should reject a different id."""
        ledger = make_ledger()

        with pytest.raises(ValidationError):
            ledger.update_transaction("2", {"id": "99"})

    def test_invalid_update_leaves_record(self) -> None:
        """Should leave the record untouched on validation failure."""
        ledger = make_ledger()

        with pytest.raises(ValidationError):
            ledger.update_transaction("3", {"date": "2023-13-01"})

        assert ledger.get("3") == DEMO_TRANSACTIONS[2]

    def test_delete_then_update_not_found(self) -> None:
        """Should raise NotFoundError after deletion."""
        ledger = make_ledger()

        ledger.delete_transaction("3")

        assert [t.id for t in ledger.snapshot()] == ["1", "2", "4"]
        with pytest.raises(NotFoundError):
            ledger.update_transaction("3", {"amount": "1.00"})

    def test_delete_unknown_is_noop(self) -> None:
        """Should ignore unknown ids."""
        ledger = make_ledger()

        ledger.delete_transaction("nope")

        assert ledger.snapshot() == DEMO_TRANSACTIONS


class TestReads:
    """Tests for derived reads."""

    def test_dashboard_uses_clock(self) -> None:
        """Should compute figures for the clock's month."""
        stats = make_ledger().dashboard_stats()

        assert stats.income == 245000
        assert stats.expenses == 16549

    def test_snapshot_is_immutable(self) -> None:
        """Should hand out tuples that callers cannot mutate."""
        ledger = make_ledger()

        assert isinstance(ledger.snapshot(), tuple)

    def test_settings_copy(self) -> None:
        """Should not expose the internal rate table."""
        ledger = make_ledger()

        ledger.settings.conversion_rates["EUR"] = Decimal("5")

        assert ledger.settings.conversion_rates["EUR"] == Decimal("0.92")

    def test_filtered_transactions(self) -> None:
        """Should search and sort the ledger."""
        result = make_ledger().filtered_transactions("food", "amount", "asc")

        assert [t.id for t in result] == ["3", "1"]

    def test_budget_status(self) -> None:
        """Should compare this month's expenses with the budget."""
        ledger = make_ledger()
        assert ledger.budget_status() is None

        ledger.update_settings({"baseCurrency": "USD", "monthlyBudget": 200})
        status = ledger.budget_status()

        assert status is not None
        assert status.remaining == 20000 - 16549

    def test_convert(self) -> None:
        """Should convert with the configured rates."""
        ledger = make_ledger()

        assert ledger.convert(Money(120000), CurrencyCode("RWF"), CurrencyCode("USD")) == Money(100)


class TestSettings:
    """Tests for update_settings and update_conversion_rate."""

    def test_invalid_settings_unchanged(self) -> None:
        """Should reject invalid settings and keep the old ones."""
        ledger = make_ledger()

        with pytest.raises(ValidationError):
            ledger.update_settings({"baseCurrency": "USD", "monthlyBudget": -10})

        assert ledger.settings == Settings()

    def test_budget_with_three_decimals_rejected(self) -> None:
        """Should not truncate a budget with fractions of a cent."""
        ledger = make_ledger()

        with pytest.raises(ValidationError) as exc_info:
            ledger.update_settings({"baseCurrency": "USD", "monthlyBudget": "12.345"})

        assert set(exc_info.value.errors) == {"monthlyBudget"}
        assert ledger.settings.monthly_budget == 0

    def test_update_conversion_rate(self) -> None:
        """Should change one rate and persist it."""
        store = MemoryStore()
        ledger = make_ledger(store)

        ledger.update_conversion_rate(CurrencyCode("RWF"), Decimal("1250"))

        assert ledger.settings.conversion_rates["RWF"] == Decimal("1250")
        assert store.documents[SETTINGS_KEY]["conversionRates"]["RWF"] == 1250.0

    def test_update_unknown_rate(self) -> None:
        """Should reject currencies outside the rate table."""
        with pytest.raises(InvalidCurrencyError):
            make_ledger().update_conversion_rate(CurrencyCode("JPY"), Decimal("150"))

    def test_update_rate_must_be_positive(self) -> None:
        """Should reject zero rates."""
        with pytest.raises(ValidationError):
            make_ledger().update_conversion_rate(CurrencyCode("EUR"), Decimal("0"))


class TestClearExportImport:
    """Tests for clear_all, export_data and import_data."""

    def test_clear_all(self) -> None:
        """Should empty the ledger and reset settings."""
        store = MemoryStore()
        ledger = make_ledger(store)
        ledger.update_settings({"baseCurrency": "GBP"})

        ledger.clear_all()

        assert ledger.snapshot() == ()
        assert ledger.settings == Settings()
        assert store.documents == {}

    def test_clear_failure_keeps_state(self) -> None:
        """Should keep the data when the erase fails."""
        store = FailingStore()
        ledger = make_ledger(store)
        store.fail = True

        with pytest.raises(PersistenceError):
            ledger.clear_all()

        assert len(ledger.snapshot()) == 4

    def test_export_timestamp_is_utc(self) -> None:
        """Should stamp exports with an explicit UTC offset."""
        document = make_ledger().export_data()

        assert document["exportedAt"].endswith("+00:00")
        assert datetime.fromisoformat(document["exportedAt"]).utcoffset() == timedelta(0)

    def test_import_of_export_restores_state(self) -> None:
        """Should restore exactly what was exported."""
        source = make_ledger()
        source.add_transaction(DRAFT)
        source.update_settings({"baseCurrency": "RWF", "monthlyBudget": 150000})
        document = source.export_data()

        target = make_ledger()
        target.import_data(document)

        assert target.snapshot() == source.snapshot()
        assert target.settings == source.settings

    def test_import_without_settings_keeps_settings(self) -> None:
        """Should only replace transactions when the document has no settings."""
        ledger = make_ledger()
        ledger.update_settings({"baseCurrency": "EUR"})

        ledger.import_data({"transactions": []})

        assert ledger.snapshot() == ()
        assert ledger.settings.base_currency == "EUR"

    def test_invalid_import_changes_nothing(self) -> None:
        """Should reject malformed documents atomically."""
        ledger = make_ledger()

        with pytest.raises(InvalidFormatError):
            ledger.import_data({"transactions": [{"id": "1"}]})

        assert ledger.snapshot() == DEMO_TRANSACTIONS

    def test_ids_after_import_stay_unique(self) -> None:
        """Should not reuse imported ids."""
        ledger = Ledger(MemoryStore(), clock=lambda: NOW, timestamp_ns=lambda: 1)
        ledger.initialize()

        added = ledger.add_transaction(DRAFT)

        assert added.id not in {t.id for t in DEMO_TRANSACTIONS}


class TestWithSqlite:
    """Tests against the real sqlite document store."""

    def test_survives_restart(self, tmp_path) -> None:
        """Should reload what a previous process wrote."""
        db_path = tmp_path / "spendwise.db"
        ledger = make_ledger(SqliteDocumentStore(db_path))
        added = ledger.add_transaction(DRAFT)
        ledger.update_conversion_rate(CurrencyCode("EUR"), Decimal("0.9"))

        reloaded = make_ledger(SqliteDocumentStore(db_path))

        assert reloaded.get(added.id) == added
        assert reloaded.settings.conversion_rates["EUR"] == Decimal("0.9")

    def test_clear_then_restart_reseeds(self, tmp_path) -> None:
        """Should seed demonstration data again after clearing."""
        db_path = tmp_path / "spendwise.db"
        make_ledger(SqliteDocumentStore(db_path)).clear_all()

        reloaded = make_ledger(SqliteDocumentStore(db_path))

        assert reloaded.snapshot() == DEMO_TRANSACTIONS

    def test_largest_amounts_survive_restart(self, tmp_path) -> None:
        """Should reload the largest allowed amount and budget to the cent."""
        db_path = tmp_path / "spendwise.db"
        ledger = make_ledger(SqliteDocumentStore(db_path))
        added = ledger.add_transaction({**DRAFT, "amount": "999999999999.99"})
        ledger.update_settings({"baseCurrency": "USD", "monthlyBudget": "999999999999.99"})

        reloaded = make_ledger(SqliteDocumentStore(db_path))

        assert reloaded.get(added.id).amount == Money(99_999_999_999_999)
        assert reloaded.settings.monthly_budget == Money(99_999_999_999_999)

    def test_oversized_amount_rejected_and_store_stays_loadable(self, tmp_path) -> None:
        """Should refuse amounts that cannot be stored exactly instead of corrupting the store."""
        db_path = tmp_path / "spendwise.db"
        ledger = make_ledger(SqliteDocumentStore(db_path))

        with pytest.raises(ValidationError) as exc_info:
            ledger.add_transaction({**DRAFT, "amount": "10000000000000000"})

        assert set(exc_info.value.errors) == {"amount"}
        assert make_ledger(SqliteDocumentStore(db_path)).snapshot() == DEMO_TRANSACTIONS
