"""
Unit tests for the key-value backends and the record store
"""
import json
from datetime import date, datetime, timezone

import pytest

from stallbook.config import Settings
from stallbook.config.settings import StorageSettings
from stallbook.domain.errors import StorageReadError
from stallbook.domain.models import ExpenseCategory, FixedExpense
from stallbook.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    RecordStore,
    create_kv_store,
    create_record_store,
)


def _expense(expense_id: str, amount: float = 500) -> FixedExpense:
    return FixedExpense(
        id=expense_id,
        name="Juicer Machine",
        amount=amount,
        category=ExpenseCategory.EQUIPMENT,
        date=date(2024, 1, 1),
    )


class TestJsonFileKeyValueStore:
    """Tests for the file backend"""

    def test_roundtrip(self, tmp_path):
        kv = JsonFileKeyValueStore(str(tmp_path / "data"))

        kv.set("entries", "[]")

        assert kv.get("entries") == "[]"
        assert (tmp_path / "data" / "entries.json").exists()
        assert not (tmp_path / "data" / "entries.json.tmp").exists()

    def test_missing_key(self, tmp_path):
        kv = JsonFileKeyValueStore(str(tmp_path))

        assert kv.get("nothing") is None
        assert kv.delete("nothing") is False

    def test_delete(self, tmp_path):
        kv = JsonFileKeyValueStore(str(tmp_path))
        kv.set("entries", "[]")

        assert kv.delete("entries") is True
        assert kv.get("entries") is None

    def test_ping(self, tmp_path):
        assert JsonFileKeyValueStore(str(tmp_path)).ping() is True


class TestCreateStores:
    """Tests for the factory functions"""

    def test_memory_backend(self):
        settings = Settings(storage=StorageSettings(backend="memory"))

        assert isinstance(create_kv_store(settings), InMemoryKeyValueStore)

    def test_json_backend(self, tmp_path):
        settings = Settings(storage=StorageSettings(backend="json", data_dir=str(tmp_path)))

        assert isinstance(create_kv_store(settings), JsonFileKeyValueStore)

    def test_record_store_keys(self):
        settings = Settings(storage=StorageSettings(backend="memory", daily_key="d", fixed_key="f"))

        store = create_record_store(InMemoryKeyValueStore(), settings)

        assert store.daily_key == "d"
        assert store.fixed_key == "f"

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValueError):
            StorageSettings(backend="sqlite")


class TestDailyRecords:
    """Tests for the daily record collection"""

    def test_empty_store(self, store):
        """A missing key is an empty collection"""
        result = store.list_daily()

        assert result.ok
        assert result.items == []

    def test_insert(self, store, apple_day):
        store.upsert_daily(apple_day)

        result = store.list_daily()
        assert [r.id for r in result.items] == [apple_day.id]

    def test_same_date_replaces(self, store, make_record, today):
        """A second save for the same date replaces the first one"""
        first = make_record(today, sales={"big_combo": (5, 59)})
        second = make_record(today, sales={"juice_only": (10, 20)})

        store.upsert_daily(first)
        store.upsert_daily(second)

        items = store.list_daily().items
        assert len(items) == 1
        assert items[0].id == second.id
        assert items[0].model_dump(exclude={"updated_at"}) == second.model_dump(exclude={"updated_at"})

    def test_replacement_refreshes_updated_at(self, store, make_record, today):
        first = make_record(today)
        second = make_record(today)
        later = datetime(2027, 1, 1, tzinfo=timezone.utc)

        store.upsert_daily(first)
        stored = store.upsert_daily(second, now=later)

        assert stored.updated_at == later

    def test_keeps_other_dates(self, store, make_record):
        store.upsert_daily(make_record(date(2026, 10, 1)))
        store.upsert_daily(make_record(date(2026, 10, 2)))

        assert len(store.list_daily().items) == 2

    def test_get_by_date(self, store, apple_day, today):
        store.upsert_daily(apple_day)

        assert store.get_daily_by_date(today).id == apple_day.id
        assert store.get_daily_by_date(date(2020, 1, 1)) is None

    def test_stored_as_camel_case(self, store, kv, apple_day):
        """Stored documents use camelCase field names"""
        store.upsert_daily(apple_day)

        documents = json.loads(kv.get(store.daily_key))
        assert "grossProfit" in documents[0]
        assert "unitSales" in documents[0]
        assert "gross_profit" not in documents[0]

    def test_delete(self, store, apple_day):
        store.upsert_daily(apple_day)

        assert store.delete_daily(apple_day.id) is True
        assert store.list_daily().items == []

    def test_delete_unknown_id_is_noop(self, store, kv, apple_day):
        """Deleting an id that is not stored leaves storage untouched"""
        store.upsert_daily(apple_day)
        before = kv.get(store.daily_key)

        assert store.delete_daily("missing") is False
        assert kv.get(store.daily_key) == before


class TestCorruptStorage:
    """Tests for unreadable collections"""

    @pytest.mark.parametrize("blob", ["not json", "{}", '[{"id": 1}]'])
    def test_corrupt_blob_is_error(self, blob):
        """Unparseable or mis-shaped data is reported, not raised"""
        store = RecordStore(InMemoryKeyValueStore({"bhoomish_daily_entries": blob}))

        result = store.list_daily()

        assert not result.ok
        assert result.reason

    def test_get_by_date_on_corrupt(self, today):
        store = RecordStore(InMemoryKeyValueStore({"bhoomish_daily_entries": "oops"}))

        assert store.get_daily_by_date(today) is None

    def test_write_over_corrupt_is_refused(self, apple_day):
        """An upsert never replaces an unreadable collection"""
        kv = InMemoryKeyValueStore({"bhoomish_daily_entries": "oops"})
        store = RecordStore(kv)

        with pytest.raises(StorageReadError) as exc:
            store.upsert_daily(apple_day)

        assert exc.value.key == "bhoomish_daily_entries"
        assert kv.get("bhoomish_daily_entries") == "oops"

    def test_one_invalid_document_keeps_history(self, store, kv, make_record, apple_day):
        """A single out-of-range document does not cost the other days"""
        for day in (1, 2, 3):
            store.upsert_daily(make_record(date(2026, 10, day)))
        documents = json.loads(kv.get(store.daily_key))
        documents[1]["selfReview"]["rating"] = 0
        kv.set(store.daily_key, json.dumps(documents))
        before = kv.get(store.daily_key)

        with pytest.raises(StorageReadError):
            store.upsert_daily(apple_day)

        assert kv.get(store.daily_key) == before
        assert len(json.loads(kv.get(store.daily_key))) == 3

    def test_fixed_write_over_corrupt_is_refused(self):
        kv = InMemoryKeyValueStore({"bhoomish_fixed_expenses": "[{}]"})

        with pytest.raises(StorageReadError):
            RecordStore(kv).upsert_fixed(_expense("e1"))

        assert kv.get("bhoomish_fixed_expenses") == "[{}]"

    def test_delete_on_corrupt_leaves_blob(self):
        kv = InMemoryKeyValueStore({"bhoomish_daily_entries": "oops"})

        assert RecordStore(kv).delete_daily("x") is False
        assert kv.get("bhoomish_daily_entries") == "oops"

    def test_collections_are_independent(self, apple_day):
        """A corrupt daily collection does not affect fixed expenses"""
        store = RecordStore(InMemoryKeyValueStore({"bhoomish_daily_entries": "oops"}))
        store.upsert_fixed(_expense("e1"))

        assert store.list_fixed().ok
        assert not store.list_daily().ok


class TestFixedExpenses:
    """Tests for the fixed expense collection"""

    def test_add_and_list(self, store):
        store.upsert_fixed(_expense("e1"))
        store.upsert_fixed(_expense("e2", 2000))

        assert [e.id for e in store.list_fixed().items] == ["e1", "e2"]

    def test_same_id_replaces(self, store):
        store.upsert_fixed(_expense("e1", 500))
        store.upsert_fixed(_expense("e1", 750))

        items = store.list_fixed().items
        assert len(items) == 1
        assert items[0].amount == 750

    def test_delete(self, store):
        store.upsert_fixed(_expense("e1"))

        assert store.delete_fixed("e1") is True
        assert store.delete_fixed("e1") is False
        assert store.list_fixed().items == []

    def test_replace_all(self, store, apple_day):
        store.upsert_fixed(_expense("old"))

        store.replace_all([apple_day], [_expense("new")])

        assert [e.id for e in store.list_fixed().items] == ["new"]
        assert [r.id for r in store.list_daily().items] == [apple_day.id]
