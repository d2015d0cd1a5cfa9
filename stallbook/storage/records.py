"""
Record Store

Two independent collections kept as JSON arrays in a key-value backend:
- Daily records, unique by date
- Fixed expenses, unique by id

Reads return a typed result instead of raising: ``Ok(items)`` or
``Err(reason)``. Deciding what to do with an unreadable collection is the
caller's job. Writes never replace an unreadable collection: upserts raise
``StorageReadError`` and leave the stored blob untouched.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Generic, List, Optional, TypeVar, Union

import structlog
from pydantic import TypeAdapter, ValidationError
from redis.exceptions import RedisError

from stallbook.config import Settings, get_settings
from stallbook.domain.errors import StorageReadError
from stallbook.domain.models import DailyRecord, FixedExpense, utcnow
from stallbook.storage.kv import KeyValueStore

logger = structlog.get_logger(__name__)

T = TypeVar("T")

_daily_adapter = TypeAdapter(List[DailyRecord])
_fixed_adapter = TypeAdapter(List[FixedExpense])


@dataclass
class Ok(Generic[T]):
    """Collection read successfully"""
    items: List[T] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return True


@dataclass
class Err:
    """Collection could not be read"""
    error: StorageReadError

    @property
    def ok(self) -> bool:
        return False

    @property
    def reason(self) -> str:
        return self.error.reason


LoadResult = Union[Ok[T], Err]


class RecordStore:
    """
    Persistence for daily records and fixed expenses.

    The store never recomputes derived fields; callers normalize records
    before handing them over.

    Example:
        store = RecordStore(InMemoryKeyValueStore())
        store.upsert_daily(record)
        result = store.list_daily()
    """

    def __init__(
        self,
        kv: KeyValueStore,
        daily_key: str = "bhoomish_daily_entries",
        fixed_key: str = "bhoomish_fixed_expenses",
    ):
        self.kv = kv
        self.daily_key = daily_key
        self.fixed_key = fixed_key

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def _load(self, key: str, adapter: TypeAdapter) -> LoadResult:
        try:
            blob = self.kv.get(key)
        except (OSError, UnicodeDecodeError, RedisError) as e:
            logger.warning("Storage backend read failed", key=key, error=str(e))
            return Err(StorageReadError(key, str(e)))

        if blob is None:
            return Ok([])

        try:
            return Ok(adapter.validate_json(blob))
        except ValidationError as e:
            logger.warning("Stored collection is unreadable", key=key, errors=e.error_count())
            return Err(StorageReadError(key, str(e)))

    def _save(self, key: str, adapter: TypeAdapter, items: list) -> None:
        self.kv.set(key, adapter.dump_json(items, by_alias=True).decode("utf-8"))

    def _load_for_write(self, key: str, adapter: TypeAdapter) -> list:
        """
        Current contents of a collection that is about to be rewritten.

        Raises:
            StorageReadError: the stored blob is unreadable; it is left as is
        """
        result = self._load(key, adapter)
        if not result.ok:
            logger.error("Write refused, stored collection is unreadable", key=key, reason=result.reason)
            raise result.error
        return result.items

    # -------------------------------------------------------------------------
    # Daily records
    # -------------------------------------------------------------------------

    def list_daily(self) -> LoadResult:
        """All daily records in stored order"""
        return self._load(self.daily_key, _daily_adapter)

    def get_daily_by_date(self, record_date: date) -> Optional[DailyRecord]:
        """The record for a date, or None when absent or unreadable"""
        result = self.list_daily()
        if not result.ok:
            return None
        return next((r for r in result.items if r.date == record_date), None)

    def upsert_daily(self, record: DailyRecord, now: Optional[datetime] = None) -> DailyRecord:
        """
        Insert a record, replacing any record with the same date.

        A replacement takes the incoming record verbatim with a fresh
        updated_at; the id of the record being replaced is not kept.

        Returns:
            The record as stored

        Raises:
            StorageReadError: the daily collection is unreadable
        """
        records = self._load_for_write(self.daily_key, _daily_adapter)
        index = next((i for i, r in enumerate(records) if r.date == record.date), None)

        if index is not None:
            stored = record.model_copy(update={"updated_at": now or utcnow()})
            replaced_id = records[index].id
            records[index] = stored
            logger.info(
                "Daily record replaced",
                date=str(record.date),
                id=record.id,
                replaced_id=replaced_id,
            )
        else:
            stored = record
            records.append(stored)
            logger.info("Daily record added", date=str(record.date), id=record.id)

        self._save(self.daily_key, _daily_adapter, records)
        return stored

    def delete_daily(self, record_id: str) -> bool:
        """Remove a record by id; returns False when nothing matched"""
        result = self.list_daily()
        if not result.ok:
            return False

        kept = [r for r in result.items if r.id != record_id]
        if len(kept) == len(result.items):
            return False

        self._save(self.daily_key, _daily_adapter, kept)
        logger.info("Daily record deleted", id=record_id)
        return True

    # -------------------------------------------------------------------------
    # Fixed expenses
    # -------------------------------------------------------------------------

    def list_fixed(self) -> LoadResult:
        """All fixed expenses in stored order"""
        return self._load(self.fixed_key, _fixed_adapter)

    def upsert_fixed(self, expense: FixedExpense) -> FixedExpense:
        """
        Insert an expense or replace the one with the same id.

        Raises:
            StorageReadError: the fixed expense collection is unreadable
        """
        expenses = self._load_for_write(self.fixed_key, _fixed_adapter)
        index = next((i for i, e in enumerate(expenses) if e.id == expense.id), None)

        if index is not None:
            expenses[index] = expense
        else:
            expenses.append(expense)

        self._save(self.fixed_key, _fixed_adapter, expenses)
        logger.info("Fixed expense saved", id=expense.id, amount=expense.amount)
        return expense

    def delete_fixed(self, expense_id: str) -> bool:
        result = self.list_fixed()
        if not result.ok:
            return False

        kept = [e for e in result.items if e.id != expense_id]
        if len(kept) == len(result.items):
            return False

        self._save(self.fixed_key, _fixed_adapter, kept)
        logger.info("Fixed expense deleted", id=expense_id)
        return True

    # -------------------------------------------------------------------------
    # Bulk
    # -------------------------------------------------------------------------

    def replace_all(self, records: List[DailyRecord], expenses: List[FixedExpense]) -> None:
        """Overwrite both collections, e.g. with generated sample data"""
        self._save(self.daily_key, _daily_adapter, records)
        self._save(self.fixed_key, _fixed_adapter, expenses)
        logger.info("Collections replaced", records=len(records), expenses=len(expenses))


def create_record_store(kv: KeyValueStore, settings: Optional[Settings] = None) -> RecordStore:
    """Record store using the collection keys from settings"""
    settings = settings or get_settings()
    return RecordStore(
        kv,
        daily_key=settings.storage.daily_key,
        fixed_key=settings.storage.fixed_key,
    )
