"""
Ledger Service

Application service behind every screen of the stall book. It owns the
injected record store and decides how to react to an unreadable collection.
Reads log it and carry on with an empty one, so dashboards still render.
Writes let the StorageReadError through, so nothing stored is replaced.
"""

from datetime import date
from typing import List, Optional, Union

import polars as pl
import structlog

from stallbook.analytics import metrics as metrics_mod
from stallbook.analytics.timeseries import project, weekly_rollup
from stallbook.config import Settings, get_settings
from stallbook.data.generators import SampleDataGenerator
from stallbook.domain.errors import EntryValidationError
from stallbook.domain.models import (
    BusinessMetrics,
    DailyRecord,
    DayPoint,
    ExpenseCategory,
    FixedExpense,
    ProductCategory,
    create_empty_daily_record,
    generate_id,
)
from stallbook.quality.validators import ValidationResult, validate_fixed_expense, validate_history
from stallbook.storage.records import RecordStore
from stallbook.transformation.normalizer import normalize

logger = structlog.get_logger(__name__)


def _expense_category(category: Union[ExpenseCategory, str]) -> ExpenseCategory:
    try:
        return ExpenseCategory(category)
    except ValueError:
        raise EntryValidationError(f"Unknown expense category '{category}'", field="category")


class LedgerService:
    """
    Entry point for reading and writing the stall's records.

    Example:
        service = LedgerService(RecordStore(InMemoryKeyValueStore()))
        record = service.open_entry(date.today())
        service.save_entry(record)
        service.metrics()
    """

    def __init__(self, store: RecordStore, settings: Optional[Settings] = None):
        self.store = store
        self.settings = settings or get_settings()

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def daily_records(self) -> List[DailyRecord]:
        result = self.store.list_daily()
        if not result.ok:
            logger.warning("Daily records unreadable, using empty history", reason=result.reason)
            return []
        return result.items

    def fixed_expenses(self) -> List[FixedExpense]:
        result = self.store.list_fixed()
        if not result.ok:
            logger.warning("Fixed expenses unreadable, using empty list", reason=result.reason)
            return []
        return result.items

    # -------------------------------------------------------------------------
    # Daily entries
    # -------------------------------------------------------------------------

    def new_entry(self, record_date: date) -> DailyRecord:
        business = self.settings.business
        return create_empty_daily_record(
            record_date,
            unit_prices={
                ProductCategory.BIG_COMBO: business.big_combo_price,
                ProductCategory.MEDIUM_COMBO: business.medium_combo_price,
                ProductCategory.SMALL_BOX: business.small_box_price,
                ProductCategory.JUICE_ONLY: business.juice_only_price,
            },
        )

    def find_entry(self, record_date: date) -> Optional[DailyRecord]:
        return self.store.get_daily_by_date(record_date)

    def open_entry(self, record_date: date) -> DailyRecord:
        """The stored record for a date, or a fresh template"""
        return self.find_entry(record_date) or self.new_entry(record_date)

    def save_entry(self, record: DailyRecord) -> DailyRecord:
        """
        Normalize and persist; returns the record as stored.

        Raises:
            StorageReadError: the stored history is unreadable and was left untouched
        """
        stored = self.store.upsert_daily(normalize(record))
        logger.info(
            "Entry saved",
            date=str(stored.date),
            revenue=stored.total_revenue,
            profit=stored.gross_profit,
        )
        return stored

    def delete_entry(self, record_id: str) -> bool:
        return self.store.delete_daily(record_id)

    def history(self) -> List[DailyRecord]:
        """All records, newest first"""
        return metrics_mod.sort_by_date_desc(self.daily_records())

    # -------------------------------------------------------------------------
    # Fixed expenses
    # -------------------------------------------------------------------------

    def add_fixed_expense(
        self,
        name: str,
        amount: float,
        category: Union[ExpenseCategory, str] = ExpenseCategory.EQUIPMENT,
        notes: Optional[str] = None,
        expense_date: Optional[date] = None,
    ) -> FixedExpense:
        """Validate and record a one-time cost dated today unless told otherwise"""
        validate_fixed_expense(name, amount)
        expense = FixedExpense(
            id=generate_id(),
            name=name.strip(),
            amount=amount,
            category=_expense_category(category),
            date=expense_date or date.today(),
            notes=notes or None,
        )
        return self.store.upsert_fixed(expense)

    def delete_fixed_expense(self, expense_id: str) -> bool:
        return self.store.delete_fixed(expense_id)

    def fixed_expense_summary(self) -> dict:
        return metrics_mod.fixed_expense_summary(self.fixed_expenses())

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def metrics(self) -> BusinessMetrics:
        return metrics_mod.aggregate(self.daily_records(), self.fixed_expenses())

    def chart_data(self, weeks: Optional[int] = None, today: Optional[date] = None) -> List[DayPoint]:
        weeks = weeks if weeks is not None else self.settings.business.chart_window_weeks
        return project(self.daily_records(), weeks, today)

    def weekly_summary(self, weeks: Optional[int] = None, today: Optional[date] = None) -> pl.DataFrame:
        weeks = weeks if weeks is not None else self.settings.business.analytics_window_weeks
        return weekly_rollup(self.chart_data(weeks, today))

    def expense_breakdown(self) -> List[dict]:
        return metrics_mod.expense_breakdown(self.daily_records())

    def recent_entries(self, limit: Optional[int] = None) -> List[DailyRecord]:
        limit = limit if limit is not None else self.settings.business.recent_entries_limit
        return metrics_mod.recent_entries(self.daily_records(), limit)

    def quality_report(self) -> ValidationResult:
        return validate_history(self.daily_records())

    # -------------------------------------------------------------------------
    # Demo data
    # -------------------------------------------------------------------------

    def generate_sample_data(
        self,
        seed: Optional[int] = None,
        days: int = 30,
        today: Optional[date] = None,
    ) -> int:
        """Replace both collections with a generated month of activity"""
        records, expenses = SampleDataGenerator(seed=seed).generate(days=days, today=today)
        self.store.replace_all(records, expenses)
        logger.info("Sample data generated", records=len(records), expenses=len(expenses))
        return len(records)
