"""
Test Suite Configuration
"""
from datetime import date, datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from stallbook.config import Settings
from stallbook.config.settings import StorageSettings
from stallbook.domain.models import DailyRecord, create_empty_daily_record
from stallbook.services import LedgerService
from stallbook.storage import InMemoryKeyValueStore, RecordStore
from stallbook.transformation import editing
from stallbook.transformation.normalizer import normalize


TODAY = date(2026, 10, 19)
FIXED_NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        APP_ENV="testing",
        storage=StorageSettings(backend="memory"),
    )


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def kv() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def store(kv) -> RecordStore:
    return RecordStore(kv)


@pytest.fixture
def ledger(store, test_settings) -> LedgerService:
    return LedgerService(store, test_settings)


@pytest.fixture
def make_record() -> Callable[..., DailyRecord]:
    """
    Factory for normalized daily records.

    Sales are given as {category: (quantity, unit_price)}.
    """
    def factory(
        record_date: date,
        purchases: Optional[List[Tuple[str, float, float]]] = None,
        sales: Optional[Dict[str, Tuple[int, float]]] = None,
        consumables: Optional[List[Tuple[str, float]]] = None,
        cash: float = 0,
        digital: float = 0,
        wastage: float = 0,
    ) -> DailyRecord:
        record = create_empty_daily_record(record_date, now=FIXED_NOW)
        for material, quantity, price in purchases or []:
            record = editing.add_purchase(record, material, quantity, price)
        for category, (quantity, price) in (sales or {}).items():
            record = editing.set_sale(record, category, quantity=quantity, unit_price=price)
        for label, amount in consumables or []:
            record = editing.add_consumable(record, label, amount)
        record = editing.set_collection(record, cash=cash, digital=digital)
        record = editing.set_wastage(record, wastage)
        return normalize(record, now=FIXED_NOW)

    return factory


@pytest.fixture
def apple_day(make_record) -> DailyRecord:
    """Apple purchase, five big combos, ice, split collection"""
    return make_record(
        TODAY,
        purchases=[("Apple", 3, 120)],
        sales={
            "big_combo": (5, 59),
            "medium_combo": (0, 39),
            "small_box": (0, 29),
            "juice_only": (0, 20),
        },
        consumables=[("Ice", 50)],
        cash=200,
        digital=95,
    )
