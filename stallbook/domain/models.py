"""
Domain Models - Daily Ledger

This module defines the records kept by the stall:

Records:
- DailyRecord: one calendar day's purchases, production, sales, collection
  and self review, with derived totals
- FixedExpense: one-time equipment/setup costs not tied to a day

Projections:
- BusinessMetrics: portfolio-level statistics over the whole history
- DayPoint: one day of a chart series

Records are stored as camelCase JSON documents; Python code addresses
fields by their snake_case names.
"""

from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Mood(str, Enum):
    """Self-review mood"""
    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    TOUGH = "tough"


class ExpenseCategory(str, Enum):
    """Fixed expense category"""
    EQUIPMENT = "equipment"
    SETUP = "setup"
    LICENSE = "license"
    OTHER = "other"


class ProductCategory(str, Enum):
    """The four product lines sold at the stall"""
    BIG_COMBO = "big_combo"
    MEDIUM_COMBO = "medium_combo"
    SMALL_BOX = "small_box"
    JUICE_ONLY = "juice_only"


DEFAULT_UNIT_PRICES = {
    ProductCategory.BIG_COMBO: 59.0,
    ProductCategory.MEDIUM_COMBO: 39.0,
    ProductCategory.SMALL_BOX: 29.0,
    ProductCategory.JUICE_ONLY: 20.0,
}


def generate_id() -> str:
    """Opaque unique identifier for new records"""
    return uuid.uuid4().hex[:13]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StallModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# =============================================================================
# DAILY RECORD PARTS
# =============================================================================

class PurchaseLine(StallModel):
    """Raw material bought in the morning"""
    material: str
    quantity_kg: float
    unit_price: float
    line_cost: float


class LiquidBatch(StallModel):
    """Juice produced, by type"""
    type: str
    liters: float


class ProductCounts(StallModel):
    """Units produced per product line"""
    big_combo: int = 0
    medium_combo: int = 0
    small_box: int = 0
    juice_only: int = 0


class SaleSlot(StallModel):
    """Quantity sold and the price charged for one product line"""
    quantity_sold: int = 0
    unit_price: float = 0.0

    @property
    def amount(self) -> float:
        return self.quantity_sold * self.unit_price


class UnitSales(StallModel):
    """Sales for the four product lines"""
    big_combo: SaleSlot
    medium_combo: SaleSlot
    small_box: SaleSlot
    juice_only: SaleSlot

    def slots(self) -> List[SaleSlot]:
        return [self.big_combo, self.medium_combo, self.small_box, self.juice_only]

    @property
    def units_sold(self) -> int:
        """Total quantity sold across the four product lines"""
        return sum(slot.quantity_sold for slot in self.slots())


class ConsumableExpense(StallModel):
    """Day-to-day consumables such as cups, boxes, ice"""
    label: str
    amount: float


class SelfReview(StallModel):
    """Operator's own notes on the day"""
    notes: str = ""
    challenges: str = ""
    improvements: str = ""
    mood: Mood = Mood.GOOD
    rating: int = Field(default=3, ge=1, le=5)


# =============================================================================
# RECORDS
# =============================================================================

class DailyRecord(StallModel):
    """
    One calendar day of business activity.

    The date is the natural key: the store keeps at most one record per date.
    Derived totals are only trustworthy after normalization.
    """
    id: str
    date: date

    raw_purchases: List[PurchaseLine] = Field(default_factory=list)
    produced_units: ProductCounts = Field(default_factory=ProductCounts)
    produced_liquid: List[LiquidBatch] = Field(default_factory=list)

    total_raw_weight_kg: float = 0.0
    wastage_weight_kg: float = 0.0
    used_weight_kg: float = 0.0

    unit_sales: UnitSales

    cash_amount: float = 0.0
    digital_amount: float = 0.0
    total_collected: float = 0.0

    consumable_expenses: List[ConsumableExpense] = Field(default_factory=list)

    total_revenue: float = 0.0
    total_expenses: float = 0.0
    gross_profit: float = 0.0
    profit_margin_pct: float = 0.0

    self_review: SelfReview = Field(default_factory=SelfReview)

    created_at: datetime
    updated_at: datetime


class FixedExpense(StallModel):
    """One-time capital or setup cost"""
    id: str
    name: str
    amount: float
    category: ExpenseCategory = ExpenseCategory.OTHER
    date: date
    notes: Optional[str] = None


# =============================================================================
# PROJECTIONS
# =============================================================================

class DayExtreme(StallModel):
    """Best or worst day by gross profit"""
    date: date
    profit: float


class BusinessMetrics(StallModel):
    """Aggregate statistics over every daily record and fixed expense"""
    total_revenue: float = 0.0
    total_expenses: float = 0.0
    total_profit: float = 0.0
    avg_daily_revenue: float = 0.0
    avg_daily_profit: float = 0.0
    total_sales_count: int = 0
    avg_profit_margin: float = 0.0
    best_day: Optional[DayExtreme] = None
    worst_day: Optional[DayExtreme] = None


class DayPoint(StallModel):
    """One day of the revenue/profit/sales chart series"""
    date: date
    revenue: float
    profit: float
    expenses: float
    units_sold: int


# =============================================================================
# FACTORIES
# =============================================================================

def create_empty_daily_record(
    record_date: date,
    unit_prices: Optional[dict] = None,
    now: Optional[datetime] = None,
) -> DailyRecord:
    """
    Build a zeroed record for a date with the default unit prices.

    Args:
        record_date: Calendar date of the record
        unit_prices: Optional overrides keyed by ProductCategory
        now: Creation timestamp (defaults to the current UTC time)
    """
    prices = {**DEFAULT_UNIT_PRICES, **(unit_prices or {})}
    stamp = now or utcnow()

    return DailyRecord(
        id=generate_id(),
        date=record_date,
        unit_sales=UnitSales(
            big_combo=SaleSlot(unit_price=prices[ProductCategory.BIG_COMBO]),
            medium_combo=SaleSlot(unit_price=prices[ProductCategory.MEDIUM_COMBO]),
            small_box=SaleSlot(unit_price=prices[ProductCategory.SMALL_BOX]),
            juice_only=SaleSlot(unit_price=prices[ProductCategory.JUICE_ONLY]),
        ),
        created_at=stamp,
        updated_at=stamp,
    )
