"""
Domain Module
"""
from .errors import EntryValidationError, StallbookError, StorageReadError
from .models import (
    BusinessMetrics,
    ConsumableExpense,
    DailyRecord,
    DayExtreme,
    DayPoint,
    ExpenseCategory,
    FixedExpense,
    LiquidBatch,
    Mood,
    ProductCategory,
    ProductCounts,
    PurchaseLine,
    SaleSlot,
    SelfReview,
    UnitSales,
    create_empty_daily_record,
    generate_id,
)

__all__ = [
    "BusinessMetrics",
    "ConsumableExpense",
    "DailyRecord",
    "DayExtreme",
    "DayPoint",
    "EntryValidationError",
    "ExpenseCategory",
    "FixedExpense",
    "LiquidBatch",
    "Mood",
    "ProductCategory",
    "ProductCounts",
    "PurchaseLine",
    "SaleSlot",
    "SelfReview",
    "StallbookError",
    "StorageReadError",
    "UnitSales",
    "create_empty_daily_record",
    "generate_id",
]
