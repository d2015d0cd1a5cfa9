"""
Entry Normalizer

Recomputes every derived field of a daily record from its raw inputs so
that stored data is always internally consistent:

- Purchases: each line cost is quantity x price per kg
- Weights: total raw weight from purchases, used weight after wastage
- Money: expenses, revenue, collection, gross profit, profit margin
"""

from datetime import datetime
from typing import Optional

import structlog

from stallbook.domain.models import DailyRecord, utcnow

logger = structlog.get_logger(__name__)


def purchase_cost(record: DailyRecord) -> float:
    """Total cost of the morning's raw purchases"""
    return sum(line.line_cost for line in record.raw_purchases)


def consumables_cost(record: DailyRecord) -> float:
    """Total of the day's consumable expenses"""
    return sum(expense.amount for expense in record.consumable_expenses)


def normalize(record: DailyRecord, now: Optional[datetime] = None) -> DailyRecord:
    """
    Return a copy of the record with all derived fields recomputed.

    Line costs supplied with the record are ignored and recomputed.
    Used weight is not clamped: wastage above the purchased weight yields
    a negative value. Applying the function twice gives the same result
    apart from updated_at.

    Args:
        record: Record as edited by the operator
        now: Timestamp to stamp into updated_at

    Returns:
        Normalized record
    """
    raw_purchases = [
        line.model_copy(update={"line_cost": line.quantity_kg * line.unit_price})
        for line in record.raw_purchases
    ]
    total_expenses = sum(line.line_cost for line in raw_purchases) + consumables_cost(record)
    total_revenue = sum(slot.amount for slot in record.unit_sales.slots())
    gross_profit = total_revenue - total_expenses
    profit_margin_pct = (gross_profit / total_revenue) * 100 if total_revenue > 0 else 0.0

    total_raw_weight_kg = sum(line.quantity_kg for line in raw_purchases)

    normalized = record.model_copy(
        deep=True,
        update={
            "raw_purchases": raw_purchases,
            "total_raw_weight_kg": total_raw_weight_kg,
            "used_weight_kg": total_raw_weight_kg - record.wastage_weight_kg,
            "total_revenue": total_revenue,
            "total_expenses": total_expenses,
            "total_collected": record.cash_amount + record.digital_amount,
            "gross_profit": gross_profit,
            "profit_margin_pct": profit_margin_pct,
            "updated_at": now or utcnow(),
        },
    )

    logger.debug(
        "Entry normalized",
        date=str(record.date),
        revenue=total_revenue,
        expenses=total_expenses,
        profit=gross_profit,
    )

    return normalized
