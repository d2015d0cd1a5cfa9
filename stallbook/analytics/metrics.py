"""
Business Metrics

Portfolio-level statistics over the full history of daily records and
fixed expenses. All functions are pure; nothing here touches storage.
"""

from typing import Dict, List, Sequence

import structlog

from stallbook.domain.models import (
    BusinessMetrics,
    DailyRecord,
    DayExtreme,
    ExpenseCategory,
    FixedExpense,
)
from stallbook.transformation.normalizer import consumables_cost, purchase_cost

logger = structlog.get_logger(__name__)


def aggregate(
    daily_records: Sequence[DailyRecord],
    fixed_expenses: Sequence[FixedExpense],
) -> BusinessMetrics:
    """
    Compute business metrics from stored records.

    Fixed expenses count towards total expenses and profit. The average
    margin is the mean of each day's stored margin, not the margin of the
    pooled totals. Best and worst day come from a stable descending sort
    by gross profit, so ties go to the earlier record in stored order.

    Args:
        daily_records: Normalized daily records
        fixed_expenses: One-time costs

    Returns:
        BusinessMetrics; all zero with no extrema when there are no records
    """
    if not daily_records:
        return BusinessMetrics()

    count = len(daily_records)
    total_fixed = sum(e.amount for e in fixed_expenses)
    total_revenue = sum(r.total_revenue for r in daily_records)
    total_expenses = sum(r.total_expenses for r in daily_records) + total_fixed
    total_profit = total_revenue - total_expenses

    total_sales_count = sum(r.unit_sales.units_sold for r in daily_records)
    avg_profit_margin = sum(r.profit_margin_pct for r in daily_records) / count

    by_profit = sorted(daily_records, key=lambda r: r.gross_profit, reverse=True)
    best, worst = by_profit[0], by_profit[-1]

    metrics = BusinessMetrics(
        total_revenue=total_revenue,
        total_expenses=total_expenses,
        total_profit=total_profit,
        avg_daily_revenue=total_revenue / count,
        avg_daily_profit=total_profit / count,
        total_sales_count=total_sales_count,
        avg_profit_margin=avg_profit_margin,
        best_day=DayExtreme(date=best.date, profit=best.gross_profit),
        worst_day=DayExtreme(date=worst.date, profit=worst.gross_profit),
    )

    logger.debug(
        "Metrics aggregated",
        days=count,
        revenue=total_revenue,
        profit=total_profit,
    )

    return metrics


def expense_breakdown(daily_records: Sequence[DailyRecord]) -> List[Dict[str, float]]:
    """
    Split variable costs into raw fruit purchases and consumables.

    Slices with a zero total are left out.
    """
    breakdown = [
        {"name": "Raw Fruits", "value": sum(purchase_cost(r) for r in daily_records)},
        {"name": "Consumables", "value": sum(consumables_cost(r) for r in daily_records)},
    ]
    return [slice_ for slice_ in breakdown if slice_["value"] > 0]


def fixed_expense_summary(fixed_expenses: Sequence[FixedExpense]) -> Dict[str, object]:
    """Total of fixed expenses and the total per category"""
    by_category: Dict[str, float] = {c.value: 0.0 for c in ExpenseCategory}
    for expense in fixed_expenses:
        by_category[ExpenseCategory(expense.category).value] += expense.amount

    return {
        "total": sum(e.amount for e in fixed_expenses),
        "count": len(fixed_expenses),
        "by_category": by_category,
    }


def sort_by_date_desc(daily_records: Sequence[DailyRecord]) -> List[DailyRecord]:
    """Newest first"""
    return sorted(daily_records, key=lambda r: r.date, reverse=True)


def recent_entries(daily_records: Sequence[DailyRecord], limit: int = 5) -> List[DailyRecord]:
    """The most recent ``limit`` records, newest first"""
    return sort_by_date_desc(daily_records)[:limit]
