"""
Time-Series Projection

Maps the trailing window of daily records into a per-day series for the
revenue/profit and sales charts, plus polars frames for weekly roll-ups.
"""

from datetime import date, timedelta
from typing import List, Optional, Sequence

import polars as pl
import structlog

from stallbook.domain.models import DailyRecord, DayPoint

logger = structlog.get_logger(__name__)

DAYPOINT_SCHEMA = {
    "date": pl.Date,
    "revenue": pl.Float64,
    "profit": pl.Float64,
    "expenses": pl.Float64,
    "units_sold": pl.Int64,
}


def window_start(window_weeks: int, today: Optional[date] = None) -> date:
    """First date inside a trailing window of ``window_weeks`` weeks"""
    return (today or date.today()) - timedelta(days=window_weeks * 7)


def project(
    daily_records: Sequence[DailyRecord],
    window_weeks: int = 4,
    today: Optional[date] = None,
) -> List[DayPoint]:
    """
    Project records in the trailing window onto chart points.

    The lower bound is inclusive and there is no upper bound, so records
    dated in the future are kept. Points are sorted by ascending date.

    Args:
        daily_records: Stored daily records in any order
        window_weeks: Window length in weeks
        today: Reference date (defaults to the local date)

    Returns:
        Chart points, oldest first
    """
    start = window_start(window_weeks, today)

    in_window = sorted(
        (r for r in daily_records if r.date >= start),
        key=lambda r: r.date,
    )

    points = [
        DayPoint(
            date=r.date,
            revenue=r.total_revenue,
            profit=r.gross_profit,
            expenses=r.total_expenses,
            units_sold=r.unit_sales.units_sold,
        )
        for r in in_window
    ]

    logger.debug("Series projected", window_weeks=window_weeks, start=str(start), points=len(points))
    return points


def to_frame(points: Sequence[DayPoint]) -> pl.DataFrame:
    """Chart points as a polars frame"""
    return pl.DataFrame(
        [
            {
                "date": p.date,
                "revenue": float(p.revenue),
                "profit": float(p.profit),
                "expenses": float(p.expenses),
                "units_sold": p.units_sold,
            }
            for p in points
        ],
        schema=DAYPOINT_SCHEMA,
    )


def weekly_rollup(points: Sequence[DayPoint]) -> pl.DataFrame:
    """
    Sum chart points per calendar week (weeks start on Monday).

    Returns:
        Frame with week_start, days, revenue, profit, expenses, units_sold
        and the revenue-weighted margin of the week
    """
    df = to_frame(points)

    weekly = (
        df.with_columns(pl.col("date").dt.truncate("1w").alias("week_start"))
        .group_by("week_start")
        .agg([
            pl.len().alias("days"),
            pl.col("revenue").sum(),
            pl.col("profit").sum(),
            pl.col("expenses").sum(),
            pl.col("units_sold").sum(),
        ])
        .sort("week_start")
    )

    return weekly.with_columns(
        pl.when(pl.col("revenue") > 0)
        .then(pl.col("profit") / pl.col("revenue") * 100)
        .otherwise(0.0)
        .alias("margin_pct")
    )
