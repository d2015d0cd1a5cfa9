"""
Analytics API Endpoints

Dashboard figures, chart series and data quality for the stall's history.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
import structlog

from stallbook.domain.models import BusinessMetrics, DailyRecord, DayPoint
from stallbook.formatting import format_currency, format_date, format_percent
from stallbook.serving.api.dependencies import get_ledger
from stallbook.services.ledger import LedgerService

router = APIRouter()
logger = structlog.get_logger(__name__)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class MetricsResponse(BaseModel):
    """Metrics with display strings for the stat cards"""
    metrics: BusinessMetrics
    days_tracked: int
    display: dict


class ChartPoint(BaseModel):
    """Chart point with a formatted axis label"""
    point: DayPoint
    label: str


class ChartResponse(BaseModel):
    weeks: int
    data: List[ChartPoint]


class BreakdownSlice(BaseModel):
    name: str
    value: float


class WeeklyRow(BaseModel):
    week_start: date
    days: int
    revenue: float
    profit: float
    expenses: float
    units_sold: int
    margin_pct: float


class QualityCheck(BaseModel):
    name: str
    passed: bool
    severity: str
    message: str
    failed_dates: List[date] = []


class QualityResponse(BaseModel):
    status: str
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[QualityCheck]


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/metrics", response_model=MetricsResponse)
def get_metrics(ledger: LedgerService = Depends(get_ledger)) -> MetricsResponse:
    """Totals, averages and best/worst day over the whole history."""
    metrics = ledger.metrics()
    days_tracked = len(ledger.daily_records())

    logger.info("Metrics requested", days=days_tracked, profit=metrics.total_profit)

    return MetricsResponse(
        metrics=metrics,
        days_tracked=days_tracked,
        display={
            "total_revenue": format_currency(metrics.total_revenue),
            "total_expenses": format_currency(metrics.total_expenses),
            "total_profit": format_currency(metrics.total_profit),
            "avg_daily_revenue": format_currency(metrics.avg_daily_revenue),
            "avg_daily_profit": format_currency(metrics.avg_daily_profit),
            "avg_profit_margin": format_percent(metrics.avg_profit_margin),
        },
    )


@router.get("/chart", response_model=ChartResponse)
def get_chart(
    weeks: Optional[int] = Query(default=None, ge=1, le=52),
    ledger: LedgerService = Depends(get_ledger),
) -> ChartResponse:
    """Per-day revenue, profit, expenses and units sold for the trailing window."""
    weeks = weeks or ledger.settings.business.chart_window_weeks
    points = ledger.chart_data(weeks)
    return ChartResponse(
        weeks=weeks,
        data=[ChartPoint(point=p, label=format_date(p.date)) for p in points],
    )


@router.get("/weekly", response_model=List[WeeklyRow])
def get_weekly(
    weeks: Optional[int] = Query(default=None, ge=1, le=52),
    ledger: LedgerService = Depends(get_ledger),
) -> List[WeeklyRow]:
    """Chart series summed per calendar week."""
    frame = ledger.weekly_summary(weeks)
    return [WeeklyRow(**row) for row in frame.to_dicts()]


@router.get("/breakdown", response_model=List[BreakdownSlice])
def get_breakdown(ledger: LedgerService = Depends(get_ledger)) -> List[BreakdownSlice]:
    """Raw fruit vs consumable spend."""
    return [BreakdownSlice(**slice_) for slice_ in ledger.expense_breakdown()]


@router.get("/recent", response_model=List[DailyRecord])
def get_recent(
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    ledger: LedgerService = Depends(get_ledger),
) -> List[DailyRecord]:
    return ledger.recent_entries(limit)


@router.get("/quality", response_model=QualityResponse)
def get_quality(ledger: LedgerService = Depends(get_ledger)) -> QualityResponse:
    """Consistency checks over the stored daily records."""
    result = ledger.quality_report()
    return QualityResponse(
        status=result.status.value,
        total_checks=result.total_checks,
        passed_checks=result.passed_checks,
        failed_checks=result.failed_checks,
        warning_count=result.warning_count,
        checks=[
            QualityCheck(
                name=c.name,
                passed=c.passed,
                severity=c.severity.value,
                message=c.message,
                failed_dates=c.failed_dates,
            )
            for c in result.checks
        ],
    )


@router.post("/sample-data")
def create_sample_data(ledger: LedgerService = Depends(get_ledger)) -> dict:
    """Replace all data with a generated month of activity."""
    created = ledger.generate_sample_data()
    return {"records": created}
