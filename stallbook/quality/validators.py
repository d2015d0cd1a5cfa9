"""
Data Validation Module

Two layers of checks:

- Input validation: rejects a single purchase line, juice batch, consumable
  or fixed expense before it reaches a record. Nothing is mutated on failure.
- History validation: rule-based checks over the stored daily records,
  in the style of Great Expectations suites, run on a polars frame.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, List, Optional, Sequence

import polars as pl
import structlog

from stallbook.domain.errors import EntryValidationError
from stallbook.domain.models import DailyRecord, Mood

logger = structlog.get_logger(__name__)


# =============================================================================
# INPUT VALIDATION
# =============================================================================

def _require_text(value: Optional[str], field_name: str, message: str) -> None:
    if value is None or not value.strip():
        raise EntryValidationError(message, field=field_name)


def _require_positive(value: Optional[float], field_name: str, message: str) -> None:
    if value is None or value <= 0:
        raise EntryValidationError(message, field=field_name)


def validate_purchase_line(material: str, quantity_kg: float, unit_price: float) -> None:
    """Reject purchase lines with no material or non-positive quantity/price"""
    _require_text(material, "material", "Please fill all fruit details")
    _require_positive(quantity_kg, "quantity_kg", "Please fill all fruit details")
    _require_positive(unit_price, "unit_price", "Please fill all fruit details")


def validate_liquid_batch(liquid_type: str, liters: float) -> None:
    _require_text(liquid_type, "type", "Please fill juice details")
    _require_positive(liters, "liters", "Please fill juice details")


def validate_consumable(label: str, amount: float) -> None:
    _require_text(label, "label", "Please fill expense details")
    _require_positive(amount, "amount", "Please fill expense details")


def validate_fixed_expense(name: str, amount: float) -> None:
    _require_text(name, "name", "Please fill all details")
    _require_positive(amount, "amount", "Please fill all details")


def validate_rating(rating: int) -> None:
    if not 1 <= rating <= 5:
        raise EntryValidationError("Rating must be between 1 and 5", field="rating")


def validate_non_negative(value: float, field_name: str) -> None:
    if value < 0:
        raise EntryValidationError(f"'{field_name}' cannot be negative", field=field_name)


# =============================================================================
# HISTORY VALIDATION
# =============================================================================

class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    failed_rows: int = 0
    total_rows: int = 0
    failed_dates: List[date] = field(default_factory=list)


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Percentage of passed checks"""
        if self.total_checks == 0:
            return 100.0
        return (self.passed_checks / self.total_checks) * 100


LINE_COST_TOLERANCE = 1e-6

HISTORY_SCHEMA = {
    "id": pl.Utf8,
    "date": pl.Date,
    "total_raw_weight_kg": pl.Float64,
    "expected_raw_weight_kg": pl.Float64,
    "mismatched_line_costs": pl.Int64,
    "wastage_weight_kg": pl.Float64,
    "used_weight_kg": pl.Float64,
    "cash_amount": pl.Float64,
    "digital_amount": pl.Float64,
    "total_collected": pl.Float64,
    "total_revenue": pl.Float64,
    "expected_revenue": pl.Float64,
    "total_expenses": pl.Float64,
    "expected_expenses": pl.Float64,
    "gross_profit": pl.Float64,
    "profit_margin_pct": pl.Float64,
    "mood": pl.Utf8,
    "rating": pl.Int64,
}


def history_frame(records: Sequence[DailyRecord]) -> pl.DataFrame:
    """One row per daily record with the columns the checks look at"""
    rows = [
        {
            "id": r.id,
            "date": r.date,
            "total_raw_weight_kg": float(r.total_raw_weight_kg),
            "expected_raw_weight_kg": float(sum(line.quantity_kg for line in r.raw_purchases)),
            "mismatched_line_costs": sum(
                1 for line in r.raw_purchases
                if abs(line.line_cost - line.quantity_kg * line.unit_price) > LINE_COST_TOLERANCE
            ),
            "wastage_weight_kg": float(r.wastage_weight_kg),
            "used_weight_kg": float(r.used_weight_kg),
            "cash_amount": float(r.cash_amount),
            "digital_amount": float(r.digital_amount),
            "total_collected": float(r.total_collected),
            "total_revenue": float(r.total_revenue),
            "expected_revenue": float(sum(slot.amount for slot in r.unit_sales.slots())),
            "total_expenses": float(r.total_expenses),
            "expected_expenses": float(
                sum(line.line_cost for line in r.raw_purchases)
                + sum(expense.amount for expense in r.consumable_expenses)
            ),
            "gross_profit": float(r.gross_profit),
            "profit_margin_pct": float(r.profit_margin_pct),
            "mood": r.self_review.mood.value,
            "rating": r.self_review.rating,
        }
        for r in records
    ]
    return pl.DataFrame(rows, schema=HISTORY_SCHEMA)


@dataclass
class _Rule:
    name: str
    failing: pl.Expr
    severity: ValidationSeverity
    description: str


class DataValidator:
    """
    Rule-based validator over a polars frame.

    Each rule is a boolean expression that is true for failing rows, so a
    whole suite is evaluated in one ``select`` over the frame.

    Example:
        validator = (
            DataValidator()
            .add_unique_check("date")
            .add_range_check("rating", min_value=1, max_value=5)
        )
        result = validator.validate(df)
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode  # warnings count as failures
        self._rules: List[_Rule] = []

    def add_check(
        self,
        name: str,
        failing: pl.Expr,
        description: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Add a rule given as an expression that marks failing rows"""
        self._rules.append(_Rule(name, failing, severity, description))
        return self

    def add_unique_check(
        self,
        column: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        # Every occurrence after the first counts as a failure
        return self.add_check(
            f"unique_{column}",
            pl.col(column).is_duplicated() & ~pl.col(column).is_first_distinct(),
            f"duplicate '{column}' values",
            severity,
        )

    def add_range_check(
        self,
        column: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        failing = pl.lit(False)
        if min_value is not None:
            failing = failing | (pl.col(column) < min_value)
        if max_value is not None:
            failing = failing | (pl.col(column) > max_value)
        return self.add_check(
            f"range_{column}",
            failing,
            f"'{column}' outside [{min_value}, {max_value}]",
            severity,
        )

    def add_enum_check(
        self,
        column: str,
        allowed_values: List[Any],
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        return self.add_check(
            f"enum_{column}",
            ~pl.col(column).is_in(allowed_values),
            f"'{column}' not one of {allowed_values}",
            severity,
        )

    def add_consistency_check(
        self,
        name: str,
        column: str,
        expected: pl.Expr,
        tolerance: float = 1e-6,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "DataValidator":
        """Stored column must equal an expression of other columns"""
        return self.add_check(
            name,
            (pl.col(column) - expected).abs() > tolerance,
            f"'{column}' inconsistent with its inputs",
            severity,
        )

    def _evaluate(self, df: pl.DataFrame) -> List[ValidationCheck]:
        if not self._rules:
            return []

        masks = df.select([rule.failing.alias(f"_rule_{i}") for i, rule in enumerate(self._rules)])
        checks = []
        for i, rule in enumerate(self._rules):
            mask = masks[f"_rule_{i}"]
            failed_rows = int(mask.sum()) if len(mask) else 0
            failed_dates = (
                df.filter(mask)["date"].to_list()
                if failed_rows and "date" in df.columns
                else []
            )
            checks.append(
                ValidationCheck(
                    name=rule.name,
                    passed=failed_rows == 0,
                    severity=rule.severity,
                    message=f"{failed_rows} rows with {rule.description}" if failed_rows else "Check passed",
                    failed_rows=failed_rows,
                    total_rows=df.height,
                    failed_dates=failed_dates,
                )
            )
        return checks

    def validate(self, df: pl.DataFrame) -> ValidationResult:
        """
        Run every rule over the frame.

        Returns:
            ValidationResult; FAILED on any error, PARTIAL on warnings only
            (FAILED in strict mode)
        """
        started_at = datetime.now(timezone.utc)
        checks = self._evaluate(df)

        for check in checks:
            if not check.passed:
                logger.warning(
                    "Validation check failed",
                    check=check.name,
                    severity=check.severity.value,
                    failed_rows=check.failed_rows,
                )

        passed_checks = sum(1 for c in checks if c.passed)
        failed_checks = sum(1 for c in checks if not c.passed and c.severity == ValidationSeverity.ERROR)
        warning_count = sum(1 for c in checks if not c.passed and c.severity == ValidationSeverity.WARNING)

        if failed_checks or (warning_count and self.strict_mode):
            status = ValidationStatus.FAILED
        elif warning_count:
            status = ValidationStatus.PARTIAL
        else:
            status = ValidationStatus.PASSED

        logger.info(
            "Validation complete",
            status=status.value,
            rows=df.height,
            passed=passed_checks,
            failed=failed_checks,
            warnings=warning_count,
        )

        return ValidationResult(
            status=status,
            total_checks=len(checks),
            passed_checks=passed_checks,
            failed_checks=failed_checks,
            warning_count=warning_count,
            checks=checks,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc),
        )


def create_history_validator() -> DataValidator:
    """Validator for stored daily records"""
    return (
        DataValidator()
        .add_unique_check("date")
        .add_unique_check("id")
        .add_range_check("rating", min_value=1, max_value=5)
        .add_enum_check("mood", [m.value for m in Mood])
        .add_consistency_check(
            "collected_matches_payments",
            "total_collected",
            pl.col("cash_amount") + pl.col("digital_amount"),
        )
        .add_consistency_check(
            "revenue_matches_sales",
            "total_revenue",
            pl.col("expected_revenue"),
        )
        .add_consistency_check(
            "profit_matches_totals",
            "gross_profit",
            pl.col("total_revenue") - pl.col("total_expenses"),
        )
        .add_check(
            "line_costs_match_prices",
            pl.col("mismatched_line_costs") > 0,
            "purchase lines whose cost is not quantity x price",
        )
        .add_consistency_check(
            "raw_weight_matches_purchases",
            "total_raw_weight_kg",
            pl.col("expected_raw_weight_kg"),
        )
        .add_consistency_check(
            "expenses_match_costs",
            "total_expenses",
            pl.col("expected_expenses"),
        )
        .add_consistency_check(
            "margin_matches_profit",
            "profit_margin_pct",
            pl.when(pl.col("total_revenue") > 0)
            .then(pl.col("gross_profit") / pl.col("total_revenue") * 100)
            .otherwise(0.0),
        )
        .add_consistency_check(
            "used_weight_matches_wastage",
            "used_weight_kg",
            pl.col("total_raw_weight_kg") - pl.col("wastage_weight_kg"),
        )
        .add_range_check("wastage_weight_kg", min_value=0, severity=ValidationSeverity.WARNING)
        .add_range_check("used_weight_kg", min_value=0, severity=ValidationSeverity.WARNING)
    )


def validate_history(records: Sequence[DailyRecord]) -> ValidationResult:
    """Run the daily-record suite over a history"""
    return create_history_validator().validate(history_frame(records))
