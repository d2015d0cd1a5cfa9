"""
Unit tests for the entry normalizer
"""
from datetime import datetime, timezone

import pytest

from stallbook.domain.models import create_empty_daily_record
from stallbook.transformation import editing
from stallbook.transformation.normalizer import consumables_cost, normalize, purchase_cost


class TestNormalize:
    """Tests for derived field recomputation"""

    def test_apple_day_totals(self, apple_day):
        """Purchases, ice and five big combos give a loss-making day"""
        assert apple_day.total_expenses == 410
        assert apple_day.total_revenue == 295
        assert apple_day.gross_profit == -115
        assert apple_day.total_collected == 295
        assert apple_day.profit_margin_pct == pytest.approx(-38.983, abs=0.001)

    def test_weights(self, make_record, today):
        """Used weight is purchased weight minus wastage"""
        record = make_record(
            today,
            purchases=[("Apple", 3, 120), ("Banana", 2, 40)],
            wastage=0.5,
        )

        assert record.total_raw_weight_kg == 5
        assert record.used_weight_kg == 4.5

    def test_wastage_above_purchases_goes_negative(self, make_record, today):
        """Used weight is not clamped at zero"""
        record = make_record(today, purchases=[("Apple", 1, 100)], wastage=2)

        assert record.used_weight_kg == -1

    def test_zero_revenue_has_zero_margin(self, make_record, today):
        """No sales means a zero margin rather than a division error"""
        record = make_record(today, consumables=[("Ice", 50)])

        assert record.total_revenue == 0
        assert record.gross_profit == -50
        assert record.profit_margin_pct == 0

    @pytest.mark.parametrize("contents", [
        {},
        {"consumables": [("Ice", 50), ("Cups", 30)]},
        {"purchases": [("Apple", 1, 100)], "wastage": 2.5},
        {
            "purchases": [("Apple", 3, 120), ("Mango", 2, 80), ("Kiwi", 0.5, 200)],
            "sales": {"big_combo": (5, 59), "juice_only": (12, 20)},
            "consumables": [("Ice", 50), ("Cups", 30)],
            "cash": 300,
            "digital": 195,
        },
        {
            "purchases": [("Apple", 1.5, 99.9), ("Grapes", 0.3, 33.3)],
            "sales": {"small_box": (7, 29.5)},
            "consumables": [("Salt", 12.75)],
            "cash": 100.25,
            "wastage": 0.2,
        },
    ], ids=["empty", "zero-revenue", "negative-used-weight", "several-lines", "fractional"])
    def test_idempotent(self, make_record, today, contents):
        """Normalizing twice changes nothing but the timestamp"""
        record = make_record(today, **contents)

        again = normalize(record)

        assert again.model_dump(exclude={"updated_at"}) == record.model_dump(exclude={"updated_at"})

    def test_tampered_record_converges(self, apple_day):
        """Stale derived fields are replaced, after which normalizing is stable"""
        tampered = apple_day.model_copy(update={
            "raw_purchases": [apple_day.raw_purchases[0].model_copy(update={"line_cost": 1.0})],
            "total_expenses": 1.0,
            "gross_profit": 0.0,
            "total_raw_weight_kg": 99.0,
        })

        once = normalize(tampered)
        twice = normalize(once)

        assert once.model_dump(exclude={"updated_at"}) == apple_day.model_dump(exclude={"updated_at"})
        assert twice.model_dump(exclude={"updated_at"}) == once.model_dump(exclude={"updated_at"})

    def test_supplied_line_cost_ignored(self, apple_day):
        """A purchase line cost that disagrees with its price is recomputed"""
        tampered = apple_day.model_copy(update={
            "raw_purchases": [apple_day.raw_purchases[0].model_copy(update={"line_cost": 1.0})],
        })

        record = normalize(tampered)

        assert record.raw_purchases[0].line_cost == 360
        assert record.total_expenses == 410
        assert record.gross_profit == -115

        assert again.model_dump(exclude={"updated_at"}) == apple_day.model_dump(exclude={"updated_at"})

    def test_stamps_updated_at(self, today):
        """updated_at takes the supplied time; created_at is untouched"""
        created = datetime(2026, 10, 1, tzinfo=timezone.utc)
        stamped = datetime(2026, 10, 2, tzinfo=timezone.utc)
        record = create_empty_daily_record(today, now=created)

        result = normalize(record, now=stamped)

        assert result.created_at == created
        assert result.updated_at == stamped

    def test_does_not_mutate_input(self, today):
        """The input record keeps its stale totals"""
        record = create_empty_daily_record(today)
        record = editing.set_sale(record, "juice_only", quantity=3)

        normalize(record)

        assert record.total_revenue == 0

    def test_stale_totals_are_overwritten(self, apple_day):
        """Hand-edited derived fields are replaced by recomputed ones"""
        tampered = apple_day.model_copy(update={"total_revenue": 9999, "gross_profit": 1})

        result = normalize(tampered)

        assert result.total_revenue == 295
        assert result.gross_profit == -115


class TestCostHelpers:
    """Tests for purchase and consumable cost helpers"""

    def test_purchase_cost(self, apple_day):
        assert purchase_cost(apple_day) == 360

    def test_consumables_cost(self, apple_day):
        assert consumables_cost(apple_day) == 50

    def test_empty_record(self, today):
        record = create_empty_daily_record(today)

        assert purchase_cost(record) == 0
        assert consumables_cost(record) == 0
