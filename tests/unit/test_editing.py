"""
Unit tests for entry editing operations
"""
import pytest

from stallbook.domain.errors import EntryValidationError
from stallbook.domain.models import Mood, ProductCategory, create_empty_daily_record
from stallbook.transformation import editing


@pytest.fixture
def record(today):
    return create_empty_daily_record(today)


class TestPurchases:
    """Tests for raw purchase lines"""

    def test_add_purchase_computes_line_cost(self, record):
        """Line cost is quantity times price"""
        result = editing.add_purchase(record, "Apple", 3, 120)

        assert len(result.raw_purchases) == 1
        assert result.raw_purchases[0].line_cost == 360
        assert record.raw_purchases == []

    @pytest.mark.parametrize("material,quantity,price", [
        ("", 3, 120),
        ("   ", 3, 120),
        ("Apple", 0, 120),
        ("Apple", 3, 0),
        ("Apple", -1, 120),
    ])
    def test_add_purchase_rejects_incomplete(self, record, material, quantity, price):
        """Missing material or non-positive numbers are rejected"""
        with pytest.raises(EntryValidationError) as exc:
            editing.add_purchase(record, material, quantity, price)

        assert exc.value.message == "Please fill all fruit details"
        assert record.raw_purchases == []

    def test_remove_purchase(self, record):
        """Removes the line at the given position"""
        record = editing.add_purchase(record, "Apple", 3, 120)
        record = editing.add_purchase(record, "Banana", 2, 40)

        result = editing.remove_purchase(record, 0)

        assert [p.material for p in result.raw_purchases] == ["Banana"]

    def test_remove_purchase_out_of_range(self, record):
        with pytest.raises(EntryValidationError):
            editing.remove_purchase(record, 0)


class TestProduction:
    """Tests for units and juice produced"""

    def test_add_liquid(self, record):
        result = editing.add_liquid(record, "Watermelon", 4.5)

        assert result.produced_liquid[0].type == "Watermelon"
        assert result.produced_liquid[0].liters == 4.5

    def test_add_liquid_rejects_missing_type(self, record):
        with pytest.raises(EntryValidationError) as exc:
            editing.add_liquid(record, "", 2)

        assert exc.value.message == "Please fill juice details"

    def test_remove_liquid(self, record):
        record = editing.add_liquid(record, "Lemon/Lime", 2)

        assert editing.remove_liquid(record, 0).produced_liquid == []

    def test_set_production(self, record):
        result = editing.set_production(record, ProductCategory.SMALL_BOX, 12)

        assert result.produced_units.small_box == 12
        assert result.produced_units.big_combo == 0

    def test_set_production_rejects_negative(self, record):
        with pytest.raises(EntryValidationError):
            editing.set_production(record, "big_combo", -1)

    def test_unknown_category(self, record):
        with pytest.raises(EntryValidationError) as exc:
            editing.set_production(record, "family_pack", 1)

        assert exc.value.field == "category"


class TestSales:
    """Tests for sales and collection"""

    def test_set_sale_quantity_keeps_price(self, record):
        """Default price stays when only the quantity is given"""
        result = editing.set_sale(record, "big_combo", quantity=5)

        assert result.unit_sales.big_combo.quantity_sold == 5
        assert result.unit_sales.big_combo.unit_price == 59

    def test_set_sale_price(self, record):
        result = editing.set_sale(record, ProductCategory.JUICE_ONLY, unit_price=25)

        assert result.unit_sales.juice_only.unit_price == 25
        assert result.unit_sales.juice_only.quantity_sold == 0

    def test_set_sale_rejects_negative_quantity(self, record):
        with pytest.raises(EntryValidationError):
            editing.set_sale(record, "big_combo", quantity=-2)

    def test_set_collection(self, record):
        result = editing.set_collection(record, cash=200, digital=95)

        assert result.cash_amount == 200
        assert result.digital_amount == 95

    def test_set_collection_partial(self, record):
        """Omitted amounts are left as they were"""
        record = editing.set_collection(record, cash=200, digital=95)

        result = editing.set_collection(record, digital=100)

        assert result.cash_amount == 200
        assert result.digital_amount == 100


class TestConsumables:
    """Tests for consumable expenses"""

    def test_add_consumable(self, record):
        result = editing.add_consumable(record, " Ice ", 50)

        assert result.consumable_expenses[0].label == "Ice"

    @pytest.mark.parametrize("label,amount", [("", 50), ("Ice", 0)])
    def test_add_consumable_rejects_incomplete(self, record, label, amount):
        with pytest.raises(EntryValidationError) as exc:
            editing.add_consumable(record, label, amount)

        assert exc.value.message == "Please fill expense details"

    def test_remove_consumable(self, record):
        record = editing.add_consumable(record, "Ice", 50)
        record = editing.add_consumable(record, "Cups & Boxes", 100)

        result = editing.remove_consumable(record, 1)

        assert [c.label for c in result.consumable_expenses] == ["Ice"]


class TestReview:
    """Tests for the self review"""

    def test_defaults(self, record):
        assert record.self_review.mood == Mood.GOOD
        assert record.self_review.rating == 3

    def test_set_review(self, record):
        result = editing.set_review(record, notes="Busy evening", mood="great", rating=5)

        assert result.self_review.notes == "Busy evening"
        assert result.self_review.mood == Mood.GREAT
        assert result.self_review.rating == 5

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, record, rating):
        with pytest.raises(EntryValidationError) as exc:
            editing.set_review(record, rating=rating)

        assert exc.value.field == "rating"

    def test_unknown_mood(self, record):
        with pytest.raises(EntryValidationError):
            editing.set_review(record, mood="ecstatic")
