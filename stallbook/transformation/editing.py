"""
Entry Editing

In-memory mutations applied to a daily record while the operator fills it
in. Every function returns a new record; invalid input raises
EntryValidationError and leaves the original untouched.
"""

from typing import Optional, Union

from stallbook.domain.errors import EntryValidationError
from stallbook.domain.models import (
    ConsumableExpense,
    DailyRecord,
    LiquidBatch,
    Mood,
    ProductCategory,
    PurchaseLine,
)
from stallbook.quality.validators import (
    validate_consumable,
    validate_liquid_batch,
    validate_non_negative,
    validate_purchase_line,
    validate_rating,
)


def _category(category: Union[ProductCategory, str]) -> ProductCategory:
    try:
        return ProductCategory(category)
    except ValueError:
        raise EntryValidationError(f"Unknown product category '{category}'", field="category")


def _without(items: list, index: int, field_name: str) -> list:
    if not 0 <= index < len(items):
        raise EntryValidationError(f"No {field_name} at position {index}", field=field_name)
    return [item for i, item in enumerate(items) if i != index]


# Purchases

def add_purchase(record: DailyRecord, material: str, quantity_kg: float, unit_price: float) -> DailyRecord:
    """Append a purchase line; its cost is fixed at quantity x price"""
    validate_purchase_line(material, quantity_kg, unit_price)
    line = PurchaseLine(
        material=material.strip(),
        quantity_kg=quantity_kg,
        unit_price=unit_price,
        line_cost=quantity_kg * unit_price,
    )
    return record.model_copy(update={"raw_purchases": [*record.raw_purchases, line]})


def remove_purchase(record: DailyRecord, index: int) -> DailyRecord:
    return record.model_copy(
        update={"raw_purchases": _without(record.raw_purchases, index, "raw_purchases")}
    )


def set_wastage(record: DailyRecord, wastage_weight_kg: float) -> DailyRecord:
    # Wastage above the purchased weight is accepted; used weight goes negative
    return record.model_copy(update={"wastage_weight_kg": wastage_weight_kg})


# Production

def add_liquid(record: DailyRecord, liquid_type: str, liters: float) -> DailyRecord:
    validate_liquid_batch(liquid_type, liters)
    batch = LiquidBatch(type=liquid_type.strip(), liters=liters)
    return record.model_copy(update={"produced_liquid": [*record.produced_liquid, batch]})


def remove_liquid(record: DailyRecord, index: int) -> DailyRecord:
    return record.model_copy(
        update={"produced_liquid": _without(record.produced_liquid, index, "produced_liquid")}
    )


def set_production(record: DailyRecord, category: Union[ProductCategory, str], count: int) -> DailyRecord:
    """Set the number of units produced for one product line"""
    key = _category(category)
    validate_non_negative(count, "count")
    units = record.produced_units.model_copy(update={key.value: count})
    return record.model_copy(update={"produced_units": units})


# Sales and collection

def set_sale(
    record: DailyRecord,
    category: Union[ProductCategory, str],
    quantity: Optional[int] = None,
    unit_price: Optional[float] = None,
) -> DailyRecord:
    """Update quantity sold and/or unit price for one product line"""
    key = _category(category)
    slot = getattr(record.unit_sales, key.value)
    changes = {}
    if quantity is not None:
        validate_non_negative(quantity, "quantity")
        changes["quantity_sold"] = quantity
    if unit_price is not None:
        validate_non_negative(unit_price, "unit_price")
        changes["unit_price"] = unit_price

    sales = record.unit_sales.model_copy(update={key.value: slot.model_copy(update=changes)})
    return record.model_copy(update={"unit_sales": sales})


def set_collection(
    record: DailyRecord,
    cash: Optional[float] = None,
    digital: Optional[float] = None,
) -> DailyRecord:
    changes = {}
    if cash is not None:
        validate_non_negative(cash, "cash_amount")
        changes["cash_amount"] = cash
    if digital is not None:
        validate_non_negative(digital, "digital_amount")
        changes["digital_amount"] = digital
    return record.model_copy(update=changes)


# Consumables

def add_consumable(record: DailyRecord, label: str, amount: float) -> DailyRecord:
    validate_consumable(label, amount)
    expense = ConsumableExpense(label=label.strip(), amount=amount)
    return record.model_copy(
        update={"consumable_expenses": [*record.consumable_expenses, expense]}
    )


def remove_consumable(record: DailyRecord, index: int) -> DailyRecord:
    return record.model_copy(
        update={
            "consumable_expenses": _without(record.consumable_expenses, index, "consumable_expenses")
        }
    )


# Self review

def set_review(
    record: DailyRecord,
    notes: Optional[str] = None,
    challenges: Optional[str] = None,
    improvements: Optional[str] = None,
    mood: Optional[Union[Mood, str]] = None,
    rating: Optional[int] = None,
) -> DailyRecord:
    """Update any subset of the self-review fields"""
    changes = {}
    if notes is not None:
        changes["notes"] = notes
    if challenges is not None:
        changes["challenges"] = challenges
    if improvements is not None:
        changes["improvements"] = improvements
    if mood is not None:
        try:
            changes["mood"] = Mood(mood)
        except ValueError:
            raise EntryValidationError(f"Unknown mood '{mood}'", field="mood")
    if rating is not None:
        validate_rating(rating)
        changes["rating"] = rating

    review = record.self_review.model_copy(update=changes)
    return record.model_copy(update={"self_review": review})
