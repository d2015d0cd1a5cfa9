"""
Sample Data Generator

Generates a realistic month of stall activity for demos and development:
- Daily records for the last 31 days, with some days skipped
- A handful of fixed equipment and setup costs
"""

import random
from datetime import date, timedelta
from typing import List, Optional, Tuple

from faker import Faker

from stallbook.domain.models import (
    DailyRecord,
    ExpenseCategory,
    FixedExpense,
    Mood,
    ProductCategory,
    create_empty_daily_record,
    generate_id,
)
from stallbook.transformation import editing
from stallbook.transformation.normalizer import normalize


# =============================================================================
# CONFIGURATION
# =============================================================================

JUICE_TYPES = ["Watermelon", "Lemon/Lime", "Orange", "Mixed Fruit", "Seasonal"]

DAILY_PURCHASES = [
    ("Apple", 3, 120),
    ("Banana", 2, 40),
    ("Orange", 4, 80),
    ("Grapes", 1.5, 100),
]

DAILY_CONSUMABLES = [
    ("Cups & Boxes", 100),
    ("Ice", 50),
]

# (category, min sold, max sold)
SALES_RANGES = [
    (ProductCategory.BIG_COMBO, 20, 49),
    (ProductCategory.MEDIUM_COMBO, 15, 39),
    (ProductCategory.SMALL_BOX, 10, 29),
    (ProductCategory.JUICE_ONLY, 5, 19),
]

FIXED_EXPENSES = [
    ("Fruit Cutting Board", 500, ExpenseCategory.EQUIPMENT),
    ("Display Stand", 2000, ExpenseCategory.EQUIPMENT),
    ("Juicer Machine", 3500, ExpenseCategory.EQUIPMENT),
    ("Signboard", 1500, ExpenseCategory.SETUP),
]

SKIP_PROBABILITY = 0.15
CASH_SHARE = 0.6


# =============================================================================
# GENERATOR
# =============================================================================

class SampleDataGenerator:
    """
    Generate a demo history.

    Example:
        generator = SampleDataGenerator(seed=42)
        records, expenses = generator.generate()
    """

    def __init__(self, seed: Optional[int] = 42):
        self.rng = random.Random(seed)
        self.fake = Faker("en_IN")
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate_day(self, record_date: date) -> DailyRecord:
        """One fully filled, normalized record"""
        record = create_empty_daily_record(record_date)

        for material, quantity, price in DAILY_PURCHASES:
            record = editing.add_purchase(record, material, quantity, price)

        revenue = 0.0
        for category, low, high in SALES_RANGES:
            quantity = self.rng.randint(low, high)
            record = editing.set_sale(record, category, quantity=quantity)
            revenue += quantity * getattr(record.unit_sales, category.value).unit_price
            record = editing.set_production(record, category, quantity + self.rng.randint(0, 5))

        record = editing.add_liquid(record, self.rng.choice(JUICE_TYPES), round(self.rng.uniform(2, 6), 1))

        for label, amount in DAILY_CONSUMABLES:
            record = editing.add_consumable(record, label, amount)

        record = editing.set_collection(
            record,
            cash=float(int(revenue * CASH_SHARE)),
            digital=float(int(revenue * (1 - CASH_SHARE))),
        )
        record = editing.set_wastage(record, round(self.rng.random() * 0.5, 2))
        record = editing.set_review(
            record,
            notes=self.fake.sentence(nb_words=6),
            challenges=self.fake.sentence(nb_words=5),
            improvements=self.fake.sentence(nb_words=5),
            mood=self.rng.choice([Mood.GREAT, Mood.GOOD, Mood.OKAY]),
            rating=self.rng.randint(3, 4),
        )

        return normalize(record)

    def generate_records(self, days: int = 30, today: Optional[date] = None) -> List[DailyRecord]:
        """Records for today and the previous ``days`` days, oldest first"""
        today = today or date.today()
        records = []
        for offset in range(days, -1, -1):
            if self.rng.random() < SKIP_PROBABILITY:
                continue
            records.append(self.generate_day(today - timedelta(days=offset)))
        return records

    def generate_fixed_expenses(self, purchased_on: date = date(2024, 1, 1)) -> List[FixedExpense]:
        return [
            FixedExpense(
                id=generate_id(),
                name=name,
                amount=amount,
                category=category,
                date=purchased_on,
            )
            for name, amount, category in FIXED_EXPENSES
        ]

    def generate(
        self,
        days: int = 30,
        today: Optional[date] = None,
    ) -> Tuple[List[DailyRecord], List[FixedExpense]]:
        """Full demo dataset: daily records and fixed expenses"""
        return self.generate_records(days, today), self.generate_fixed_expenses()
