"""
Fixed Expense Endpoints
"""

from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from stallbook.domain.models import ExpenseCategory, FixedExpense
from stallbook.serving.api.dependencies import get_ledger
from stallbook.services.ledger import LedgerService

router = APIRouter()


class FixedExpenseCreate(BaseModel):
    """New one-time cost"""
    name: str
    amount: float
    category: ExpenseCategory = ExpenseCategory.EQUIPMENT
    notes: Optional[str] = None
    expense_date: Optional[date] = Field(default=None, alias="date")

    model_config = ConfigDict(populate_by_name=True)


class FixedExpenseSummary(BaseModel):
    total: float
    count: int
    by_category: Dict[str, float]


@router.get("", response_model=List[FixedExpense])
def list_expenses(ledger: LedgerService = Depends(get_ledger)) -> List[FixedExpense]:
    return ledger.fixed_expenses()


@router.post("", response_model=FixedExpense, status_code=201)
def create_expense(
    payload: FixedExpenseCreate,
    ledger: LedgerService = Depends(get_ledger),
) -> FixedExpense:
    """Record a one-time cost; rejected with 422 when name or amount is missing."""
    return ledger.add_fixed_expense(
        name=payload.name,
        amount=payload.amount,
        category=payload.category,
        notes=payload.notes,
        expense_date=payload.expense_date,
    )


@router.get("/summary", response_model=FixedExpenseSummary)
def expense_summary(ledger: LedgerService = Depends(get_ledger)) -> FixedExpenseSummary:
    return FixedExpenseSummary(**ledger.fixed_expense_summary())


@router.delete("/{expense_id}")
def delete_expense(expense_id: str, ledger: LedgerService = Depends(get_ledger)) -> Dict[str, bool]:
    return {"deleted": ledger.delete_fixed_expense(expense_id)}
