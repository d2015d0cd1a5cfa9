"""
Daily Entry Endpoints

Read, preview, save and delete the per-day records.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from stallbook.domain.models import DailyRecord
from stallbook.serving.api.dependencies import get_ledger
from stallbook.services.ledger import LedgerService
from stallbook.transformation.normalizer import normalize

router = APIRouter()


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class EntryResponse(BaseModel):
    """A stored record or a fresh template for the date"""
    exists: bool
    entry: DailyRecord


class DeleteResponse(BaseModel):
    deleted: bool


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[DailyRecord])
def list_entries(ledger: LedgerService = Depends(get_ledger)) -> List[DailyRecord]:
    """All daily entries, newest first."""
    return ledger.history()


@router.post("/preview", response_model=DailyRecord)
def preview_entry(record: DailyRecord) -> DailyRecord:
    """Recompute the totals of an unsaved entry."""
    return normalize(record)


@router.get("/{entry_date}", response_model=EntryResponse)
def get_entry(entry_date: date, ledger: LedgerService = Depends(get_ledger)) -> EntryResponse:
    """The entry for a date, or an empty template when none is stored."""
    existing = ledger.find_entry(entry_date)
    if existing is not None:
        return EntryResponse(exists=True, entry=existing)
    return EntryResponse(exists=False, entry=ledger.new_entry(entry_date))


@router.put("/{entry_date}", response_model=DailyRecord)
def save_entry(
    entry_date: date,
    record: DailyRecord,
    ledger: LedgerService = Depends(get_ledger),
) -> DailyRecord:
    """Normalize and store the entry, replacing any entry for the same date."""
    if record.date != entry_date:
        raise HTTPException(status_code=400, detail="entry date does not match the URL")
    return ledger.save_entry(record)


@router.delete("/id/{entry_id}", response_model=DeleteResponse)
def delete_entry(entry_id: str, ledger: LedgerService = Depends(get_ledger)) -> DeleteResponse:
    return DeleteResponse(deleted=ledger.delete_entry(entry_id))
