#app/api/budget_entry.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.schemas.budget_entry import BudgetEntryCreate, BudgetEntryRead, BudgetEntryUpdate
from app.schemas.response import SuccessResponse
from app.crud.budget_entry import (
    create_budget_entry,
    get_budget_entry,
    get_all_budget_entries,
    update_budget_entry,
    delete_budget_entry,
)
from app.dependencies import get_db
from app.core.exceptions import BudgetEntryNotFound, BudgetEntryValidationError

router = APIRouter(prefix="/budget-entries", tags=["Budget"])
logger = logging.getLogger("OpsDash.BudgetAPI")

@router.get("/", response_model=List[BudgetEntryRead])
def list_budget_entries(
    month: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Получить записи бюджета.
    """
    filters = {"month": month, "year": year, "category": category}
    filters = {k: v for k, v in filters.items() if v is not None}
    return get_all_budget_entries(db, filters=filters)

@router.get("/{entry_id}", response_model=BudgetEntryRead)
def get_one_budget_entry(entry_id: int, db: Session = Depends(get_db)):
    try:
        return get_budget_entry(db, entry_id)
    except BudgetEntryNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget entry not found")

@router.post("/", response_model=BudgetEntryRead, status_code=status.HTTP_201_CREATED)
def create_new_budget_entry(data: BudgetEntryCreate, db: Session = Depends(get_db)):
    try:
        return create_budget_entry(db, data.model_dump())
    except BudgetEntryValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating budget entry: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error during budget entry creation.")

@router.patch("/{entry_id}", response_model=BudgetEntryRead)
def update_one_budget_entry(entry_id: int, data: BudgetEntryUpdate, db: Session = Depends(get_db)):
    try:
        return update_budget_entry(db, entry_id, data.model_dump(exclude_unset=True))
    except BudgetEntryNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget entry not found")
    except BudgetEntryValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{entry_id}", response_model=SuccessResponse)
def delete_one_budget_entry(entry_id: int, db: Session = Depends(get_db)):
    try:
        delete_budget_entry(db, entry_id)
        return SuccessResponse(result=entry_id, detail="Budget entry deleted")
    except BudgetEntryNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget entry not found")
