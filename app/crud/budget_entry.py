# app/crud/budget_entry.py
import logging
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models.budget_entry import BudgetEntry
from app.core.constants import MONTHS, MIN_BUDGET_YEAR, MAX_BUDGET_YEAR
from app.core.exceptions import BudgetEntryNotFound, BudgetEntryValidationError

logger = logging.getLogger("OpsDash.Budget")

BUDGET_FIELDS = ("category", "amount", "month", "year")

def _validate_budget_fields(data: dict) -> dict:
    cleaned = {k: (v.strip() if isinstance(v, str) else v) for k, v in data.items() if k in BUDGET_FIELDS}
    if "category" in cleaned:
        if not cleaned["category"]:
            raise BudgetEntryValidationError("Category is required.")
        if len(cleaned["category"]) > 100:
            raise BudgetEntryValidationError("Category cannot exceed 100 characters.")
    if "amount" in cleaned and (cleaned["amount"] is None or cleaned["amount"] < 0):
        raise BudgetEntryValidationError("Amount cannot be negative.")
    if "month" in cleaned and cleaned["month"] not in MONTHS:
        raise BudgetEntryValidationError(f"Invalid month. Allowed: {', '.join(MONTHS)}")
    if "year" in cleaned and (cleaned["year"] is None or not MIN_BUDGET_YEAR <= cleaned["year"] <= MAX_BUDGET_YEAR):
        raise BudgetEntryValidationError(f"Year must be between {MIN_BUDGET_YEAR} and {MAX_BUDGET_YEAR}.")
    return cleaned

def create_budget_entry(db: Session, data: dict) -> BudgetEntry:
    """
    Создать запись бюджета за месяц.
    """
    if not data.get("category") or data.get("amount") is None or not data.get("month") or not data.get("year"):
        raise BudgetEntryValidationError("Category, amount, month, and year are required.")
    cleaned = _validate_budget_fields(data)
    entry = BudgetEntry(**cleaned)
    db.add(entry)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create budget entry: {e}")
        raise BudgetEntryValidationError("Database error while creating budget entry.")
    db.refresh(entry)
    logger.info(f"Created budget entry {entry.id} ({entry.category}, {entry.month_year})")
    return entry

def get_budget_entry(db: Session, entry_id: int) -> BudgetEntry:
    entry = db.get(BudgetEntry, entry_id)
    if not entry:
        raise BudgetEntryNotFound(f"Budget entry {entry_id} not found.")
    return entry

def get_all_budget_entries(db: Session, filters: dict = None) -> List[BudgetEntry]:
    filters = filters or {}
    query = db.query(BudgetEntry)
    if filters.get("month") in MONTHS:
        query = query.filter(BudgetEntry.month == filters["month"])
    if "year" in filters:
        query = query.filter(BudgetEntry.year == filters["year"])
    if "category" in filters:
        query = query.filter(BudgetEntry.category.ilike(f"%{filters['category']}%"))
    return query.order_by(BudgetEntry.year.desc(), BudgetEntry.created_at.desc(), BudgetEntry.id.desc()).all()

def update_budget_entry(db: Session, entry_id: int, data: dict) -> BudgetEntry:
    entry = get_budget_entry(db, entry_id)
    cleaned = _validate_budget_fields(data)
    for field, value in cleaned.items():
        setattr(entry, field, value)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update budget entry {entry_id}: {e}")
        raise BudgetEntryValidationError("Database error while updating budget entry.")
    db.refresh(entry)
    logger.info(f"Updated budget entry {entry_id}")
    return entry

def delete_budget_entry(db: Session, entry_id: int) -> None:
    entry = get_budget_entry(db, entry_id)
    db.delete(entry)
    db.commit()
    logger.info(f"Deleted budget entry {entry_id}")
