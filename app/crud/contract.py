# app/crud/contract.py
import logging
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models.contract import Contract
from app.core.constants import CONTRACT_STATUSES, CONTRACT_STATUS_PENDING, CONTRACT_STATUS_ACTIVE
from app.core.exceptions import ContractNotFound, ContractValidationError

logger = logging.getLogger("OpsDash.Contracts")

CONTRACT_FIELDS = ("title", "counterparty", "start_date", "end_date", "status", "value", "description")

def _validate_contract_fields(data: dict) -> dict:
    cleaned = {k: (v.strip() if isinstance(v, str) else v) for k, v in data.items() if k in CONTRACT_FIELDS}
    if "title" in cleaned:
        if not cleaned["title"]:
            raise ContractValidationError("Title is required.")
        if len(cleaned["title"]) > 200:
            raise ContractValidationError("Title cannot exceed 200 characters.")
    if "counterparty" in cleaned:
        if not cleaned["counterparty"]:
            raise ContractValidationError("Counterparty is required.")
        if len(cleaned["counterparty"]) > 200:
            raise ContractValidationError("Counterparty name cannot exceed 200 characters.")
    if "status" in cleaned and cleaned["status"] not in CONTRACT_STATUSES:
        raise ContractValidationError(f"Invalid status value. Allowed: {', '.join(CONTRACT_STATUSES)}")
    if "value" in cleaned and (cleaned["value"] is None or cleaned["value"] < 0):
        raise ContractValidationError("Value cannot be negative.")
    if cleaned.get("description") and len(cleaned["description"]) > 1000:
        raise ContractValidationError("Description cannot exceed 1000 characters.")
    return cleaned

def create_contract(db: Session, data: dict) -> Contract:
    """
    Создать контракт. Обязательны title, counterparty, даты и value.
    """
    if not data.get("title") or not data.get("counterparty") or not data.get("start_date") \
            or not data.get("end_date") or data.get("value") is None:
        raise ContractValidationError("Title, counterparty, start date, end date, and value are required.")
    cleaned = _validate_contract_fields(data)
    if cleaned["end_date"] < cleaned["start_date"]:
        raise ContractValidationError("End date must be after start date.")

    contract = Contract(
        title=cleaned["title"],
        counterparty=cleaned["counterparty"],
        start_date=cleaned["start_date"],
        end_date=cleaned["end_date"],
        status=cleaned.get("status") or CONTRACT_STATUS_PENDING,
        value=cleaned["value"],
        description=cleaned.get("description"),
    )
    db.add(contract)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create contract: {e}")
        raise ContractValidationError("Database error while creating contract.")
    db.refresh(contract)
    logger.info(f"Created contract {contract.id} with {contract.counterparty}")
    return contract

def get_contract(db: Session, contract_id: int) -> Contract:
    contract = db.get(Contract, contract_id)
    if not contract:
        raise ContractNotFound(f"Contract {contract_id} not found.")
    return contract

def get_all_contracts(db: Session, filters: dict = None) -> List[Contract]:
    filters = filters or {}
    query = db.query(Contract)
    if filters.get("status") in CONTRACT_STATUSES:
        query = query.filter(Contract.status == filters["status"])
    if "counterparty" in filters:
        query = query.filter(Contract.counterparty.ilike(f"%{filters['counterparty']}%"))
    if filters.get("active_only"):
        query = query.filter(Contract.status == CONTRACT_STATUS_ACTIVE)
    return query.order_by(Contract.created_at.desc(), Contract.id.desc()).all()

def update_contract(db: Session, contract_id: int, data: dict) -> Contract:
    contract = get_contract(db, contract_id)
    cleaned = _validate_contract_fields(data)
    start_date = cleaned.get("start_date", contract.start_date)
    end_date = cleaned.get("end_date", contract.end_date)
    if end_date < start_date:
        raise ContractValidationError("End date must be after start date.")
    for field, value in cleaned.items():
        setattr(contract, field, value)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update contract {contract_id}: {e}")
        raise ContractValidationError("Database error while updating contract.")
    db.refresh(contract)
    logger.info(f"Updated contract {contract_id}")
    return contract

def delete_contract(db: Session, contract_id: int) -> None:
    contract = get_contract(db, contract_id)
    db.delete(contract)
    db.commit()
    logger.info(f"Deleted contract {contract_id}")
