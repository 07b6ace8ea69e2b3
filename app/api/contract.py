#app/api/contract.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.schemas.contract import ContractCreate, ContractRead, ContractUpdate
from app.schemas.response import SuccessResponse
from app.crud.contract import (
    create_contract,
    get_contract,
    get_all_contracts,
    update_contract,
    delete_contract,
)
from app.dependencies import get_db
from app.core.exceptions import ContractNotFound, ContractValidationError

router = APIRouter(prefix="/contracts", tags=["Contracts"])
logger = logging.getLogger("OpsDash.ContractsAPI")

@router.get("/", response_model=List[ContractRead])
def list_contracts(
    contract_status: Optional[str] = Query(None, alias="status"),
    counterparty: Optional[str] = Query(None),
    active_only: bool = Query(False),
    db: Session = Depends(get_db),
):
    """
    Получить список контрактов.
    """
    filters = {"status": contract_status, "counterparty": counterparty, "active_only": active_only or None}
    filters = {k: v for k, v in filters.items() if v is not None}
    return get_all_contracts(db, filters=filters)

@router.get("/{contract_id}", response_model=ContractRead)
def get_one_contract(contract_id: int, db: Session = Depends(get_db)):
    try:
        return get_contract(db, contract_id)
    except ContractNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contract not found")

@router.post("/", response_model=ContractRead, status_code=status.HTTP_201_CREATED)
def create_new_contract(data: ContractCreate, db: Session = Depends(get_db)):
    try:
        return create_contract(db, data.model_dump())
    except ContractValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating contract: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error during contract creation.")

@router.patch("/{contract_id}", response_model=ContractRead)
def update_one_contract(contract_id: int, data: ContractUpdate, db: Session = Depends(get_db)):
    try:
        return update_contract(db, contract_id, data.model_dump(exclude_unset=True))
    except ContractNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contract not found")
    except ContractValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error updating contract {contract_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An internal error occurred.")

@router.delete("/{contract_id}", response_model=SuccessResponse)
def delete_one_contract(contract_id: int, db: Session = Depends(get_db)):
    try:
        delete_contract(db, contract_id)
        return SuccessResponse(result=contract_id, detail="Contract deleted")
    except ContractNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contract not found")
