#app/api/staff_member.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.schemas.staff_member import StaffMemberCreate, StaffMemberRead, StaffMemberUpdate
from app.schemas.response import SuccessResponse
from app.crud.staff_member import (
    create_staff_member,
    get_staff_member,
    get_all_staff_members,
    update_staff_member,
    delete_staff_member,
)
from app.dependencies import get_db
from app.core.exceptions import (
    StaffMemberNotFound,
    StaffValidationError,
    DuplicateStaffEmail,
    StaffMemberInUse,
)

logger = logging.getLogger("OpsDash.StaffAPI")

router = APIRouter(prefix="/staff-members", tags=["Staff"])

@router.get("/", response_model=List[StaffMemberRead])
def list_staff_members(
    department: Optional[str] = Query(None),
    position: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Получить список сотрудников.
    """
    filters = {"department": department, "position": position, "search": search}
    filters = {k: v for k, v in filters.items() if v is not None}
    return get_all_staff_members(db, filters=filters)

@router.get("/{member_id}", response_model=StaffMemberRead)
def get_one_staff_member(member_id: int, db: Session = Depends(get_db)):
    try:
        return get_staff_member(db, member_id)
    except StaffMemberNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff member not found")

@router.post("/", response_model=StaffMemberRead, status_code=status.HTTP_201_CREATED)
def create_new_staff_member(data: StaffMemberCreate, db: Session = Depends(get_db)):
    """
    Создать сотрудника.
    """
    try:
        return create_staff_member(db, data.model_dump())
    except StaffValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateStaffEmail as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating staff member: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error during staff member creation.")

@router.patch("/{member_id}", response_model=StaffMemberRead)
def update_one_staff_member(member_id: int, data: StaffMemberUpdate, db: Session = Depends(get_db)):
    try:
        return update_staff_member(db, member_id, data.model_dump(exclude_unset=True))
    except StaffMemberNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff member not found")
    except StaffValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateStaffEmail as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error updating staff member {member_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An internal error occurred.")

@router.delete("/{member_id}", response_model=SuccessResponse)
def delete_one_staff_member(member_id: int, db: Session = Depends(get_db)):
    """
    Удалить сотрудника (только если на него ничего не ссылается).
    """
    try:
        delete_staff_member(db, member_id)
        return SuccessResponse(result=member_id, detail="Staff member deleted")
    except StaffMemberNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Staff member not found")
    except StaffMemberInUse as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
