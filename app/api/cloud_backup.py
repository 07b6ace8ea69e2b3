#app/api/cloud_backup.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.schemas.cloud_backup import CloudBackupCreate, CloudBackupRead, CloudBackupUpdate
from app.schemas.response import SuccessResponse
from app.crud.cloud_backup import (
    create_cloud_backup,
    get_cloud_backup,
    get_all_cloud_backups,
    update_cloud_backup,
    delete_cloud_backup,
)
from app.dependencies import get_db
from app.core.exceptions import CloudBackupNotFound, CloudBackupValidationError

router = APIRouter(prefix="/cloud-backups", tags=["Cloud Backups"])
logger = logging.getLogger("OpsDash.BackupsAPI")

@router.get("/", response_model=List[CloudBackupRead])
def list_cloud_backups(
    backup_status: Optional[str] = Query(None, alias="status"),
    client: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Получить записи о бэкапах, последние сверху.
    """
    filters = {"status": backup_status, "client": client}
    filters = {k: v for k, v in filters.items() if v is not None}
    return get_all_cloud_backups(db, filters=filters)

@router.get("/{backup_id}", response_model=CloudBackupRead)
def get_one_cloud_backup(backup_id: int, db: Session = Depends(get_db)):
    try:
        return get_cloud_backup(db, backup_id)
    except CloudBackupNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cloud backup not found")

@router.post("/", response_model=CloudBackupRead, status_code=status.HTTP_201_CREATED)
def create_new_cloud_backup(data: CloudBackupCreate, db: Session = Depends(get_db)):
    try:
        return create_cloud_backup(db, data.model_dump())
    except CloudBackupValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating cloud backup: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error during cloud backup creation.")

@router.patch("/{backup_id}", response_model=CloudBackupRead)
def update_one_cloud_backup(backup_id: int, data: CloudBackupUpdate, db: Session = Depends(get_db)):
    try:
        return update_cloud_backup(db, backup_id, data.model_dump(exclude_unset=True))
    except CloudBackupNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cloud backup not found")
    except CloudBackupValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{backup_id}", response_model=SuccessResponse)
def delete_one_cloud_backup(backup_id: int, db: Session = Depends(get_db)):
    try:
        delete_cloud_backup(db, backup_id)
        return SuccessResponse(result=backup_id, detail="Cloud backup deleted")
    except CloudBackupNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cloud backup not found")
