# app/crud/cloud_backup.py
import logging
from datetime import datetime, timezone
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models.cloud_backup import CloudBackup
from app.core.constants import BACKUP_STATUSES, BACKUP_STATUS_IN_PROGRESS
from app.core.exceptions import CloudBackupNotFound, CloudBackupValidationError

logger = logging.getLogger("OpsDash.Backups")

BACKUP_FIELDS = ("client", "package", "status", "size_gb", "last_backup", "backed_up_content")
MAX_LENGTHS = {"client": 100, "package": 100, "backed_up_content": 500}

def _validate_backup_fields(data: dict) -> dict:
    cleaned = {k: (v.strip() if isinstance(v, str) else v) for k, v in data.items() if k in BACKUP_FIELDS}
    for field, max_length in MAX_LENGTHS.items():
        if field in cleaned:
            if not cleaned[field]:
                raise CloudBackupValidationError(f"{field.replace('_', ' ').capitalize()} is required.")
            if len(cleaned[field]) > max_length:
                raise CloudBackupValidationError(
                    f"{field.replace('_', ' ').capitalize()} cannot exceed {max_length} characters."
                )
    if "status" in cleaned and cleaned["status"] not in BACKUP_STATUSES:
        raise CloudBackupValidationError(f"Invalid status value. Allowed: {', '.join(BACKUP_STATUSES)}")
    if "size_gb" in cleaned and (cleaned["size_gb"] is None or cleaned["size_gb"] < 0):
        raise CloudBackupValidationError("Size cannot be negative.")
    return cleaned

def create_cloud_backup(db: Session, data: dict) -> CloudBackup:
    """
    Создать запись о бэкапе. last_backup по умолчанию равен текущему времени.
    """
    if not data.get("client") or not data.get("package") or data.get("size_gb") is None \
            or not data.get("backed_up_content"):
        raise CloudBackupValidationError("Client, package, size, and backed up content are required.")
    cleaned = _validate_backup_fields(data)
    backup = CloudBackup(
        client=cleaned["client"],
        package=cleaned["package"],
        status=cleaned.get("status") or BACKUP_STATUS_IN_PROGRESS,
        size_gb=cleaned["size_gb"],
        last_backup=cleaned.get("last_backup") or datetime.now(timezone.utc),
        backed_up_content=cleaned["backed_up_content"],
    )
    db.add(backup)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create cloud backup: {e}")
        raise CloudBackupValidationError("Database error while creating cloud backup.")
    db.refresh(backup)
    logger.info(f"Created cloud backup {backup.id} for {backup.client}")
    return backup

def get_cloud_backup(db: Session, backup_id: int) -> CloudBackup:
    backup = db.get(CloudBackup, backup_id)
    if not backup:
        raise CloudBackupNotFound(f"Cloud backup {backup_id} not found.")
    return backup

def get_all_cloud_backups(db: Session, filters: dict = None) -> List[CloudBackup]:
    filters = filters or {}
    query = db.query(CloudBackup)
    if filters.get("status") in BACKUP_STATUSES:
        query = query.filter(CloudBackup.status == filters["status"])
    if "client" in filters:
        query = query.filter(CloudBackup.client.ilike(f"%{filters['client']}%"))
    return query.order_by(CloudBackup.last_backup.desc(), CloudBackup.id.desc()).all()

def update_cloud_backup(db: Session, backup_id: int, data: dict) -> CloudBackup:
    backup = get_cloud_backup(db, backup_id)
    cleaned = _validate_backup_fields(data)
    for field, value in cleaned.items():
        if field == "last_backup" and value is None:
            continue
        setattr(backup, field, value)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update cloud backup {backup_id}: {e}")
        raise CloudBackupValidationError("Database error while updating cloud backup.")
    db.refresh(backup)
    logger.info(f"Updated cloud backup {backup_id}")
    return backup

def delete_cloud_backup(db: Session, backup_id: int) -> None:
    backup = get_cloud_backup(db, backup_id)
    db.delete(backup)
    db.commit()
    logger.info(f"Deleted cloud backup {backup_id}")
