# app/crud/project.py
import logging
from datetime import date
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models.project import Project
from app.models.staff_member import StaffMember
from app.core.constants import PROJECT_STATUSES, PROJECT_STATUS_NOT_STARTED
from app.core.exceptions import ProjectNotFound, ProjectValidationError

logger = logging.getLogger("OpsDash.Projects")

PROJECT_FIELDS = ("name", "description", "manager_id", "status", "budget", "start_date", "end_date")

def _validate_project_fields(db: Session, data: dict) -> dict:
    cleaned = {k: v for k, v in data.items() if k in PROJECT_FIELDS}
    if "name" in cleaned:
        name = (cleaned["name"] or "").strip()
        if not name:
            raise ProjectValidationError("Project name is required.")
        if len(name) > 255:
            raise ProjectValidationError("Project name cannot exceed 255 characters.")
        cleaned["name"] = name
    if "manager_id" in cleaned and not db.get(StaffMember, cleaned["manager_id"] or 0):
        raise ProjectValidationError("Manager staff member not found.")
    if "status" in cleaned and cleaned["status"] not in PROJECT_STATUSES:
        raise ProjectValidationError(f"Invalid status value. Allowed: {', '.join(PROJECT_STATUSES)}")
    if cleaned.get("budget") is not None and cleaned["budget"] < 0:
        raise ProjectValidationError("Budget cannot be negative.")
    return cleaned

def _check_dates(start_date: date, end_date: date) -> None:
    if start_date and end_date and end_date < start_date:
        raise ProjectValidationError("End date must be after start date.")

def create_project(db: Session, data: dict) -> Project:
    """
    Создаёт проект: имя, менеджер и даты обязательны, end_date >= start_date.
    """
    for field in ("name", "manager_id", "start_date", "end_date"):
        if not data.get(field):
            raise ProjectValidationError("Name, manager, start date, and end date are required.")
    cleaned = _validate_project_fields(db, data)
    _check_dates(cleaned["start_date"], cleaned["end_date"])

    project = Project(
        name=cleaned["name"],
        description=cleaned.get("description"),
        manager_id=cleaned["manager_id"],
        status=cleaned.get("status") or PROJECT_STATUS_NOT_STARTED,
        budget=cleaned.get("budget"),
        start_date=cleaned["start_date"],
        end_date=cleaned["end_date"],
    )
    db.add(project)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create project: {e}")
        raise ProjectValidationError("Database error while creating project.")
    db.refresh(project)
    logger.info(f"Created project {project.id} '{project.name}'")
    return project

def get_project(db: Session, project_id: int) -> Project:
    project = db.get(Project, project_id)
    if not project:
        raise ProjectNotFound(f"Project {project_id} not found.")
    return project

def get_all_projects(db: Session, filters: dict = None) -> List[Project]:
    """
    Список проектов: status, manager_id, name (подстрока), start_date (с), end_date (по).
    """
    filters = filters or {}
    query = db.query(Project)
    if filters.get("status") in PROJECT_STATUSES:
        query = query.filter(Project.status == filters["status"])
    if "manager_id" in filters:
        query = query.filter(Project.manager_id == filters["manager_id"])
    if "name" in filters:
        query = query.filter(Project.name.ilike(f"%{filters['name']}%"))
    if "start_date" in filters:
        query = query.filter(Project.start_date >= filters["start_date"])
    if "end_date" in filters:
        query = query.filter(Project.end_date <= filters["end_date"])
    return query.order_by(Project.start_date.desc(), Project.id.desc()).all()

def update_project(db: Session, project_id: int, data: dict) -> Project:
    project = get_project(db, project_id)
    cleaned = _validate_project_fields(db, data)
    _check_dates(cleaned.get("start_date", project.start_date), cleaned.get("end_date", project.end_date))
    for field, value in cleaned.items():
        setattr(project, field, value)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update project {project_id}: {e}")
        raise ProjectValidationError("Database error while updating project.")
    db.refresh(project)
    logger.info(f"Updated project {project_id} fields: {sorted(cleaned)}")
    return project

def delete_project(db: Session, project_id: int) -> None:
    project = get_project(db, project_id)
    db.delete(project)
    db.commit()
    logger.info(f"Deleted project {project_id}")
