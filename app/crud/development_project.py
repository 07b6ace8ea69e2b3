# app/crud/development_project.py
import logging
import re
from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.models.development_project import DevelopmentProject
from app.models.staff_member import StaffMember
from app.core.constants import PROJECT_STATUSES, PROJECT_STATUS_NOT_STARTED
from app.core.exceptions import DevelopmentProjectNotFound, DevelopmentProjectValidationError

logger = logging.getLogger("OpsDash.DevelopmentProjects")

DEVELOPMENT_PROJECT_FIELDS = (
    "name", "description", "lead_id", "status", "budget",
    "start_date", "end_date", "technologies", "repository_url",
)

REPOSITORY_URL_RE = re.compile(r"^https?://.+\..+")

def _clean_technologies(value) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise DevelopmentProjectValidationError("Technologies must be a list of strings.")
    return [item.strip() for item in value if item.strip()]

def _validate_development_project_fields(db: Session, data: dict) -> dict:
    cleaned = {k: v for k, v in data.items() if k in DEVELOPMENT_PROJECT_FIELDS}
    if "name" in cleaned:
        name = (cleaned["name"] or "").strip()
        if not name:
            raise DevelopmentProjectValidationError("Project name is required.")
        if len(name) > 255:
            raise DevelopmentProjectValidationError("Project name cannot exceed 255 characters.")
        cleaned["name"] = name
    if "lead_id" in cleaned and not db.get(StaffMember, cleaned["lead_id"] or 0):
        raise DevelopmentProjectValidationError("Project lead staff member not found.")
    if "status" in cleaned and cleaned["status"] not in PROJECT_STATUSES:
        raise DevelopmentProjectValidationError(f"Invalid status value. Allowed: {', '.join(PROJECT_STATUSES)}")
    if cleaned.get("budget") is not None and cleaned["budget"] < 0:
        raise DevelopmentProjectValidationError("Budget cannot be negative.")
    if "technologies" in cleaned:
        cleaned["technologies"] = _clean_technologies(cleaned["technologies"])
    if "repository_url" in cleaned:
        url = (cleaned["repository_url"] or "").strip()
        if url and not REPOSITORY_URL_RE.match(url):
            raise DevelopmentProjectValidationError("Please provide a valid URL")
        cleaned["repository_url"] = url or None
    return cleaned

def create_development_project(db: Session, data: dict) -> DevelopmentProject:
    """
    Создаёт проект разработки: имя, ведущий и обе даты обязательны.
    Порядок дат не проверяется, duration_days считается по модулю.
    """
    for field in ("name", "lead_id", "start_date", "end_date"):
        if not data.get(field):
            raise DevelopmentProjectValidationError("Name, lead, start date, and end date are required")
    cleaned = _validate_development_project_fields(db, data)

    project = DevelopmentProject(
        name=cleaned["name"],
        description=cleaned.get("description"),
        lead_id=cleaned["lead_id"],
        status=cleaned.get("status") or PROJECT_STATUS_NOT_STARTED,
        budget=cleaned.get("budget"),
        start_date=cleaned["start_date"],
        end_date=cleaned["end_date"],
        technologies=cleaned.get("technologies") or [],
        repository_url=cleaned.get("repository_url"),
    )
    db.add(project)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create development project: {e}")
        raise DevelopmentProjectValidationError("Database error while creating development project.")
    db.refresh(project)
    logger.info(f"Created development project {project.id} '{project.name}'")
    return project

def get_development_project(db: Session, project_id: int) -> DevelopmentProject:
    project = db.get(DevelopmentProject, project_id)
    if not project:
        raise DevelopmentProjectNotFound(f"Development project {project_id} not found.")
    return project

def get_all_development_projects(db: Session, filters: dict = None) -> List[DevelopmentProject]:
    """
    Список проектов разработки: status, lead_id, name (подстрока), technology (подстрока
    любой технологии, без учёта регистра). Новые сверху.
    """
    filters = filters or {}
    query = db.query(DevelopmentProject)
    if filters.get("status") in PROJECT_STATUSES:
        query = query.filter(DevelopmentProject.status == filters["status"])
    if "lead_id" in filters:
        query = query.filter(DevelopmentProject.lead_id == filters["lead_id"])
    if "name" in filters:
        query = query.filter(DevelopmentProject.name.ilike(f"%{filters['name']}%"))
    projects = query.order_by(
        DevelopmentProject.created_at.desc(),
        DevelopmentProject.start_date.desc(),
        DevelopmentProject.id.desc(),
    ).all()
    # JSON-список не фильтруется переносимо на стороне БД
    technology = (filters.get("technology") or "").strip().lower()
    if technology:
        projects = [
            p for p in projects
            if any(technology in item.lower() for item in p.technologies or [])
        ]
    return projects

def update_development_project(db: Session, project_id: int, data: dict) -> DevelopmentProject:
    project = get_development_project(db, project_id)
    cleaned = _validate_development_project_fields(db, data)
    for field, value in cleaned.items():
        setattr(project, field, value)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update development project {project_id}: {e}")
        raise DevelopmentProjectValidationError("Database error while updating development project.")
    db.refresh(project)
    logger.info(f"Updated development project {project_id} fields: {sorted(cleaned)}")
    return project

def delete_development_project(db: Session, project_id: int) -> None:
    project = get_development_project(db, project_id)
    db.delete(project)
    db.commit()
    logger.info(f"Deleted development project {project_id}")
