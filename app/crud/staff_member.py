#app/crud/staff_member.py
import re
import logging
from typing import List
from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.models.staff_member import StaffMember
from app.models.task import Task
from app.models.project import Project
from app.models.development_project import DevelopmentProject
from app.core.constants import POSITIONS, DEPARTMENTS
from app.core.exceptions import (
    StaffMemberNotFound,
    StaffValidationError,
    DuplicateStaffEmail,
    StaffMemberInUse,
)

logger = logging.getLogger("OpsDash.Staff")

EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")

def _validate_staff_fields(data: dict) -> None:
    if "name" in data:
        if not data["name"]:
            raise StaffValidationError("Name is required.")
        if len(data["name"]) > 255:
            raise StaffValidationError("Name cannot exceed 255 characters.")
    if "position" in data and data["position"] not in POSITIONS:
        raise StaffValidationError(f"Invalid position. Allowed: {', '.join(POSITIONS)}")
    if "department" in data and data["department"] not in DEPARTMENTS:
        raise StaffValidationError(f"Invalid department. Allowed: {', '.join(DEPARTMENTS)}")
    if "email" in data and not EMAIL_RE.match(data["email"] or ""):
        raise StaffValidationError("Please enter a valid email.")
    if data.get("phone") and len(data["phone"]) > 50:
        raise StaffValidationError("Phone number cannot exceed 50 characters.")

def _clean(data: dict) -> dict:
    cleaned = {k: (v.strip() if isinstance(v, str) else v) for k, v in data.items()}
    if cleaned.get("email"):
        cleaned["email"] = cleaned["email"].lower()
    return cleaned

def create_staff_member(db: Session, data: dict) -> StaffMember:
    """
    Создать сотрудника. Email уникален (без учёта регистра).
    """
    data = _clean(data)
    for field in ("name", "position", "department", "email"):
        if not data.get(field):
            raise StaffValidationError("Name, position, department, and email are required.")
    _validate_staff_fields(data)

    if db.query(StaffMember).filter(StaffMember.email == data["email"]).first():
        raise DuplicateStaffEmail()

    member = StaffMember(
        name=data["name"],
        position=data["position"],
        department=data["department"],
        email=data["email"],
        phone=data.get("phone"),
        avatar_url=data.get("avatar_url"),
    )
    db.add(member)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Failed to create staff member: {e}")
        raise DuplicateStaffEmail()
    db.refresh(member)
    logger.info(f"Created staff member {member.id} ({member.email})")
    return member

def get_staff_member(db: Session, member_id: int) -> StaffMember:
    member = db.get(StaffMember, member_id)
    if not member:
        raise StaffMemberNotFound(f"Staff member {member_id} not found.")
    return member

def get_all_staff_members(db: Session, filters: dict = None) -> List[StaffMember]:
    """
    Список сотрудников, новые сверху.
    """
    filters = filters or {}
    query = db.query(StaffMember)
    if "department" in filters:
        query = query.filter(StaffMember.department == filters["department"])
    if "position" in filters:
        query = query.filter(StaffMember.position == filters["position"])
    if "search" in filters:
        val = f"%{filters['search']}%"
        query = query.filter(or_(StaffMember.name.ilike(val), StaffMember.email.ilike(val)))
    return query.order_by(StaffMember.created_at.desc(), StaffMember.id.desc()).all()

def update_staff_member(db: Session, member_id: int, data: dict) -> StaffMember:
    member = get_staff_member(db, member_id)
    data = _clean(data)
    _validate_staff_fields(data)

    if data.get("email") and data["email"] != member.email:
        duplicate = db.query(StaffMember).filter(
            StaffMember.email == data["email"], StaffMember.id != member_id
        ).first()
        if duplicate:
            raise DuplicateStaffEmail()

    for field in ("name", "position", "department", "email", "phone", "avatar_url"):
        if field in data:
            setattr(member, field, data[field])

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Failed to update staff member {member_id}: {e}")
        raise DuplicateStaffEmail()
    db.refresh(member)
    logger.info(f"Updated staff member {member_id}")
    return member

def delete_staff_member(db: Session, member_id: int) -> None:
    """
    Удалить сотрудника. Нельзя, пока на него ссылаются задачи, проекты или проекты разработки.
    """
    member = get_staff_member(db, member_id)
    task_count = db.query(Task).filter(Task.assignee_id == member_id).count()
    project_count = db.query(Project).filter(Project.manager_id == member_id).count()
    dev_project_count = db.query(DevelopmentProject).filter(DevelopmentProject.lead_id == member_id).count()
    if task_count or project_count or dev_project_count:
        raise StaffMemberInUse(
            f"Staff member {member_id} is assigned to {task_count} task(s), manages {project_count} project(s) "
            f"and leads {dev_project_count} development project(s)."
        )
    db.delete(member)
    db.commit()
    logger.info(f"Deleted staff member {member_id}")
