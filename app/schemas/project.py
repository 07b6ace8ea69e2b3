#app/schemas/project.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime

from app.schemas.staff_member import StaffMemberShort

class ProjectBase(BaseModel):
    """
    ProjectBase — базовая схема проекта.
    """
    name: str = Field(..., examples=["Branch network upgrade"], description="Название проекта")
    description: Optional[str] = Field(None, description="Описание")
    manager_id: int = Field(..., examples=[1], description="ID менеджера")
    status: str = Field("Not Started", description="Статус: Not Started, Active, Completed, On Hold, Cancelled")
    budget: Optional[float] = Field(None, examples=[150000], description="Бюджет")
    start_date: date = Field(..., examples=["2026-01-01"], description="Дата начала")
    end_date: date = Field(..., examples=["2026-06-30"], description="Дата окончания")

class ProjectCreate(ProjectBase):
    pass

class ProjectUpdate(BaseModel):
    """
    ProjectUpdate — обновление проекта (все поля опциональны).
    """
    name: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[int] = None
    status: Optional[str] = None
    budget: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class ProjectRead(ProjectBase):
    id: int
    manager: Optional[StaffMemberShort] = None
    duration_days: int
    is_overdue: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
