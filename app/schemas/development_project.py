#app/schemas/development_project.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import date, datetime

from app.schemas.staff_member import StaffMemberShort

class DevelopmentProjectBase(BaseModel):
    """
    DevelopmentProjectBase — базовая схема проекта разработки.
    """
    name: str = Field(..., examples=["Customer portal"], description="Название проекта")
    description: Optional[str] = Field(None, description="Описание")
    lead_id: int = Field(..., examples=[1], description="ID ведущего сотрудника")
    status: str = Field("Not Started", description="Статус: Not Started, Active, Completed, On Hold, Cancelled")
    budget: Optional[float] = Field(None, examples=[80000], description="Бюджет")
    start_date: date = Field(..., examples=["2026-02-01"], description="Дата начала")
    end_date: date = Field(..., examples=["2026-09-30"], description="Дата окончания")
    technologies: List[str] = Field(default_factory=list, examples=[["Python", "PostgreSQL"]], description="Технологии")
    repository_url: Optional[str] = Field(None, examples=["https://git.example.com/portal"], description="Репозиторий")

class DevelopmentProjectCreate(DevelopmentProjectBase):
    pass

class DevelopmentProjectUpdate(BaseModel):
    """
    DevelopmentProjectUpdate — обновление проекта разработки (все поля опциональны).
    """
    name: Optional[str] = None
    description: Optional[str] = None
    lead_id: Optional[int] = None
    status: Optional[str] = None
    budget: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    technologies: Optional[List[str]] = None
    repository_url: Optional[str] = None

class DevelopmentProjectRead(DevelopmentProjectBase):
    id: int
    lead: Optional[StaffMemberShort] = None
    duration_days: int
    is_overdue: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
