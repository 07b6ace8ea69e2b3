#app/schemas/task.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import date, datetime

from app.schemas.attachment import AttachmentRead
from app.schemas.staff_member import StaffMemberShort

class TaskBase(BaseModel):
    """
    TaskBase — базовая схема задачи (используется для create/read).
    """
    title: str = Field(..., examples=["Replace office router"], description="Название задачи")
    description: Optional[str] = Field(None, description="Описание задачи")
    assignee_id: int = Field(..., examples=[1], description="ID исполнителя")
    due_date: date = Field(..., examples=["2026-12-31"], description="Срок")
    due_time: Optional[str] = Field(None, examples=["17:30"], description="Время срока, HH:MM (24ч)")
    estimated_hours: Optional[float] = Field(None, examples=[8], description="Оценка, часы")
    actual_hours: Optional[float] = Field(None, examples=[2.5], description="Затрачено, часы")
    status: str = Field("To Do", examples=["To Do"], description="Статус: To Do, In Progress, Done")

class TaskCreate(TaskBase):
    """
    TaskCreate — создание задачи из JSON. Файлы передаются только через /tasks/form.
    """
    pass

class TaskUpdate(BaseModel):
    """
    TaskUpdate — обновление задачи (все поля опциональны). Вложения здесь не меняются.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    assignee_id: Optional[int] = None
    due_date: Optional[date] = None
    due_time: Optional[str] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    status: Optional[str] = None
    expected_version: Optional[int] = Field(None, description="Версия задачи, которую видел клиент")

class TimeEntry(BaseModel):
    hours: float = Field(..., gt=0, le=1000, description="Сколько часов добавить")

class TaskShort(BaseModel):
    """
    TaskShort — короткая схема задачи для списков.
    """
    id: int
    title: str
    status: str
    due_date: date
    assignee_id: int
    is_overdue: bool

    model_config = ConfigDict(from_attributes=True)

class TaskRead(TaskBase):
    """
    TaskRead — полная схема задачи для ответа (response).
    """
    id: int
    assignee: Optional[StaffMemberShort] = None
    attachments: List[AttachmentRead] = Field(default_factory=list)
    version: int
    is_overdue: bool
    days_until_due: int
    time_remaining_percentage: Optional[float] = None
    time_usage_percentage: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
