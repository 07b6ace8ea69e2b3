#app/schemas/staff_member.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class StaffMemberBase(BaseModel):
    """
    StaffMemberBase — базовая схема сотрудника.
    """
    name: str = Field(..., examples=["Thandi Nkosi"], description="Имя")
    position: str = Field(..., examples=["Software Engineer"], description="Должность")
    department: str = Field(..., examples=["Software"], description="Отдел")
    email: str = Field(..., examples=["thandi@example.com"], description="Email")
    phone: Optional[str] = Field(None, examples=["+27 11 555 0101"], description="Телефон")
    avatar_url: Optional[str] = Field(None, description="Ссылка на аватар")

class StaffMemberCreate(StaffMemberBase):
    pass

class StaffMemberUpdate(BaseModel):
    """
    StaffMemberUpdate — обновление сотрудника (все поля опциональны).
    """
    name: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None

class StaffMemberShort(BaseModel):
    """
    StaffMemberShort — сотрудник в составе задачи/проекта (populate).
    """
    id: int
    name: str
    email: str
    position: str
    department: str

    model_config = ConfigDict(from_attributes=True)

class StaffMemberRead(StaffMemberBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
