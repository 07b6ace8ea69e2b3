#app/schemas/cloud_backup.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class CloudBackupBase(BaseModel):
    client: str = Field(..., examples=["Acme Ltd"], description="Клиент")
    package: str = Field(..., examples=["Business 500GB"], description="Пакет")
    status: str = Field("In Progress", description="Статус: Success, Failed, In Progress")
    size_gb: float = Field(..., examples=[42.5], description="Размер, ГБ")
    backed_up_content: str = Field(..., examples=["Mailboxes and shared drive"], description="Что попало в бэкап")

class CloudBackupCreate(CloudBackupBase):
    last_backup: Optional[datetime] = Field(None, description="Время бэкапа (по умолчанию текущее)")

class CloudBackupUpdate(BaseModel):
    client: Optional[str] = None
    package: Optional[str] = None
    status: Optional[str] = None
    size_gb: Optional[float] = None
    last_backup: Optional[datetime] = None
    backed_up_content: Optional[str] = None

class CloudBackupRead(CloudBackupBase):
    id: int
    last_backup: datetime
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
