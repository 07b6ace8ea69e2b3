#app/schemas/contract.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime

class ContractBase(BaseModel):
    title: str = Field(..., examples=["Support agreement"], description="Название")
    counterparty: str = Field(..., examples=["Acme Ltd"], description="Контрагент")
    start_date: date = Field(..., description="Дата начала")
    end_date: date = Field(..., description="Дата окончания")
    status: str = Field("Pending", description="Статус: Pending, Active, Expired, Terminated")
    value: float = Field(..., examples=[120000], description="Сумма договора")
    description: Optional[str] = Field(None, description="Описание")

class ContractCreate(ContractBase):
    pass

class ContractUpdate(BaseModel):
    title: Optional[str] = None
    counterparty: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    value: Optional[float] = None
    description: Optional[str] = None

class ContractRead(ContractBase):
    id: int
    duration_days: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
