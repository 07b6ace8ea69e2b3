#app/schemas/budget_entry.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class BudgetEntryBase(BaseModel):
    category: str = Field(..., examples=["Hardware"], description="Категория")
    amount: float = Field(..., examples=[25000], description="Сумма")
    month: str = Field(..., examples=["March"], description="Месяц")
    year: int = Field(..., examples=[2026], description="Год")

class BudgetEntryCreate(BudgetEntryBase):
    pass

class BudgetEntryUpdate(BaseModel):
    category: Optional[str] = None
    amount: Optional[float] = None
    month: Optional[str] = None
    year: Optional[int] = None

class BudgetEntryRead(BudgetEntryBase):
    id: int
    month_year: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
