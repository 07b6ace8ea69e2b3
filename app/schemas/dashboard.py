#app/schemas/dashboard.py
from pydantic import BaseModel, Field
from typing import Dict

class TaskSummary(BaseModel):
    total: int = 0
    pending: int = 0
    completed: int = 0
    overdue: int = 0

class BackupSummary(BaseModel):
    total: int = 0
    total_size_gb: float = 0
    by_status: Dict[str, int] = Field(default_factory=dict)

class BudgetSummary(BaseModel):
    entries: int = 0
    total_amount: float = 0
    current_month_amount: float = 0

class DashboardSummary(BaseModel):
    """
    DashboardSummary — сводка для главной страницы.
    """
    tasks: TaskSummary
    staff_total: int = 0
    projects_by_status: Dict[str, int] = Field(default_factory=dict)
    backups: BackupSummary
    budget: BudgetSummary
