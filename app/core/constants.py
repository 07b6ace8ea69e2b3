#app/core/constants.py
"""
Допустимые значения статусов и справочников.

Значения совпадают с тем, что отображает фронтенд, поэтому хранятся как строки.
"""
from typing import List

# === Задачи ===

TASK_STATUS_TODO = "To Do"
TASK_STATUS_IN_PROGRESS = "In Progress"
TASK_STATUS_DONE = "Done"

TASK_STATUSES: List[str] = [TASK_STATUS_TODO, TASK_STATUS_IN_PROGRESS, TASK_STATUS_DONE]

MAX_TASK_HOURS = 1000

# === Сотрудники ===

POSITIONS: List[str] = [
    "Software Engineer",
    "Frontend Developer",
    "Technician",
    "Manager",
]

DEPARTMENTS: List[str] = [
    "Software",
    "Customer Support",
    "Hardware",
    "Management",
]

# === Проекты ===

PROJECT_STATUS_NOT_STARTED = "Not Started"
PROJECT_STATUS_ACTIVE = "Active"
PROJECT_STATUS_COMPLETED = "Completed"
PROJECT_STATUS_ON_HOLD = "On Hold"
PROJECT_STATUS_CANCELLED = "Cancelled"

PROJECT_STATUSES: List[str] = [
    PROJECT_STATUS_NOT_STARTED,
    PROJECT_STATUS_ACTIVE,
    PROJECT_STATUS_COMPLETED,
    PROJECT_STATUS_ON_HOLD,
    PROJECT_STATUS_CANCELLED,
]

# === Контракты ===

CONTRACT_STATUS_PENDING = "Pending"
CONTRACT_STATUS_ACTIVE = "Active"
CONTRACT_STATUS_EXPIRED = "Expired"
CONTRACT_STATUS_TERMINATED = "Terminated"

CONTRACT_STATUSES: List[str] = [
    CONTRACT_STATUS_PENDING,
    CONTRACT_STATUS_ACTIVE,
    CONTRACT_STATUS_EXPIRED,
    CONTRACT_STATUS_TERMINATED,
]

# === Бюджет ===

MONTHS: List[str] = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

MIN_BUDGET_YEAR = 2000
MAX_BUDGET_YEAR = 2100

# === Бэкапы ===

BACKUP_STATUS_SUCCESS = "Success"
BACKUP_STATUS_FAILED = "Failed"
BACKUP_STATUS_IN_PROGRESS = "In Progress"

BACKUP_STATUSES: List[str] = [BACKUP_STATUS_SUCCESS, BACKUP_STATUS_FAILED, BACKUP_STATUS_IN_PROGRESS]
