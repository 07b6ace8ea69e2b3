# app/crud/dashboard.py
import logging
from datetime import date
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.task import Task
from app.models.staff_member import StaffMember
from app.models.project import Project
from app.models.cloud_backup import CloudBackup
from app.models.budget_entry import BudgetEntry
from app.core.constants import MONTHS, TASK_STATUS_DONE
from app.crud.task import get_all_tasks
from app.schemas.dashboard import BackupSummary, BudgetSummary, DashboardSummary, TaskSummary

logger = logging.getLogger("OpsDash.Dashboard")

def _count_by_status(db: Session, model) -> dict:
    rows = db.query(model.status, func.count(model.id)).group_by(model.status).all()
    return {status: count for status, count in rows}

def get_dashboard_summary(db: Session, today: date = None) -> DashboardSummary:
    """
    Сводка для дашборда: задачи, сотрудники, проекты, бэкапы, бюджет.
    """
    today = today or date.today()

    task_counts = _count_by_status(db, Task)
    total_tasks = sum(task_counts.values())
    completed = task_counts.get(TASK_STATUS_DONE, 0)
    overdue = len(get_all_tasks(db, {"overdue": True}))

    backup_total, backup_size = db.query(
        func.count(CloudBackup.id), func.coalesce(func.sum(CloudBackup.size_gb), 0)
    ).one()

    budget_count, budget_total = db.query(
        func.count(BudgetEntry.id), func.coalesce(func.sum(BudgetEntry.amount), 0)
    ).one()
    current_month_total = db.query(func.coalesce(func.sum(BudgetEntry.amount), 0)).filter(
        BudgetEntry.month == MONTHS[today.month - 1], BudgetEntry.year == today.year
    ).scalar()

    summary = DashboardSummary(
        tasks=TaskSummary(
            total=total_tasks,
            pending=total_tasks - completed,
            completed=completed,
            overdue=overdue,
        ),
        staff_total=db.query(func.count(StaffMember.id)).scalar() or 0,
        projects_by_status=_count_by_status(db, Project),
        backups=BackupSummary(
            total=backup_total,
            total_size_gb=float(backup_size),
            by_status=_count_by_status(db, CloudBackup),
        ),
        budget=BudgetSummary(
            entries=budget_count,
            total_amount=float(budget_total),
            current_month_amount=float(current_month_total or 0),
        ),
    )
    logger.info(f"Built dashboard summary: {total_tasks} task(s), {summary.staff_total} staff")
    return summary
