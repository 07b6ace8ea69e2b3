#app/api/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.schemas.dashboard import DashboardSummary
from app.crud.dashboard import get_dashboard_summary
from app.dependencies import get_db

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(db: Session = Depends(get_db)):
    """
    Сводка по задачам, сотрудникам, проектам, бэкапам и бюджету.
    """
    return get_dashboard_summary(db)
