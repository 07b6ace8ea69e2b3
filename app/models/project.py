#app/models/project.py
from datetime import date
from sqlalchemy import Column, Integer, String, Text, Date, Float, ForeignKey, Index
from sqlalchemy.orm import relationship
from app.core.constants import PROJECT_STATUS_ACTIVE, PROJECT_STATUS_NOT_STARTED
from app.models.base import Base, TimestampMixin

class Project(TimestampMixin, Base):
    """
    Project — проект с менеджером, бюджетом и периодом выполнения.
    """
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True, doc="Название проекта")
    description = Column(Text, nullable=True, doc="Описание")
    manager_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, index=True, doc="ID менеджера")
    status = Column(String(32), nullable=False, default=PROJECT_STATUS_NOT_STARTED, doc="Статус")
    budget = Column(Float, nullable=True, doc="Бюджет")
    start_date = Column(Date, nullable=False, doc="Дата начала")
    end_date = Column(Date, nullable=False, doc="Дата окончания")

    manager = relationship("StaffMember", lazy="joined")

    __table_args__ = (
        Index("ix_projects_status_start", "status", "start_date"),
        Index("ix_projects_manager_status", "manager_id", "status"),
    )

    @property
    def duration_days(self) -> int:
        return abs((self.end_date - self.start_date).days)

    @property
    def is_overdue(self) -> bool:
        return self.status == PROJECT_STATUS_ACTIVE and date.today() > self.end_date

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}', status='{self.status}')>"
