#app/models/development_project.py
from datetime import date
from sqlalchemy import Column, Integer, String, Text, Date, Float, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from app.core.constants import PROJECT_STATUS_ACTIVE, PROJECT_STATUS_NOT_STARTED
from app.models.base import Base, TimestampMixin

class DevelopmentProject(TimestampMixin, Base):
    """
    DevelopmentProject — проект разработки: ведущий сотрудник, стек технологий, репозиторий.
    """
    __tablename__ = "development_projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True, doc="Название проекта")
    description = Column(Text, nullable=True, doc="Описание")
    lead_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, index=True, doc="ID ведущего")
    status = Column(String(32), nullable=False, default=PROJECT_STATUS_NOT_STARTED, doc="Статус")
    budget = Column(Float, nullable=True, doc="Бюджет")
    start_date = Column(Date, nullable=False, doc="Дата начала")
    end_date = Column(Date, nullable=False, doc="Дата окончания")
    technologies = Column(JSON, nullable=False, default=lambda: [], doc="Технологии")
    repository_url = Column(String(2048), nullable=True, doc="Ссылка на репозиторий")

    lead = relationship("StaffMember", lazy="joined")

    __table_args__ = (
        Index("ix_development_projects_status_start", "status", "start_date"),
        Index("ix_development_projects_lead_status", "lead_id", "status"),
    )

    @property
    def duration_days(self) -> int:
        return abs((self.end_date - self.start_date).days)

    @property
    def is_overdue(self) -> bool:
        return self.status == PROJECT_STATUS_ACTIVE and date.today() > self.end_date

    def __repr__(self):
        return f"<DevelopmentProject(id={self.id}, name='{self.name}', status='{self.status}')>"
