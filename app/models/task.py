#app/models/task.py
import math
from datetime import datetime, time
from typing import Optional
from sqlalchemy import (
    Column, Integer, String, Text, Date, Float, ForeignKey, JSON, Index
)
from sqlalchemy.orm import relationship
from app.core.constants import TASK_STATUS_DONE, TASK_STATUS_TODO
from app.models.base import Base, TimestampMixin

class Task(TimestampMixin, Base):
    """
    Task — задача с исполнителем, сроком, учётом времени и файловыми вложениями.

    attachments — упорядоченный JSON-список метаданных вложений
    (см. app.schemas.attachment.AttachmentMetadata). Список всегда заменяется
    целиком, чтобы ORM увидела изменение. version защищает его от потерянных
    обновлений при параллельных запросах.
    """
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False, doc="Название задачи")
    description = Column(Text, nullable=True, doc="Описание")
    assignee_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, index=True, doc="ID исполнителя")
    due_date = Column(Date, nullable=False, doc="Срок")
    due_time = Column(String(5), nullable=True, doc="Время срока, HH:MM")
    estimated_hours = Column(Float, nullable=True, doc="Оценка, часы")
    actual_hours = Column(Float, nullable=True, doc="Затрачено, часы")
    status = Column(String(24), nullable=False, default=TASK_STATUS_TODO, doc="Статус: To Do, In Progress, Done")
    attachments = Column(JSON, nullable=False, default=lambda: [], doc="Вложения")
    version = Column(Integer, nullable=False, doc="Версия для optimistic locking")

    assignee = relationship("StaffMember", lazy="joined")

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_tasks_status", "status"),
        Index("ix_tasks_due_date", "due_date"),
    )

    @property
    def due_at(self) -> datetime:
        """Момент срока: due_date + due_time, либо полночь (начало) due_date."""
        if self.due_time:
            hours, minutes = (int(part) for part in self.due_time.split(":"))
            return datetime.combine(self.due_date, time(hours, minutes))
        return datetime.combine(self.due_date, time.min)

    @property
    def is_overdue(self) -> bool:
        if self.due_date is None:
            return False
        return self.due_at < datetime.now() and self.status != TASK_STATUS_DONE

    @property
    def days_until_due(self) -> int:
        if self.due_date is None:
            return 0
        delta = self.due_at - datetime.now()
        return math.ceil(delta.total_seconds() / 86400)

    @property
    def time_remaining_percentage(self) -> Optional[float]:
        """Сколько оценки осталось, в %. None, пока нет обеих величин."""
        if not self.estimated_hours or not self.actual_hours:
            return None
        remaining = max(0.0, self.estimated_hours - self.actual_hours)
        return remaining * 100 / self.estimated_hours

    @property
    def time_usage_percentage(self) -> Optional[float]:
        """Сколько оценки израсходовано, в %, не больше 100."""
        if not self.estimated_hours or not self.actual_hours:
            return None
        return min(100.0, self.actual_hours * 100 / self.estimated_hours)

    def __repr__(self):
        return (
            f"<Task(id={self.id}, title='{self.title}', status={self.status}, "
            f"assignee_id={self.assignee_id}, due_date={self.due_date}, "
            f"attachments={len(self.attachments or [])})>"
        )
