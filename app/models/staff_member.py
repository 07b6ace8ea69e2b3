#app/models/staff_member.py
from sqlalchemy import Column, Integer, String, Index
from app.models.base import Base, TimestampMixin

class StaffMember(TimestampMixin, Base):
    """
    StaffMember — сотрудник. Назначается исполнителем задач и менеджером проектов.
    """
    __tablename__ = "staff_members"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, doc="Имя")
    position = Column(String(255), nullable=False, doc="Должность")
    department = Column(String(255), nullable=False, doc="Отдел")
    email = Column(String(255), nullable=False, unique=True, doc="Email (в нижнем регистре)")
    phone = Column(String(50), nullable=True, doc="Телефон")
    avatar_url = Column(String(512), nullable=True, doc="Ссылка на аватар")

    __table_args__ = (
        Index("ix_staff_members_department", "department"),
        Index("ix_staff_members_position", "position"),
    )

    def __repr__(self):
        return f"<StaffMember(id={self.id}, name='{self.name}', email='{self.email}')>"
