#app/models/contract.py
from sqlalchemy import Column, Integer, String, Date, Float, Index
from app.core.constants import CONTRACT_STATUS_PENDING
from app.models.base import Base, TimestampMixin

class Contract(TimestampMixin, Base):
    """
    Contract — договор с контрагентом.
    """
    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False, doc="Название")
    counterparty = Column(String(200), nullable=False, index=True, doc="Контрагент")
    start_date = Column(Date, nullable=False, doc="Дата начала")
    end_date = Column(Date, nullable=False, doc="Дата окончания")
    status = Column(String(24), nullable=False, default=CONTRACT_STATUS_PENDING, index=True, doc="Статус")
    value = Column(Float, nullable=False, doc="Сумма договора")
    description = Column(String(1000), nullable=True, doc="Описание")

    __table_args__ = (
        Index("ix_contracts_period", "start_date", "end_date"),
    )

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days

    def __repr__(self):
        return f"<Contract(id={self.id}, title='{self.title}', status='{self.status}', value={self.value})>"
