#app/models/budget_entry.py
from sqlalchemy import Column, Integer, String, Float, Index
from app.models.base import Base, TimestampMixin

class BudgetEntry(TimestampMixin, Base):
    """
    BudgetEntry — расход по категории за месяц.
    """
    __tablename__ = "budget_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(100), nullable=False, index=True, doc="Категория")
    amount = Column(Float, nullable=False, doc="Сумма")
    month = Column(String(16), nullable=False, doc="Месяц (January..December)")
    year = Column(Integer, nullable=False, doc="Год")

    __table_args__ = (
        Index("ix_budget_entries_month_year", "month", "year"),
    )

    @property
    def month_year(self) -> str:
        return f"{self.month} {self.year}"

    def __repr__(self):
        return f"<BudgetEntry(id={self.id}, category='{self.category}', amount={self.amount}, {self.month_year})>"
