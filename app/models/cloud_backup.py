#app/models/cloud_backup.py
from sqlalchemy import Column, Integer, String, Float, DateTime, func
from app.core.constants import BACKUP_STATUS_IN_PROGRESS
from app.models.base import Base, TimestampMixin

class CloudBackup(TimestampMixin, Base):
    """
    CloudBackup — запись о резервной копии клиента.
    """
    __tablename__ = "cloud_backups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client = Column(String(100), nullable=False, index=True, doc="Клиент")
    package = Column(String(100), nullable=False, doc="Пакет")
    status = Column(String(24), nullable=False, default=BACKUP_STATUS_IN_PROGRESS, index=True, doc="Статус")
    size_gb = Column(Float, nullable=False, doc="Размер, ГБ")
    last_backup = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True, doc="Последний бэкап")
    backed_up_content = Column(String(500), nullable=False, doc="Что попало в бэкап")

    def __repr__(self):
        return f"<CloudBackup(id={self.id}, client='{self.client}', status='{self.status}')>"
