# app/dependencies.py

from functools import lru_cache
from typing import Generator
from sqlalchemy.orm import Session
from app.core.settings import settings
from app.database import SessionLocal
from app.services.attachment_storage import AttachmentStorage

def get_db() -> Generator[Session, None, None]:
    """
    Создает и возвращает сессию базы данных, гарантирует закрытие после использования.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@lru_cache()
def get_attachment_storage() -> AttachmentStorage:
    """
    Хранилище вложений, созданное один раз из настроек. В тестах подменяется через dependency_overrides.
    """
    return AttachmentStorage.from_settings(settings)
