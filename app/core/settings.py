#app/core/settings.py
# app/core/settings.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from pydantic import field_validator

DEFAULT_ALLOWED_MIME_TYPES = [
    # Images
    "image/jpeg",
    "image/png",
    "image/gif",
    # Documents
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    # Archives
    "application/zip",
]

class Settings(BaseSettings):
    """
    Основные переменные окружения и настройки приложения.
    Все значения берутся из окружения или .env.
    """
    # Database
    DATABASE_URL: str = "sqlite:///./ops_dashboard.db"

    # Вложения задач
    UPLOAD_DIR: str = "uploads/tasks"
    MAX_FILE_SIZE: int = 10 * 1024 * 1024
    ALLOWED_MIME_TYPES: List[str] = DEFAULT_ALLOWED_MIME_TYPES

    # App meta
    ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Авто-сплит строковых списков из .env
    @field_validator("ALLOWED_ORIGINS", "ALLOWED_MIME_TYPES", mode="before")
    @classmethod
    def split_comma_separated(cls, v):
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v

    @field_validator("MAX_FILE_SIZE")
    @classmethod
    def positive_file_size(cls, v):
        if v <= 0:
            raise ValueError("MAX_FILE_SIZE must be a positive number of bytes")
        return v

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

settings = Settings()
