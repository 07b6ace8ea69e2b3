# app/core/config.py
"""
Настройка логирования приложения. Сами настройки живут в `app.core.settings`.
"""
import logging

from app.core.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

def configure_logging() -> None:
    """Настроить корневой логгер по LOG_LEVEL из настроек."""
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)

# Make the settings instance available for import
__all__ = ["settings", "configure_logging"]
