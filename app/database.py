# app/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core.settings import settings

# Для SQLite нужен check_same_thread=False: FastAPI выполняет sync-эндпоинты в threadpool
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# Создаем движок подключения к БД
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# Фабрика сессий
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,  # Рекомендация для современных FastAPI приложений
)

def init_db() -> None:
    """Создать таблицы, если их ещё нет."""
    import app.models  # noqa: F401  регистрирует модели в Base.metadata
    from app.models.base import Base
    Base.metadata.create_all(bind=engine)
