import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import os
import tempfile
import uuid
from datetime import date, timedelta
from typing import Generator, Any, Callable

# Set environment variables BEFORE importing settings or main app,
# so the app's own engine and upload dir never touch real files.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["UPLOAD_DIR"] = os.path.join(tempfile.mkdtemp(prefix="opsdash-uploads-"), "tasks")
os.environ["LOG_LEVEL"] = "WARNING"

# Import all model modules FIRST via app.models so Base.metadata is populated.
import app.models
from app.models.base import Base

from app.main import app
from app.dependencies import get_db, get_attachment_storage
from app.services.attachment_storage import AttachmentStorage
from app.core.settings import settings as app_settings
from app.crud.staff_member import create_staff_member

engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture(scope="session", autouse=True)
def create_test_tables_session_scope():
    """
    Create all tables once per test session, dropping them again afterwards.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Database session for one test. The outer transaction is rolled back
    after the test, so commits made by CRUD code never leak between tests.
    """
    connection = engine.connect()
    transaction = connection.begin()
    session = TestingSessionLocal(bind=connection)

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def storage(tmp_path) -> AttachmentStorage:
    """
    Attachment storage rooted in a per-test temporary directory.
    """
    return AttachmentStorage(
        upload_dir=tmp_path / "uploads",
        max_file_size=app_settings.MAX_FILE_SIZE,
        allowed_mime_types=app_settings.ALLOWED_MIME_TYPES,
    )


@pytest.fixture(scope="function")
def client(db: Session, storage: AttachmentStorage) -> Generator[TestClient, None, None]:
    """
    TestClient with the database session and attachment storage overridden.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_attachment_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def staff_member(db: Session) -> Any:
    return create_staff_member(db, {
        "name": "Lerato Mokoena",
        "position": "Technician",
        "department": "Hardware",
        "email": f"lerato.{uuid.uuid4().hex[:6]}@example.com",
    })


@pytest.fixture(scope="function")
def other_staff_member(db: Session) -> Any:
    return create_staff_member(db, {
        "name": "Pieter van Wyk",
        "position": "Manager",
        "department": "Management",
        "email": f"pieter.{uuid.uuid4().hex[:6]}@example.com",
    })


@pytest.fixture
def task_data_factory(staff_member: Any) -> Callable[..., dict]:
    def _task_data(**overrides) -> dict:
        data = {
            "title": f"Task {uuid.uuid4().hex[:6]}",
            "description": "Created in tests.",
            "assignee_id": staff_member.id,
            "due_date": date.today() + timedelta(days=7),
            "status": "To Do",
        }
        data.update(overrides)
        return data
    return _task_data
