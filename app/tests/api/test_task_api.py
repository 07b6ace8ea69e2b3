import io
import pytest
import uuid
from pathlib import Path
from datetime import date, timedelta
from http import HTTPStatus
from urllib.parse import quote
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from starlette.datastructures import Headers, UploadFile

from app.api.task import _read_uploads, content_disposition
from app.crud.task import create_task, get_task
from app.models.task import Task as TaskModel
from app.services.attachment_storage import AttachmentStorage


PDF_BYTES = b"%PDF-1.4\n" + b"0" * 2048


@pytest.fixture
def task_form_factory(staff_member):
    def _task_form(**overrides) -> dict:
        data = {
            "title": f"Form Task {uuid.uuid4().hex[:6]}",
            "assignee_id": str(staff_member.id),
            "due_date": (date.today() + timedelta(days=3)).isoformat(),
            "description": "Uploaded from the dashboard",
        }
        data.update(overrides)
        return data
    return _task_form

@pytest.fixture
def task_with_attachment(client: TestClient, task_form_factory) -> dict:
    response = client.post(
        "/tasks/form",
        data=task_form_factory(),
        files=[("attachments", ("invoice.pdf", PDF_BYTES, "application/pdf"))],
    )
    assert response.status_code == HTTPStatus.CREATED
    return response.json()

def files_on_disk(storage: AttachmentStorage) -> set:
    if not storage.upload_dir.exists():
        return set()
    return {p.name for p in storage.upload_dir.iterdir()}


# --- POST /tasks/ (JSON) ---

def test_create_task_json(client: TestClient, staff_member):
    payload = {
        "title": "Replace office router",
        "assignee_id": staff_member.id,
        "due_date": (date.today() + timedelta(days=5)).isoformat(),
        "due_time": "09:30",
        "estimated_hours": 4,
    }
    response = client.post("/tasks/", json=payload)

    assert response.status_code == HTTPStatus.CREATED
    data = response.json()
    assert data["title"] == payload["title"]
    assert data["status"] == "To Do"
    assert data["attachments"] == []
    assert data["version"] == 1
    assert data["is_overdue"] is False
    assert data["assignee"]["id"] == staff_member.id
    assert data["time_remaining_percentage"] is None
    assert data["time_usage_percentage"] is None

def test_create_task_json_invalid_status(client: TestClient, staff_member):
    payload = {
        "title": "Bad status",
        "assignee_id": staff_member.id,
        "due_date": date.today().isoformat(),
        "status": "Blocked",
    }
    response = client.post("/tasks/", json=payload)
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "Invalid status value" in response.json()["detail"]

def test_create_task_json_unknown_assignee(client: TestClient):
    payload = {"title": "Orphan", "assignee_id": 999999, "due_date": date.today().isoformat()}
    response = client.post("/tasks/", json=payload)
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.json()["detail"] == "Assignee staff member not found."


# --- POST /tasks/form (multipart) ---

def test_create_task_with_files(client: TestClient, task_form_factory, storage: AttachmentStorage):
    response = client.post(
        "/tasks/form",
        data=task_form_factory(status="In Progress"),
        files=[
            ("attachments", ("invoice.pdf", PDF_BYTES, "application/pdf")),
            ("attachments", ("photo.png", b"\x89PNG\r\n", "image/png")),
        ],
    )

    assert response.status_code == HTTPStatus.CREATED
    data = response.json()
    assert data["status"] == "In Progress"
    assert [a["original_name"] for a in data["attachments"]] == ["invoice.pdf", "photo.png"]
    invoice = data["attachments"][0]
    assert invoice["mime_type"] == "application/pdf"
    assert invoice["size"] == len(PDF_BYTES)
    assert invoice["filename"].endswith(".pdf")
    assert "path" not in invoice
    assert files_on_disk(storage) == {a["filename"] for a in data["attachments"]}

def test_create_task_without_files_via_form(client: TestClient, task_form_factory):
    response = client.post("/tasks/form", data=task_form_factory())
    assert response.status_code == HTTPStatus.CREATED
    assert response.json()["attachments"] == []

def test_create_task_file_too_large(client: TestClient, task_form_factory, storage: AttachmentStorage, db: Session):
    form = task_form_factory()
    big = b"0" * (11 * 1024 * 1024)
    response = client.post(
        "/tasks/form", data=form,
        files=[("attachments", ("scan.pdf", big, "application/pdf"))],
    )

    assert response.status_code == HTTPStatus.REQUEST_ENTITY_TOO_LARGE
    assert "10MB" in response.json()["detail"]
    assert files_on_disk(storage) == set()
    assert db.query(TaskModel).filter(TaskModel.title == form["title"]).first() is None

def test_read_uploads_stops_one_byte_past_limit():
    upload = UploadFile(
        file=io.BytesIO(b"0" * 4096), filename="scan.pdf",
        headers=Headers({"content-type": "application/pdf"}),
    )
    [uploaded] = _read_uploads([upload], max_file_size=1024)
    assert uploaded.size == 1025
    assert len(uploaded.content) == 1025
    assert uploaded.mime_type == "application/pdf"
    assert uploaded.original_name == "scan.pdf"

def test_create_task_unsupported_type(client: TestClient, task_form_factory, storage: AttachmentStorage):
    response = client.post(
        "/tasks/form", data=task_form_factory(),
        files=[
            ("attachments", ("invoice.pdf", PDF_BYTES, "application/pdf")),
            ("attachments", ("setup.exe", b"MZ\x90\x00", "application/x-msdownload")),
        ],
    )

    assert response.status_code == HTTPStatus.UNSUPPORTED_MEDIA_TYPE
    detail = response.json()["detail"]
    assert "application/x-msdownload" in detail
    assert "application/pdf" in detail
    assert files_on_disk(storage) == set()

def test_create_task_form_validation_error(client: TestClient, task_form_factory, storage: AttachmentStorage):
    response = client.post(
        "/tasks/form", data=task_form_factory(due_time="7pm"),
        files=[("attachments", ("invoice.pdf", PDF_BYTES, "application/pdf"))],
    )
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert files_on_disk(storage) == set()


# --- GET /tasks/ ---

def test_list_tasks_filters(client: TestClient, db: Session, task_data_factory):
    done = create_task(db, task_data_factory(status="Done"))
    late = create_task(db, task_data_factory(due_date=date.today() - timedelta(days=1)))

    response = client.get("/tasks/", params={"status": "Done"})
    assert response.status_code == HTTPStatus.OK
    assert [t["id"] for t in response.json()] == [done.id]

    response = client.get("/tasks/", params={"overdue": "true"})
    overdue = response.json()
    assert [t["id"] for t in overdue] == [late.id]
    assert overdue[0]["is_overdue"] is True

def test_list_overdue_includes_task_due_today(client: TestClient, db: Session, task_data_factory):
    today = create_task(db, task_data_factory(due_date=date.today()))
    tomorrow = create_task(db, task_data_factory(due_date=date.today() + timedelta(days=1)))

    ids = [t["id"] for t in client.get("/tasks/", params={"overdue": "true"}).json()]
    assert today.id in ids
    assert tomorrow.id not in ids

def test_get_task_reports_time_percentages(client: TestClient, db: Session, task_data_factory):
    task = create_task(db, task_data_factory(estimated_hours=8, actual_hours=2))
    data = client.get(f"/tasks/{task.id}").json()
    assert data["time_remaining_percentage"] == 75.0
    assert data["time_usage_percentage"] == 25.0

def test_get_task_not_found(client: TestClient):
    response = client.get("/tasks/999999")
    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json()["detail"] == "Task not found"


# --- PATCH /tasks/{id} ---

def test_update_task_json(client: TestClient, db: Session, task_data_factory):
    task = create_task(db, task_data_factory())
    response = client.patch(f"/tasks/{task.id}", json={"status": "In Progress", "expected_version": 1})
    assert response.status_code == HTTPStatus.OK
    data = response.json()
    assert data["status"] == "In Progress"
    assert data["version"] == 2

def test_update_task_stale_version_conflict(client: TestClient, db: Session, task_data_factory):
    task = create_task(db, task_data_factory())
    assert client.patch(f"/tasks/{task.id}", json={"title": "First", "expected_version": 1}).status_code == HTTPStatus.OK

    response = client.patch(f"/tasks/{task.id}", json={"title": "Second", "expected_version": 1})

    assert response.status_code == HTTPStatus.CONFLICT
    assert get_task(db, task.id).title == "First"


# --- PATCH /tasks/{id}/form ---

def test_update_task_form_adds_and_removes(client: TestClient, task_with_attachment: dict, storage: AttachmentStorage):
    task_id = task_with_attachment["id"]
    old_name = task_with_attachment["attachments"][0]["filename"]

    response = client.patch(
        f"/tasks/{task_id}/form",
        data={"remove_attachments": old_name, "status": "Done"},
        files=[("attachments", ("report.pdf", b"%PDF-1.7 report", "application/pdf"))],
    )

    assert response.status_code == HTTPStatus.OK
    data = response.json()
    assert data["status"] == "Done"
    assert [a["original_name"] for a in data["attachments"]] == ["report.pdf"]
    assert files_on_disk(storage) == {data["attachments"][0]["filename"]}

def test_update_task_form_unknown_removal(client: TestClient, task_with_attachment: dict, storage: AttachmentStorage):
    before = files_on_disk(storage)
    response = client.patch(
        f"/tasks/{task_with_attachment['id']}/form",
        data={"remove_attachments": "ghost.pdf"},
        files=[("attachments", ("report.pdf", b"%PDF", "application/pdf"))],
    )
    assert response.status_code == HTTPStatus.NOT_FOUND
    assert files_on_disk(storage) == before

def test_update_task_form_stale_version(client: TestClient, task_with_attachment: dict, storage: AttachmentStorage):
    before = files_on_disk(storage)
    response = client.patch(
        f"/tasks/{task_with_attachment['id']}/form",
        data={"expected_version": "5"},
        files=[("attachments", ("report.pdf", b"%PDF", "application/pdf"))],
    )
    assert response.status_code == HTTPStatus.CONFLICT
    assert files_on_disk(storage) == before


# --- time entries ---

def test_log_time(client: TestClient, db: Session, task_data_factory):
    task = create_task(db, task_data_factory())
    response = client.post(f"/tasks/{task.id}/time-entries", json={"hours": 1.5})
    assert response.status_code == HTTPStatus.OK
    assert response.json()["actual_hours"] == 1.5

def test_log_time_rejects_non_positive_hours(client: TestClient, db: Session, task_data_factory):
    task = create_task(db, task_data_factory())
    response = client.post(f"/tasks/{task.id}/time-entries", json={"hours": 0})
    assert response.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


# --- GET /tasks/{id}/attachments/{filename} ---

def test_download_attachment(client: TestClient, task_with_attachment: dict):
    filename = task_with_attachment["attachments"][0]["filename"]
    response = client.get(f"/tasks/{task_with_attachment['id']}/attachments/{filename}")

    assert response.status_code == HTTPStatus.OK
    assert response.content == PDF_BYTES
    assert response.headers["content-type"] == "application/pdf"
    assert response.headers["cache-control"] == "public, max-age=31536000, immutable"
    assert 'filename="invoice.pdf"' in response.headers["content-disposition"]
    assert response.headers["content-disposition"].startswith("attachment;")

def test_download_unknown_attachment(client: TestClient, task_with_attachment: dict):
    response = client.get(f"/tasks/{task_with_attachment['id']}/attachments/ghost.pdf")
    assert response.status_code == HTTPStatus.NOT_FOUND

def test_download_attachment_missing_on_disk(client: TestClient, task_with_attachment: dict, storage: AttachmentStorage):
    filename = task_with_attachment["attachments"][0]["filename"]
    (storage.upload_dir / filename).unlink()

    response = client.get(f"/tasks/{task_with_attachment['id']}/attachments/{filename}")
    assert response.status_code == HTTPStatus.GONE

def test_download_for_unknown_task(client: TestClient):
    response = client.get("/tasks/999999/attachments/anything.pdf")
    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.json()["detail"] == "Task not found"

def test_content_disposition_escapes_non_ascii_names():
    original_name = 'отчёт "Q1".pdf'
    header = content_disposition(original_name)
    assert header.startswith('attachment; filename="Q1.pdf";')
    assert "filename*=UTF-8''" + quote(original_name, safe="") in header


# --- DELETE /tasks/{id}/attachments/{filename} ---

def test_delete_attachment(client: TestClient, task_with_attachment: dict, storage: AttachmentStorage):
    filename = task_with_attachment["attachments"][0]["filename"]
    response = client.delete(f"/tasks/{task_with_attachment['id']}/attachments/{filename}")

    assert response.status_code == HTTPStatus.OK
    assert response.json()["attachments"] == []
    assert files_on_disk(storage) == set()

    response = client.get(f"/tasks/{task_with_attachment['id']}/attachments/{filename}")
    assert response.status_code == HTTPStatus.NOT_FOUND

def test_delete_unknown_attachment(client: TestClient, task_with_attachment: dict):
    response = client.delete(f"/tasks/{task_with_attachment['id']}/attachments/ghost.pdf")
    assert response.status_code == HTTPStatus.NOT_FOUND
    task = client.get(f"/tasks/{task_with_attachment['id']}").json()
    assert len(task["attachments"]) == 1


# --- DELETE /tasks/{id} ---

def test_delete_task_removes_files(client: TestClient, task_with_attachment: dict, storage: AttachmentStorage):
    task_id = task_with_attachment["id"]
    response = client.delete(f"/tasks/{task_id}")

    assert response.status_code == HTTPStatus.OK
    assert response.json() == {"result": task_id, "detail": "Task deleted"}
    assert files_on_disk(storage) == set()
    assert client.get(f"/tasks/{task_id}").status_code == HTTPStatus.NOT_FOUND

def test_delete_task_with_file_already_gone(client: TestClient, task_with_attachment: dict, storage: AttachmentStorage):
    filename = task_with_attachment["attachments"][0]["filename"]
    Path(storage.upload_dir / filename).unlink()
    response = client.delete(f"/tasks/{task_with_attachment['id']}")
    assert response.status_code == HTTPStatus.OK

def test_delete_task_not_found(client: TestClient):
    assert client.delete("/tasks/999999").status_code == HTTPStatus.NOT_FOUND
