#app/crud/task.py
import re
import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.exc import SQLAlchemyError
from app.models.task import Task
from app.models.staff_member import StaffMember
from app.core.constants import TASK_STATUSES, TASK_STATUS_DONE, TASK_STATUS_TODO, MAX_TASK_HOURS
from app.core.exceptions import (
    BaseAppException,
    TaskNotFound,
    TaskValidationError,
    TaskConcurrencyConflict,
)
from app.schemas.attachment import AttachmentMetadata, RetrievedAttachment, UploadedFile
from app.services.attachment_storage import AttachmentStorage, normalize_attachments

logger = logging.getLogger("OpsDash.Tasks")

DUE_TIME_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")

TASK_FIELDS = (
    "title", "description", "assignee_id", "due_date", "due_time",
    "estimated_hours", "actual_hours", "status",
)

def _dump_attachments(attachments: Iterable[AttachmentMetadata]) -> list:
    # JSON-колонка: новый список, а не мутация старого
    return [item.model_dump(mode="json") for item in attachments]

def _validate_task_fields(db: Session, data: dict) -> dict:
    """
    Проверяет и нормализует переданные поля задачи. Возвращает очищенный словарь.
    """
    cleaned = dict(data)

    if "title" in cleaned:
        title = (cleaned["title"] or "").strip()
        if not title:
            raise TaskValidationError("Title is required.")
        if len(title) > 255:
            raise TaskValidationError("Title cannot exceed 255 characters.")
        cleaned["title"] = title

    if "description" in cleaned and cleaned["description"] is not None:
        cleaned["description"] = cleaned["description"].strip()

    if "assignee_id" in cleaned:
        if cleaned["assignee_id"] is None:
            raise TaskValidationError("Assignee is required.")
        if not db.get(StaffMember, cleaned["assignee_id"]):
            raise TaskValidationError("Assignee staff member not found.")

    if "due_date" in cleaned:
        due_date = cleaned["due_date"]
        if due_date is None:
            raise TaskValidationError("Due date is required.")
        if not isinstance(due_date, date):
            try:
                cleaned["due_date"] = date.fromisoformat(str(due_date))
            except ValueError:
                raise TaskValidationError("Invalid due date format. Use YYYY-MM-DD.")

    if cleaned.get("due_time"):
        if not DUE_TIME_RE.match(cleaned["due_time"]):
            raise TaskValidationError("Due time must be in HH:MM format (24-hour).")
    elif "due_time" in cleaned:
        cleaned["due_time"] = None

    for field in ("estimated_hours", "actual_hours"):
        value = cleaned.get(field)
        if value is not None and not 0 <= value <= MAX_TASK_HOURS:
            label = field.replace("_", " ").capitalize()
            raise TaskValidationError(f"{label} must be between 0 and {MAX_TASK_HOURS}.")

    if "status" in cleaned:
        if cleaned["status"] is None:
            cleaned["status"] = TASK_STATUS_TODO
        elif cleaned["status"] not in TASK_STATUSES:
            raise TaskValidationError(f"Invalid status value. Allowed: {', '.join(TASK_STATUSES)}")

    return cleaned

def _check_version(task: Task, expected_version: Optional[int]) -> None:
    if expected_version is not None and expected_version != task.version:
        raise TaskConcurrencyConflict(
            f"Task {task.id} is at version {task.version}, request was based on version {expected_version}."
        )

def _commit(db: Session, task_id, action: str) -> None:
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Concurrent modification while {action} task {task_id}: {e}")
        raise TaskConcurrencyConflict(f"Task {task_id} was modified by another request. Reload and retry.")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed {action} task {task_id}: {e}")
        raise TaskValidationError(f"Database error while {action} task.")

def create_task(
    db: Session,
    data: dict,
    storage: Optional[AttachmentStorage] = None,
    files: Sequence[UploadedFile] = (),
) -> Task:
    """
    Создать задачу. Файлы (если есть) пишутся на диск до вставки строки;
    если вставка не удалась, записанные файлы удаляются.
    """
    for field in ("title", "assignee_id", "due_date"):
        if not data.get(field):
            raise TaskValidationError("Title, assignee, and due date are required.")
    cleaned = _validate_task_fields(db, {k: v for k, v in data.items() if k in TASK_FIELDS})

    stored: List[AttachmentMetadata] = []
    if files:
        if storage is None:
            raise TaskValidationError("Attachment storage is not configured.")
        stored = storage.store_batch(files)

    task = Task(
        title=cleaned["title"],
        description=cleaned.get("description"),
        assignee_id=cleaned["assignee_id"],
        due_date=cleaned["due_date"],
        due_time=cleaned.get("due_time"),
        estimated_hours=cleaned.get("estimated_hours"),
        actual_hours=cleaned.get("actual_hours"),
        status=cleaned.get("status") or TASK_STATUS_TODO,
        attachments=_dump_attachments(stored),
    )
    db.add(task)
    try:
        _commit(db, None, "creating")
    except BaseAppException:
        if stored:
            storage.delete_files(stored)
        raise
    db.refresh(task)
    logger.info(f"Created task {task.id} for assignee {task.assignee_id} with {len(stored)} attachment(s)")
    return task

def get_task(db: Session, task_id: int) -> Task:
    """
    Получить задачу по ID.
    """
    task = db.get(Task, task_id)
    if not task:
        raise TaskNotFound(f"Task {task_id} not found.")
    return task

def get_all_tasks(db: Session, filters: dict = None) -> List[Task]:
    """
    Список задач: фильтры status, assignee_id, overdue. Сортировка по сроку, затем новые сверху.
    """
    filters = filters or {}
    query = db.query(Task)

    if filters.get("status") in TASK_STATUSES:
        query = query.filter(Task.status == filters["status"])
    if "assignee_id" in filters:
        query = query.filter(Task.assignee_id == filters["assignee_id"])
    if filters.get("overdue"):
        query = query.filter(Task.status != TASK_STATUS_DONE, Task.due_date <= date.today())

    tasks = query.order_by(Task.due_date.asc(), Task.created_at.desc(), Task.id.desc()).all()
    if filters.get("overdue"):
        tasks = [t for t in tasks if t.is_overdue]
    return tasks

def update_task(db: Session, task_id: int, data: dict) -> Task:
    """
    Обновить поля задачи (JSON). Вложения меняются только через update_task_with_files.
    """
    task = get_task(db, task_id)
    _check_version(task, data.get("expected_version"))
    cleaned = _validate_task_fields(db, {k: v for k, v in data.items() if k in TASK_FIELDS})

    changes = {}
    for field, value in cleaned.items():
        if getattr(task, field) != value:
            changes[field] = (getattr(task, field), value)
            setattr(task, field, value)

    _commit(db, task_id, "updating")
    db.refresh(task)
    if changes:
        logger.info(f"Updated task {task.id} fields: {changes}")
    else:
        logger.info(f"Update called but no changes for task {task.id}")
    return task

def update_task_with_files(
    db: Session,
    storage: AttachmentStorage,
    task_id: int,
    data: dict,
    files: Sequence[UploadedFile] = (),
    remove_filenames: Sequence[str] = (),
) -> Task:
    """
    Обновить задачу вместе с вложениями одним коммитом.

    Новые файлы пишутся до коммита, старые удаляются с диска после него.
    Если коммит не прошёл, новые файлы удаляются, а старые остаются на месте.
    """
    task = get_task(db, task_id)
    _check_version(task, data.get("expected_version"))
    cleaned = _validate_task_fields(db, {k: v for k, v in data.items() if k in TASK_FIELDS})

    previous = normalize_attachments(task.attachments)
    delta = storage.replace_batch(previous, files, remove_filenames, apply_removals=False)

    for field, value in cleaned.items():
        setattr(task, field, value)
    task.attachments = _dump_attachments(delta.attachments)

    try:
        _commit(db, task_id, "updating")
    except BaseAppException:
        storage.delete_files(delta.added)
        raise

    # Ошибки удаления только логируются внутри хранилища
    storage.delete_files([item for item in previous if item.filename in delta.removed])
    db.refresh(task)
    logger.info(
        f"Updated task {task.id}: +{len(delta.added)} / -{len(delta.removed)} attachment(s)"
    )
    return task

def add_time_entry(db: Session, task_id: int, hours: float) -> Task:
    """
    Добавить затраченные часы к задаче.
    """
    task = get_task(db, task_id)
    if hours <= 0:
        raise TaskValidationError("Hours must be positive.")
    total = (task.actual_hours or 0) + hours
    if total > MAX_TASK_HOURS:
        raise TaskValidationError(f"Actual hours cannot exceed {MAX_TASK_HOURS}.")
    task.actual_hours = total
    _commit(db, task_id, "logging time for")
    db.refresh(task)
    logger.info(f"Logged {hours}h on task {task_id} (total {total}h)")
    return task

def get_task_attachment(db: Session, storage: AttachmentStorage, task_id: int, filename: str) -> RetrievedAttachment:
    task = get_task(db, task_id)
    return storage.retrieve(task.attachments, filename)

def remove_task_attachment(db: Session, storage: AttachmentStorage, task_id: int, filename: str) -> Task:
    """
    Удалить одно вложение. Сначала фиксируется укороченный список, затем удаляется файл:
    при ошибке коммита файл остаётся на месте. Запись убирается из задачи,
    даже если файл удалить не удалось.
    """
    task = get_task(db, task_id)
    current = normalize_attachments(task.attachments)
    meta = storage.find(current, filename)
    task.attachments = _dump_attachments([item for item in current if item.filename != filename])
    _commit(db, task_id, "removing attachment from")
    db.refresh(task)
    result = storage.delete_file(meta)
    if not result.ok:
        logger.warning(f"Attachment {filename} detached from task {task_id}, file left on disk: {result.error}")
    else:
        logger.info(f"Removed attachment {filename} from task {task_id}")
    return task

def delete_task(db: Session, storage: AttachmentStorage, task_id: int) -> None:
    """
    Удалить задачу и файлы всех её вложений. Ошибки удаления файлов не блокируют удаление задачи.
    """
    task = get_task(db, task_id)
    attachments = normalize_attachments(task.attachments)
    db.delete(task)
    _commit(db, task_id, "deleting")
    storage.remove_all(attachments)
    logger.info(f"Deleted task {task_id} with {len(attachments)} attachment(s)")
