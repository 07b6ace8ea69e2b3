#app/api/task.py
import logging
from datetime import date
from typing import List, Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.schemas.task import TaskCreate, TaskRead, TaskUpdate, TaskShort, TimeEntry
from app.schemas.attachment import UploadedFile
from app.schemas.response import SuccessResponse
from app.crud.task import (
    create_task,
    get_task,
    get_all_tasks,
    update_task,
    update_task_with_files,
    add_time_entry,
    get_task_attachment,
    remove_task_attachment,
    delete_task,
)
from app.dependencies import get_db, get_attachment_storage
from app.services.attachment_storage import AttachmentStorage
from app.core.exceptions import BaseAppException, TaskNotFound, TaskValidationError

logger = logging.getLogger("OpsDash.TasksAPI")

router = APIRouter(prefix="/tasks", tags=["Tasks"])

# Вложения неизменяемы, имя в хранилище уникально
ATTACHMENT_CACHE_CONTROL = "public, max-age=31536000, immutable"

def _read_uploads(files: Optional[List[UploadFile]], max_file_size: int) -> List[UploadedFile]:
    # На один байт больше лимита: этого хватает, чтобы storage отклонил файл как FileTooLarge
    uploads = []
    for upload in files or []:
        content = upload.file.read(max_file_size + 1)
        uploads.append(UploadedFile(
            content=content,
            size=len(content),
            mime_type=upload.content_type or "",
            original_name=upload.filename or "",
        ))
    return uploads

def _split_filenames(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [name.strip() for name in raw.split(",") if name.strip()]

def content_disposition(original_name: str) -> str:
    """
    attachment; filename="..."; filename*=UTF-8''... (RFC 6266 / RFC 5987).
    """
    fallback = "".join(
        ch for ch in original_name if 32 <= ord(ch) < 127 and ch not in '"\\'
    ).strip() or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(original_name, safe='')}"

@router.get("/", response_model=List[TaskShort])
def list_tasks(
    task_status: Optional[str] = Query(None, alias="status"),
    assignee_id: Optional[int] = Query(None),
    overdue: bool = Query(False),
    db: Session = Depends(get_db),
):
    """
    Получить список задач с фильтрацией.
    """
    filters = {"status": task_status, "assignee_id": assignee_id, "overdue": overdue or None}
    filters = {k: v for k, v in filters.items() if v is not None}
    return get_all_tasks(db, filters=filters)

@router.get("/{task_id}", response_model=TaskRead)
def get_one_task(task_id: int, db: Session = Depends(get_db)):
    """
    Получить задачу по ID.
    """
    try:
        return get_task(db, task_id)
    except TaskNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")

@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_new_task(data: TaskCreate, db: Session = Depends(get_db)):
    """
    Создать задачу из JSON (без файлов).
    """
    try:
        return create_task(db, data.model_dump())
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating task: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error during task creation.")

@router.post("/form", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_new_task_with_files(
    title: str = Form(...),
    assignee_id: int = Form(...),
    due_date: date = Form(...),
    description: Optional[str] = Form(None),
    due_time: Optional[str] = Form(None),
    estimated_hours: Optional[float] = Form(None),
    actual_hours: Optional[float] = Form(None),
    task_status: Optional[str] = Form(None, alias="status"),
    attachments: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    storage: AttachmentStorage = Depends(get_attachment_storage),
):
    """
    Создать задачу из multipart-формы вместе с файлами. Один невалидный файл отклоняет весь запрос.
    """
    data = {
        "title": title,
        "assignee_id": assignee_id,
        "due_date": due_date,
        "description": description,
        "due_time": due_time,
        "estimated_hours": estimated_hours,
        "actual_hours": actual_hours,
        "status": task_status,
    }
    try:
        return create_task(db, data, storage=storage, files=_read_uploads(attachments, storage.max_file_size))
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Error creating task with attachments: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error during task creation.")

@router.patch("/{task_id}", response_model=TaskRead)
def update_one_task(task_id: int, data: TaskUpdate, db: Session = Depends(get_db)):
    """
    Обновить поля задачи (JSON).
    """
    try:
        return update_task(db, task_id, data.model_dump(exclude_unset=True))
    except TaskNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error updating task {task_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An internal error occurred.")

@router.patch("/{task_id}/form", response_model=TaskRead)
def update_one_task_with_files(
    task_id: int,
    title: Optional[str] = Form(None),
    assignee_id: Optional[int] = Form(None),
    due_date: Optional[date] = Form(None),
    description: Optional[str] = Form(None),
    due_time: Optional[str] = Form(None),
    estimated_hours: Optional[float] = Form(None),
    actual_hours: Optional[float] = Form(None),
    task_status: Optional[str] = Form(None, alias="status"),
    remove_attachments: Optional[str] = Form(None, description="Имена файлов через запятую"),
    expected_version: Optional[int] = Form(None),
    attachments: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    storage: AttachmentStorage = Depends(get_attachment_storage),
):
    """
    Обновить задачу из multipart-формы: поля, новые файлы и удаление старых одним запросом.
    """
    data = {
        "title": title,
        "assignee_id": assignee_id,
        "due_date": due_date,
        "description": description,
        "due_time": due_time,
        "estimated_hours": estimated_hours,
        "actual_hours": actual_hours,
        "status": task_status,
        "expected_version": expected_version,
    }
    data = {k: v for k, v in data.items() if v is not None}
    try:
        return update_task_with_files(
            db,
            storage,
            task_id,
            data,
            files=_read_uploads(attachments, storage.max_file_size),
            remove_filenames=_split_filenames(remove_attachments),
        )
    except TaskNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error updating task {task_id} with attachments: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An internal error occurred.")

@router.post("/{task_id}/time-entries", response_model=TaskRead)
def log_time(task_id: int, entry: TimeEntry, db: Session = Depends(get_db)):
    """
    Добавить затраченное время.
    """
    try:
        return add_time_entry(db, task_id, entry.hours)
    except TaskNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    except TaskValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{task_id}", response_model=SuccessResponse)
def delete_one_task(
    task_id: int,
    db: Session = Depends(get_db),
    storage: AttachmentStorage = Depends(get_attachment_storage),
):
    """
    Удалить задачу вместе с файлами вложений.
    """
    try:
        delete_task(db, storage, task_id)
        return SuccessResponse(result=task_id, detail="Task deleted")
    except TaskNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    except BaseAppException:
        raise
    except Exception as e:
        logger.error(f"Error deleting task {task_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error during task deletion.")

@router.get("/{task_id}/attachments/{filename}")
def download_attachment(
    task_id: int,
    filename: str,
    db: Session = Depends(get_db),
    storage: AttachmentStorage = Depends(get_attachment_storage),
):
    """
    Скачать файл вложения. AttachmentNotFound / FileMissingOnDisk обрабатываются в app.main.
    """
    try:
        retrieved = get_task_attachment(db, storage, task_id, filename)
    except TaskNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    return Response(
        content=retrieved.content,
        media_type=retrieved.mime_type,
        headers={
            "Content-Disposition": content_disposition(retrieved.original_name),
            "Cache-Control": ATTACHMENT_CACHE_CONTROL,
        },
    )

@router.delete("/{task_id}/attachments/{filename}", response_model=TaskRead)
def delete_attachment(
    task_id: int,
    filename: str,
    db: Session = Depends(get_db),
    storage: AttachmentStorage = Depends(get_attachment_storage),
):
    """
    Удалить одно вложение. Возвращает задачу с обновлённым списком вложений.
    """
    try:
        return remove_task_attachment(db, storage, task_id, filename)
    except TaskNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
