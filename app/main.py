# app/main.py

import os
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Импортируем роутеры (production way)
from app.api.budget_entry import router as budget_entry_router
from app.api.cloud_backup import router as cloud_backup_router
from app.api.contract import router as contract_router
from app.api.dashboard import router as dashboard_router
from app.api.development_project import router as development_project_router
from app.api.project import router as project_router
from app.api.staff_member import router as staff_member_router
from app.api.task import router as task_router

from app.core.config import configure_logging
from app.core.settings import settings
from app.core.exceptions import (
    AttachmentNotFound,
    AttachmentValidationError,
    FileMissingOnDisk,
    FileTooLarge,
    StorageWriteFailed,
    TaskConcurrencyConflict,
    UnsupportedFileType,
)
from app.database import init_db

# Логирование
configure_logging()
logger = logging.getLogger("OpsDash.App")

app = FastAPI(
    title="Operations Dashboard API",
    version="1.0.0",
    description="Staff, tasks with file attachments, projects, contracts, budget and cloud backups",
)

# Middlewares
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Роутеры
app.include_router(budget_entry_router)
app.include_router(cloud_backup_router)
app.include_router(contract_router)
app.include_router(dashboard_router)
app.include_router(development_project_router)
app.include_router(project_router)
app.include_router(staff_member_router)
app.include_router(task_router)

# Health check & root
@app.get("/", tags=["Health"])
def root():
    return {"status": "Operations Dashboard API is running!"}

@app.get("/health", tags=["Health"])
def health():
    return {"ok": True}

@app.on_event("startup")
async def startup_event():
    init_db()
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    logger.info(f"Starting Operations Dashboard API (uploads in {settings.UPLOAD_DIR})")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Stopping Operations Dashboard API")

# Ошибки подсистемы вложений

@app.exception_handler(AttachmentValidationError)
async def attachment_validation_exception_handler(request: Request, exc: AttachmentValidationError):
    if isinstance(exc, FileTooLarge):
        status_code = 413
    elif isinstance(exc, UnsupportedFileType):
        status_code = 415
    else:
        status_code = 400
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})

@app.exception_handler(AttachmentNotFound)
async def attachment_not_found_exception_handler(request: Request, exc: AttachmentNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})

@app.exception_handler(FileMissingOnDisk)
async def file_missing_exception_handler(request: Request, exc: FileMissingOnDisk):
    return JSONResponse(status_code=410, content={"detail": str(exc)})

@app.exception_handler(StorageWriteFailed)
async def storage_write_exception_handler(request: Request, exc: StorageWriteFailed):
    logger.error(f"Storage write failed for {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Failed to store uploaded file."})

@app.exception_handler(TaskConcurrencyConflict)
async def task_conflict_exception_handler(request: Request, exc: TaskConcurrencyConflict):
    return JSONResponse(status_code=409, content={"detail": str(exc)})

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", 8000)),
        reload=bool(os.getenv("DEBUG", False))
    )
