#app/api/project.py
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.schemas.project import ProjectCreate, ProjectRead, ProjectUpdate
from app.schemas.response import SuccessResponse
from app.crud.project import (
    create_project,
    get_project,
    get_all_projects,
    update_project,
    delete_project,
)
from app.dependencies import get_db
from app.core.exceptions import ProjectNotFound, ProjectValidationError

router = APIRouter(prefix="/projects", tags=["Projects"])
logger = logging.getLogger("OpsDash.ProjectsAPI")

@router.get("/", response_model=List[ProjectRead])
def list_projects(
    project_status: Optional[str] = Query(None, alias="status"),
    manager_id: Optional[int] = Query(None),
    name: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Получить список проектов с фильтрацией.
    """
    filters = {
        "status": project_status,
        "manager_id": manager_id,
        "name": name,
        "start_date": start_date,
        "end_date": end_date,
    }
    filters = {k: v for k, v in filters.items() if v is not None}
    return get_all_projects(db, filters=filters)

@router.get("/{project_id}", response_model=ProjectRead)
def get_one_project(project_id: int, db: Session = Depends(get_db)):
    """
    Получить проект по ID.
    """
    try:
        return get_project(db, project_id)
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")

@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
def create_new_project(data: ProjectCreate, db: Session = Depends(get_db)):
    """
    Создать новый проект.
    """
    try:
        return create_project(db, data.model_dump())
    except ProjectValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error in create_new_project: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred while creating the project.")

@router.patch("/{project_id}", response_model=ProjectRead)
def update_one_project(project_id: int, data: ProjectUpdate, db: Session = Depends(get_db)):
    """
    Обновить проект.
    """
    try:
        return update_project(db, project_id, data.model_dump(exclude_unset=True))
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    except ProjectValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error updating project {project_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred while updating the project.")

@router.delete("/{project_id}", response_model=SuccessResponse)
def delete_one_project(project_id: int, db: Session = Depends(get_db)):
    try:
        delete_project(db, project_id)
        return SuccessResponse(result=project_id, detail="Project deleted")
    except ProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
