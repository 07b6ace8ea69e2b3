#app/api/development_project.py
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.schemas.development_project import (
    DevelopmentProjectCreate,
    DevelopmentProjectRead,
    DevelopmentProjectUpdate,
)
from app.schemas.response import SuccessResponse
from app.crud.development_project import (
    create_development_project,
    get_development_project,
    get_all_development_projects,
    update_development_project,
    delete_development_project,
)
from app.dependencies import get_db
from app.core.exceptions import DevelopmentProjectNotFound, DevelopmentProjectValidationError

router = APIRouter(prefix="/development-projects", tags=["Development Projects"])
logger = logging.getLogger("OpsDash.DevelopmentProjectsAPI")

@router.get("/", response_model=List[DevelopmentProjectRead])
def list_development_projects(
    project_status: Optional[str] = Query(None, alias="status"),
    lead_id: Optional[int] = Query(None, alias="lead"),
    name: Optional[str] = Query(None),
    technology: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Получить список проектов разработки с фильтрацией.
    """
    filters = {
        "status": project_status,
        "lead_id": lead_id,
        "name": name,
        "technology": technology,
    }
    filters = {k: v for k, v in filters.items() if v is not None}
    return get_all_development_projects(db, filters=filters)

@router.get("/{project_id}", response_model=DevelopmentProjectRead)
def get_one_development_project(project_id: int, db: Session = Depends(get_db)):
    try:
        return get_development_project(db, project_id)
    except DevelopmentProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Development project not found")

@router.post("/", response_model=DevelopmentProjectRead, status_code=status.HTTP_201_CREATED)
def create_new_development_project(data: DevelopmentProjectCreate, db: Session = Depends(get_db)):
    """
    Создать проект разработки.
    """
    try:
        return create_development_project(db, data.model_dump())
    except DevelopmentProjectValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error in create_new_development_project: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred while creating the development project.")

@router.patch("/{project_id}", response_model=DevelopmentProjectRead)
def update_one_development_project(project_id: int, data: DevelopmentProjectUpdate, db: Session = Depends(get_db)):
    """
    Обновить проект разработки.
    """
    try:
        return update_development_project(db, project_id, data.model_dump(exclude_unset=True))
    except DevelopmentProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Development project not found")
    except DevelopmentProjectValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Unexpected error updating development project {project_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="An unexpected error occurred while updating the development project.")

@router.delete("/{project_id}", response_model=SuccessResponse)
def delete_one_development_project(project_id: int, db: Session = Depends(get_db)):
    try:
        delete_development_project(db, project_id)
        return SuccessResponse(result=project_id, detail="Development project deleted")
    except DevelopmentProjectNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Development project not found")
