import pytest
from sqlalchemy.orm import Session
from datetime import date, timedelta

from app.crud.project import (
    create_project,
    get_project,
    get_all_projects,
    update_project,
    delete_project,
)
from app.core.exceptions import ProjectNotFound, ProjectValidationError


@pytest.fixture
def project_data_factory(staff_member):
    def _project_data(**overrides) -> dict:
        data = {
            "name": "Network upgrade",
            "description": "Replace switches on floor 2",
            "manager_id": staff_member.id,
            "status": "Active",
            "budget": 25000.0,
            "start_date": date.today(),
            "end_date": date.today() + timedelta(days=60),
        }
        data.update(overrides)
        return data
    return _project_data

def test_create_project_success(db: Session, project_data_factory):
    project = create_project(db, project_data_factory())
    assert project.id is not None
    assert project.status == "Active"
    assert project.duration_days == 60
    assert project.manager.id == project.manager_id

def test_create_project_defaults_status(db: Session, project_data_factory):
    data = project_data_factory()
    del data["status"]
    assert create_project(db, data).status == "Not Started"

def test_create_project_missing_fields(db: Session, project_data_factory):
    with pytest.raises(ProjectValidationError, match="Name, manager, start date, and end date are required."):
        create_project(db, project_data_factory(end_date=None))

def test_create_project_end_before_start(db: Session, project_data_factory):
    with pytest.raises(ProjectValidationError, match="End date must be after start date."):
        create_project(db, project_data_factory(end_date=date.today() - timedelta(days=1)))

def test_create_project_unknown_manager(db: Session, project_data_factory):
    with pytest.raises(ProjectValidationError, match="Manager staff member not found."):
        create_project(db, project_data_factory(manager_id=999999))

def test_create_project_invalid_status(db: Session, project_data_factory):
    with pytest.raises(ProjectValidationError, match="Invalid status value"):
        create_project(db, project_data_factory(status="Paused"))

def test_get_all_projects_filters(db: Session, project_data_factory):
    active = create_project(db, project_data_factory(name="Helpdesk rollout"))
    held = create_project(db, project_data_factory(name="Server room", status="On Hold"))

    ids = [p.id for p in get_all_projects(db, {"status": "On Hold"})]
    assert held.id in ids and active.id not in ids

    ids = [p.id for p in get_all_projects(db, {"name": "helpdesk"})]
    assert ids == [active.id]

def test_update_project_checks_dates(db: Session, project_data_factory):
    project = create_project(db, project_data_factory())
    with pytest.raises(ProjectValidationError, match="End date must be after start date."):
        update_project(db, project.id, {"end_date": project.start_date - timedelta(days=1)})

    updated = update_project(db, project.id, {"status": "Completed", "budget": 30000})
    assert updated.status == "Completed"
    assert updated.budget == 30000

def test_delete_project(db: Session, project_data_factory):
    project = create_project(db, project_data_factory())
    delete_project(db, project.id)
    with pytest.raises(ProjectNotFound):
        get_project(db, project.id)
