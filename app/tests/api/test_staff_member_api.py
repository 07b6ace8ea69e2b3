import uuid
from http import HTTPStatus
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.crud.task import create_task


def staff_payload(**overrides) -> dict:
    data = {
        "name": "Sipho Dlamini",
        "position": "Frontend Developer",
        "department": "Software",
        "email": f"sipho.{uuid.uuid4().hex[:6]}@example.com",
    }
    data.update(overrides)
    return data

def test_create_staff_member_api(client: TestClient):
    payload = staff_payload()
    response = client.post("/staff-members/", json=payload)
    assert response.status_code == HTTPStatus.CREATED
    data = response.json()
    assert data["email"] == payload["email"]
    assert data["id"] > 0

def test_create_staff_member_api_duplicate_email(client: TestClient, staff_member):
    response = client.post("/staff-members/", json=staff_payload(email=staff_member.email))
    assert response.status_code == HTTPStatus.CONFLICT

def test_create_staff_member_api_invalid_department(client: TestClient):
    response = client.post("/staff-members/", json=staff_payload(department="Space"))
    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert "Invalid department" in response.json()["detail"]

def test_list_staff_members_api(client: TestClient, staff_member, other_staff_member):
    response = client.get("/staff-members/", params={"department": "Management"})
    assert response.status_code == HTTPStatus.OK
    assert [m["id"] for m in response.json()] == [other_staff_member.id]

def test_update_staff_member_api(client: TestClient, staff_member):
    response = client.patch(f"/staff-members/{staff_member.id}", json={"name": "Lerato M."})
    assert response.status_code == HTTPStatus.OK
    assert response.json()["name"] == "Lerato M."

def test_get_staff_member_api_not_found(client: TestClient):
    assert client.get("/staff-members/999999").status_code == HTTPStatus.NOT_FOUND

def test_delete_staff_member_api_in_use(client: TestClient, db: Session, staff_member, task_data_factory):
    create_task(db, task_data_factory())
    response = client.delete(f"/staff-members/{staff_member.id}")
    assert response.status_code == HTTPStatus.CONFLICT

def test_delete_staff_member_api(client: TestClient, other_staff_member):
    response = client.delete(f"/staff-members/{other_staff_member.id}")
    assert response.status_code == HTTPStatus.OK
    assert response.json()["result"] == other_staff_member.id
