"""Integration tests for employee profiles."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from pto_tracker.models.enums import Role

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient

    from pto_tracker.models import EmployeeProfile, User


async def test_create_employee(
    async_client: AsyncClient,
    manager: User,
    manager_headers: dict[str, str],
    make_user: Callable[..., Awaitable[User]],
) -> None:
    user = await make_user(name="Eden Employee")
    resp = await async_client.post(
        "/employees",
        json={
            "user_id": str(user.id),
            "title": "Frontend Dev",
            "department": "Engineering",
            "start_date": "2024-03-01",
            "manager_id": str(manager.id),
        },
        headers=manager_headers,
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["user_id"] == str(user.id)
    assert data["name"] == "Eden Employee"
    assert data["role"] == "EMPLOYEE"
    assert data["start_date"] == "2024-03-01"
    assert data["manager"] == {"id": str(manager.id), "name": manager.name, "email": manager.email}
    assert data["team"] is None


async def test_create_employee_requires_manager_role(
    async_client: AsyncClient,
    make_user: Callable[..., Awaitable[User]],
    auth_headers: Callable[[uuid.UUID, Role], dict[str, str]],
) -> None:
    user = await make_user()
    resp = await async_client.post(
        "/employees", json={"user_id": str(user.id)}, headers=auth_headers(user.id, Role.EMPLOYEE)
    )
    assert resp.status_code == 403


async def test_create_employee_unknown_user(async_client: AsyncClient, manager_headers: dict[str, str]) -> None:
    resp = await async_client.post("/employees", json={"user_id": str(uuid.uuid4())}, headers=manager_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid reference"


async def test_create_employee_unknown_team(
    async_client: AsyncClient, manager_headers: dict[str, str], make_user: Callable[..., Awaitable[User]]
) -> None:
    user = await make_user()
    resp = await async_client.post(
        "/employees", json={"user_id": str(user.id), "team_id": str(uuid.uuid4())}, headers=manager_headers
    )
    assert resp.status_code == 400


async def test_one_profile_per_user(
    async_client: AsyncClient, manager_headers: dict[str, str], make_employee: Callable[..., Awaitable[EmployeeProfile]]
) -> None:
    employee = await make_employee()
    resp = await async_client.post("/employees", json={"user_id": str(employee.user_id)}, headers=manager_headers)
    assert resp.status_code == 409


async def test_list_employees_filters(
    async_client: AsyncClient,
    manager: User,
    manager_headers: dict[str, str],
    make_employee: Callable[..., Awaitable[EmployeeProfile]],
) -> None:
    managed = await make_employee(manager_id=manager.id)
    await make_employee()

    resp = await async_client.get("/employees", headers=manager_headers)
    assert resp.json()["total"] == 2

    resp = await async_client.get("/employees", params={"manager_id": str(manager.id)}, headers=manager_headers)
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == str(managed.id)

    resp = await async_client.get("/employees", params={"team_id": str(uuid.uuid4())}, headers=manager_headers)
    assert resp.json()["total"] == 0


async def test_get_employee_not_found(async_client: AsyncClient, manager_headers: dict[str, str]) -> None:
    resp = await async_client.get(f"/employees/{uuid.uuid4()}", headers=manager_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Employee not found"


async def test_update_employee_clears_explicit_nulls(
    async_client: AsyncClient,
    manager: User,
    manager_headers: dict[str, str],
    make_employee: Callable[..., Awaitable[EmployeeProfile]],
) -> None:
    employee = await make_employee(manager_id=manager.id)
    resp = await async_client.patch(
        f"/employees/{employee.id}",
        json={"title": "Staff Engineer", "manager_id": None},
        headers=manager_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["title"] == "Staff Engineer"
    assert data["manager"] is None
    assert data["department"] == "Engineering"


async def test_update_employee_unknown_manager(
    async_client: AsyncClient,
    manager_headers: dict[str, str],
    make_employee: Callable[..., Awaitable[EmployeeProfile]],
) -> None:
    employee = await make_employee()
    resp = await async_client.patch(
        f"/employees/{employee.id}", json={"manager_id": str(uuid.uuid4())}, headers=manager_headers
    )
    assert resp.status_code == 400


async def test_delete_employee(
    async_client: AsyncClient,
    manager_headers: dict[str, str],
    make_employee: Callable[..., Awaitable[EmployeeProfile]],
) -> None:
    employee = await make_employee()
    resp = await async_client.delete(f"/employees/{employee.id}", headers=manager_headers)
    assert resp.status_code == 204
    resp = await async_client.get(f"/employees/{employee.id}", headers=manager_headers)
    assert resp.status_code == 404
