"""Integration tests for PTO requests and their status transitions."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlmodel import col

from pto_tracker.models.audit import AuditLog
from pto_tracker.models.enums import Role

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from pto_tracker.models import EmployeeProfile, User


@pytest.fixture
async def employee(make_employee: Callable[..., Awaitable[EmployeeProfile]]) -> EmployeeProfile:
    return await make_employee()


@pytest.fixture
def owner_headers(employee: EmployeeProfile) -> dict[str, str]:
    return {"X-User-Id": str(employee.user_id), "X-Role": Role.EMPLOYEE.value}


def _payload(employee_id: uuid.UUID, **overrides: object) -> dict:  # type: ignore[type-arg]
    return {
        "employee_id": str(employee_id),
        "start_date": "2025-06-02T09:00:00Z",
        "end_date": "2025-06-02T17:00:00Z",
        "hours": 8,
        "note": "Dentist",
        **overrides,
    }


async def _create(
    client: AsyncClient, headers: dict[str, str], employee_id: uuid.UUID, **overrides: object
) -> dict:  # type: ignore[type-arg]
    resp = await client.post("/requests", json=_payload(employee_id, **overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Create / read
# ---------------------------------------------------------------------------


async def test_create_request_defaults_to_draft(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    data = await _create(async_client, owner_headers, employee.id)
    assert data["status"] == "DRAFT"
    assert data["hours"] == 8
    assert data["approver"] is None
    assert data["note"] == "Dentist"
    assert data["start_date"].startswith("2025-06-02T09:00:00")


async def test_create_request_submitted(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    data = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    assert data["status"] == "SUBMITTED"


@pytest.mark.parametrize(
    "overrides",
    [
        {"end_date": "2025-06-02T09:00:00Z"},
        {"end_date": "2025-06-01T09:00:00Z"},
        {"hours": 0},
        {"hours": -4},
        {"status": "APPROVED"},
        {"status": "CANCELLED"},
    ],
)
async def test_create_request_validation(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str], overrides: dict[str, object]
) -> None:
    resp = await async_client.post("/requests", json=_payload(employee.id, **overrides), headers=owner_headers)
    assert resp.status_code == 422


async def test_create_request_unknown_employee(async_client: AsyncClient, owner_headers: dict[str, str]) -> None:
    resp = await async_client.post("/requests", json=_payload(uuid.uuid4()), headers=owner_headers)
    assert resp.status_code == 400


async def test_get_request_not_found(async_client: AsyncClient, owner_headers: dict[str, str]) -> None:
    resp = await async_client.get(f"/requests/{uuid.uuid4()}", headers=owner_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Request not found"


async def test_list_requests_filters(
    async_client: AsyncClient,
    employee: EmployeeProfile,
    owner_headers: dict[str, str],
    make_employee: Callable[..., Awaitable[EmployeeProfile]],
) -> None:
    other = await make_employee()
    await _create(async_client, owner_headers, employee.id)
    await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    await _create(
        async_client,
        owner_headers,
        employee.id,
        start_date="2024-12-30T09:00:00Z",
        end_date="2024-12-30T17:00:00Z",
    )
    await _create(async_client, owner_headers, other.id)

    resp = await async_client.get("/requests", params={"employee_id": str(employee.id)}, headers=owner_headers)
    assert resp.json()["total"] == 3

    resp = await async_client.get("/requests", params={"status": "SUBMITTED"}, headers=owner_headers)
    assert resp.json()["total"] == 1

    resp = await async_client.get(
        "/requests", params={"employee_id": str(employee.id), "year": 2025}, headers=owner_headers
    )
    assert resp.json()["total"] == 2

    resp = await async_client.get("/requests", params={"status": "BOGUS"}, headers=owner_headers)
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------


async def test_update_request(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    resp = await async_client.patch(
        f"/requests/{created['id']}",
        json={"end_date": "2025-06-03T17:00:00Z", "hours": 16, "note": None},
        headers=owner_headers,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["hours"] == 16
    assert data["end_date"].startswith("2025-06-03T17:00:00")
    assert data["note"] is None
    assert data["status"] == "DRAFT"


async def test_update_request_dates_checked_against_stored_values(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    resp = await async_client.patch(
        f"/requests/{created['id']}", json={"start_date": "2025-06-05T09:00:00Z"}, headers=owner_headers
    )
    assert resp.status_code == 400


async def test_update_ignores_status(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    resp = await async_client.patch(
        f"/requests/{created['id']}", json={"status": "APPROVED"}, headers=owner_headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "DRAFT"


async def test_delete_request_by_owner(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    resp = await async_client.delete(f"/requests/{created['id']}", headers=owner_headers)
    assert resp.status_code == 204
    assert (await async_client.get(f"/requests/{created['id']}", headers=owner_headers)).status_code == 404


async def test_delete_request_by_stranger_forbidden(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    stranger = {"X-User-Id": str(uuid.uuid4()), "X-Role": "EMPLOYEE"}
    resp = await async_client.delete(f"/requests/{created['id']}", headers=stranger)
    assert resp.status_code == 403


async def test_edit_request_by_stranger_forbidden(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    stranger = {"X-User-Id": str(uuid.uuid4()), "X-Role": "EMPLOYEE"}
    resp = await async_client.patch(
        f"/requests/{created['id']}", json={"hours": 0.5, "note": "changed"}, headers=stranger
    )
    assert resp.status_code == 403

    unchanged = (await async_client.get(f"/requests/{created['id']}", headers=owner_headers)).json()
    assert unchanged["hours"] == 8
    assert unchanged["note"] == "Dentist"


async def test_admin_may_edit_request(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str], admin_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    resp = await async_client.patch(f"/requests/{created['id']}", json={"hours": 4}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["hours"] == 4


async def test_create_request_for_another_employee_forbidden(
    async_client: AsyncClient, employee: EmployeeProfile
) -> None:
    stranger = {"X-User-Id": str(uuid.uuid4()), "X-Role": "EMPLOYEE"}
    resp = await async_client.post("/requests", json=_payload(employee.id), headers=stranger)
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Not authorized to create this request"


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


async def test_submit_draft(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    resp = await async_client.post(f"/requests/{created['id']}/submit", headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "SUBMITTED"

    resp = await async_client.post(f"/requests/{created['id']}/submit", headers=owner_headers)
    assert resp.status_code == 400


async def test_submit_by_other_employee_forbidden(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    stranger = {"X-User-Id": str(uuid.uuid4()), "X-Role": "EMPLOYEE"}
    resp = await async_client.post(f"/requests/{created['id']}/submit", headers=stranger)
    assert resp.status_code == 403


async def test_admin_may_submit_for_employee(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str], admin_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    resp = await async_client.post(f"/requests/{created['id']}/submit", headers=admin_headers)
    assert resp.status_code == 200


async def test_approve_submitted(
    async_client: AsyncClient,
    db_session: AsyncSession,
    employee: EmployeeProfile,
    owner_headers: dict[str, str],
    manager: User,
    manager_headers: dict[str, str],
) -> None:
    created = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    resp = await async_client.post(f"/requests/{created['id']}/approve", json={}, headers=manager_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "APPROVED"
    assert data["approver"]["id"] == str(manager.id)
    assert data["note"] == "Dentist"

    result = await db_session.execute(
        select(AuditLog).where(col(AuditLog.entity_id) == uuid.UUID(created["id"]), col(AuditLog.action) == "APPROVE")
    )
    entry = result.scalar_one()
    assert entry.actor_id == manager.id
    assert entry.before_json is not None
    assert entry.before_json["status"] == "SUBMITTED"


async def test_approve_without_body(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str], manager_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    resp = await async_client.post(f"/requests/{created['id']}/approve", headers=manager_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "APPROVED"


async def test_reject_replaces_note(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str], manager_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    resp = await async_client.post(
        f"/requests/{created['id']}/reject", json={"note": "Release week"}, headers=manager_headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "REJECTED"
    assert resp.json()["note"] == "Release week"


async def test_only_submitted_requests_can_be_decided(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str], manager_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    for action in ("approve", "reject"):
        resp = await async_client.post(f"/requests/{created['id']}/{action}", json={}, headers=manager_headers)
        assert resp.status_code == 400


async def test_employee_cannot_approve(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    resp = await async_client.post(f"/requests/{created['id']}/approve", json={}, headers=owner_headers)
    assert resp.status_code == 403


async def test_approver_stored_role_is_checked(
    async_client: AsyncClient,
    employee: EmployeeProfile,
    owner_headers: dict[str, str],
    manager_headers: dict[str, str],
    make_user: Callable[..., Awaitable[User]],
) -> None:
    created = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    plain = await make_user(Role.EMPLOYEE)
    resp = await async_client.post(
        f"/requests/{created['id']}/approve", json={"approver_id": str(plain.id)}, headers=manager_headers
    )
    assert resp.status_code == 403

    spoofed = {"X-User-Id": str(plain.id), "X-Role": "MANAGER"}
    resp = await async_client.post(f"/requests/{created['id']}/approve", json={}, headers=spoofed)
    assert resp.status_code == 403


async def test_cancel(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str], manager_headers: dict[str, str]
) -> None:
    draft = await _create(async_client, owner_headers, employee.id)
    resp = await async_client.post(f"/requests/{draft['id']}/cancel", headers=owner_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "CANCELLED"

    submitted = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    await async_client.post(f"/requests/{submitted['id']}/approve", json={}, headers=manager_headers)
    resp = await async_client.post(f"/requests/{submitted['id']}/cancel", headers=owner_headers)
    assert resp.status_code == 400


async def test_cancel_by_manager_forbidden(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str], manager_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id, status="SUBMITTED")
    resp = await async_client.post(f"/requests/{created['id']}/cancel", headers=manager_headers)
    assert resp.status_code == 403


async def test_cancelled_request_cannot_be_edited(
    async_client: AsyncClient, employee: EmployeeProfile, owner_headers: dict[str, str]
) -> None:
    created = await _create(async_client, owner_headers, employee.id)
    await async_client.post(f"/requests/{created['id']}/cancel", headers=owner_headers)
    resp = await async_client.patch(f"/requests/{created['id']}", json={"hours": 4}, headers=owner_headers)
    assert resp.status_code == 400
