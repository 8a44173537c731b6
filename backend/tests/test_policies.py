"""Integration tests for PTO policy CRUD and audit."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from pto_tracker.models.audit import AuditLog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from pto_tracker.models import EmployeeProfile, PTOPolicy


def _payload(name: str = "US-Standard", **overrides: object) -> dict:  # type: ignore[type-arg]
    return {
        "name": name,
        "accrual_hrs_per_month": 6.67,
        "carryover_max": 40,
        "effective_on": "2025-01-01",
        **overrides,
    }


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


async def test_create_policy(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    resp = await async_client.post("/policies", json=_payload(), headers=admin_headers)
    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "US-Standard"
    assert data["accrual_hrs_per_month"] == 6.67
    assert data["carryover_max"] == 40
    assert data["effective_on"] == "2025-01-01"


async def test_create_policy_writes_audit(
    async_client: AsyncClient, admin_headers: dict[str, str], db_session: AsyncSession
) -> None:
    resp = await async_client.post("/policies", json=_payload(), headers=admin_headers)
    policy_id = uuid.UUID(resp.json()["id"])
    result = await db_session.execute(select(AuditLog).where(col(AuditLog.entity_id) == policy_id))
    entry = result.scalar_one()
    assert entry.entity_type == "POLICY"
    assert entry.action == "CREATE"
    assert entry.before_json is None
    assert entry.after_json is not None
    assert entry.after_json["name"] == "US-Standard"


async def test_duplicate_policy_name(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    await async_client.post("/policies", json=_payload(), headers=admin_headers)
    resp = await async_client.post("/policies", json=_payload(), headers=admin_headers)
    assert resp.status_code == 409


async def test_negative_rates_rejected(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    resp = await async_client.post("/policies", json=_payload(accrual_hrs_per_month=-1), headers=admin_headers)
    assert resp.status_code == 422
    resp = await async_client.post("/policies", json=_payload(carryover_max=-0.5), headers=admin_headers)
    assert resp.status_code == 422


async def test_zero_rates_allowed(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    resp = await async_client.post(
        "/policies", json=_payload(accrual_hrs_per_month=0, carryover_max=0), headers=admin_headers
    )
    assert resp.status_code == 201


async def test_create_policy_requires_admin(async_client: AsyncClient, manager_headers: dict[str, str]) -> None:
    resp = await async_client.post("/policies", json=_payload(), headers=manager_headers)
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Read / update / delete
# ---------------------------------------------------------------------------


async def test_list_policies(
    async_client: AsyncClient, manager_headers: dict[str, str], make_policy: Callable[..., Awaitable[PTOPolicy]]
) -> None:
    await make_policy()
    await make_policy(name="Contractor", accrual_hrs_per_month=2, carryover_max=0)
    resp = await async_client.get("/policies", headers=manager_headers)
    assert resp.status_code == 200
    assert resp.json()["total"] == 2


async def test_get_policy_not_found(async_client: AsyncClient, admin_headers: dict[str, str]) -> None:
    resp = await async_client.get(f"/policies/{uuid.uuid4()}", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Policy not found"


async def test_update_policy(
    async_client: AsyncClient, admin_headers: dict[str, str], make_policy: Callable[..., Awaitable[PTOPolicy]]
) -> None:
    policy = await make_policy()
    resp = await async_client.patch(f"/policies/{policy.id}", json={"carryover_max": 80}, headers=admin_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["carryover_max"] == 80
    assert data["accrual_hrs_per_month"] == 6.67


async def test_update_policy_name_conflict(
    async_client: AsyncClient, admin_headers: dict[str, str], make_policy: Callable[..., Awaitable[PTOPolicy]]
) -> None:
    await make_policy()
    other = await make_policy(name="Contractor")
    resp = await async_client.patch(f"/policies/{other.id}", json={"name": "US-Standard"}, headers=admin_headers)
    assert resp.status_code == 409


async def test_delete_policy(
    async_client: AsyncClient, admin_headers: dict[str, str], make_policy: Callable[..., Awaitable[PTOPolicy]]
) -> None:
    policy = await make_policy()
    resp = await async_client.delete(f"/policies/{policy.id}", headers=admin_headers)
    assert resp.status_code == 204
    assert (await async_client.get(f"/policies/{policy.id}", headers=admin_headers)).status_code == 404


async def test_delete_policy_in_use_conflicts(
    async_client: AsyncClient,
    admin_headers: dict[str, str],
    make_policy: Callable[..., Awaitable[PTOPolicy]],
    make_employee: Callable[..., Awaitable[EmployeeProfile]],
) -> None:
    policy = await make_policy()
    employee = await make_employee()
    resp = await async_client.post(
        "/balances",
        json={"employee_id": str(employee.id), "policy_id": str(policy.id), "year": 2025},
        headers=admin_headers,
    )
    assert resp.status_code == 201

    resp = await async_client.delete(f"/policies/{policy.id}", headers=admin_headers)
    assert resp.status_code == 409
