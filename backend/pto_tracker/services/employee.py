# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from pto_tracker.exceptions import AppError
from pto_tracker.models.employee import EmployeeProfile
from pto_tracker.models.enums import AuditAction, AuditEntityType, Role
from pto_tracker.models.team import Team
from pto_tracker.models.user import User
from pto_tracker.schemas.employee import EmployeeListResponse, EmployeeResponse, TeamSummary
from pto_tracker.services.audit import model_to_audit_dict, write_audit_log
from pto_tracker.services.user import build_user_summary, get_user_or_none, purge_employee_profiles

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from pto_tracker.schemas.auth import AuthContext
    from pto_tracker.schemas.employee import CreateEmployeeRequest, UpdateEmployeeRequest


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def get_employee_or_404(session: AsyncSession, employee_id: uuid.UUID) -> EmployeeProfile:
    """Fetch an employee profile by ID or raise 404."""
    result = await session.execute(select(EmployeeProfile).where(col(EmployeeProfile.id) == employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise AppError("Employee not found", status_code=404)
    return employee


async def get_employee_user(session: AsyncSession, employee: EmployeeProfile) -> User:
    """Load the user an employee profile belongs to."""
    user = await get_user_or_none(session, employee.user_id)
    if user is None:
        raise AppError("User not found", status_code=404)
    return user


async def _ensure_references(
    session: AsyncSession,
    *,
    user_id: uuid.UUID | None = None,
    manager_id: uuid.UUID | None = None,
    team_id: uuid.UUID | None = None,
) -> None:
    """Raise 400 if any referenced user, manager or team does not exist."""
    for ref_id in (user_id, manager_id):
        if ref_id is not None and await get_user_or_none(session, ref_id) is None:
            raise AppError("Invalid reference", status_code=400)
    if team_id is not None:
        result = await session.execute(select(Team.id).where(col(Team.id) == team_id))
        if result.scalar_one_or_none() is None:
            raise AppError("Invalid reference", status_code=400)


async def _build_employee_response(session: AsyncSession, employee: EmployeeProfile) -> EmployeeResponse:
    user = await get_employee_user(session, employee)
    manager = await get_user_or_none(session, employee.manager_id)

    team_summary = None
    if employee.team_id is not None:
        result = await session.execute(select(Team).where(col(Team.id) == employee.team_id))
        team = result.scalar_one_or_none()
        if team is not None:
            team_summary = TeamSummary(id=team.id, name=team.name, description=team.description)

    return EmployeeResponse(
        id=employee.id,
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=Role(user.role),
        title=employee.title,
        department=employee.department,
        start_date=employee.start_date,
        manager=build_user_summary(manager),
        team=team_summary,
        created_at=employee.created_at,
    )


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def create_employee(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateEmployeeRequest,
) -> EmployeeResponse:
    """Create the employee profile for an existing user."""
    await _ensure_references(session, user_id=payload.user_id, manager_id=payload.manager_id, team_id=payload.team_id)

    existing = await session.execute(
        select(EmployeeProfile.id).where(col(EmployeeProfile.user_id) == payload.user_id)
    )
    if existing.scalar_one_or_none() is not None:
        raise AppError("This user already has an employee profile", status_code=409)

    employee = EmployeeProfile(
        user_id=payload.user_id,
        title=payload.title,
        department=payload.department,
        start_date=payload.start_date,
        manager_id=payload.manager_id,
        team_id=payload.team_id,
    )
    session.add(employee)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(employee),
    )

    await session.commit()
    await session.refresh(employee)
    return await _build_employee_response(session, employee)


async def get_employee(session: AsyncSession, employee_id: uuid.UUID) -> EmployeeResponse:
    employee = await get_employee_or_404(session, employee_id)
    return await _build_employee_response(session, employee)


async def list_employees(
    session: AsyncSession,
    team_id: uuid.UUID | None = None,
    manager_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> EmployeeListResponse:
    """List employee profiles, newest first."""
    filters = []
    if team_id is not None:
        filters.append(col(EmployeeProfile.team_id) == team_id)
    if manager_id is not None:
        filters.append(col(EmployeeProfile.manager_id) == manager_id)

    count_result = await session.execute(select(func.count()).select_from(EmployeeProfile).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(EmployeeProfile)
        .where(*filters)
        .order_by(col(EmployeeProfile.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    employees = list(result.scalars().all())
    items = [await _build_employee_response(session, e) for e in employees]
    return EmployeeListResponse(items=items, total=total)


async def update_employee(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    payload: UpdateEmployeeRequest,
) -> EmployeeResponse:
    """Partially update an employee profile; explicit nulls clear fields."""
    employee = await get_employee_or_404(session, employee_id)
    before_dict = model_to_audit_dict(employee)

    changes = payload.model_dump(exclude_unset=True)
    await _ensure_references(session, manager_id=changes.get("manager_id"), team_id=changes.get("team_id"))
    for field, value in changes.items():
        setattr(employee, field, value)

    session.add(employee)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(employee),
    )

    await session.commit()
    await session.refresh(employee)
    return await _build_employee_response(session, employee)


async def delete_employee(session: AsyncSession, auth: AuthContext, employee_id: uuid.UUID) -> None:
    """Delete a profile with its requests and stored balances; the user stays."""
    employee = await get_employee_or_404(session, employee_id)
    before_dict = model_to_audit_dict(employee)

    await purge_employee_profiles(session, [employee.id])
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )
    await session.commit()
