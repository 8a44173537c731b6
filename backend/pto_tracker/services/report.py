"""Reporting service: audit log queries and the dashboard aggregate."""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import extract, func, select
from sqlmodel import col

from pto_tracker.models.audit import AuditLog
from pto_tracker.models.employee import EmployeeProfile
from pto_tracker.models.enums import RequestStatus, Role
from pto_tracker.models.policy import PTOPolicy
from pto_tracker.models.request import PTORequest
from pto_tracker.models.team import Team
from pto_tracker.models.user import User
from pto_tracker.schemas.report import (
    AuditLogEntryResponse,
    AuditLogListResponse,
    DashboardOverview,
    DashboardResponse,
    DashboardUserData,
    MonthCount,
    StatusCount,
)
from pto_tracker.services.audit import changed_fields
from pto_tracker.services.balance import list_balances, year_bounds
from pto_tracker.services.employee import get_employee
from pto_tracker.services.request import build_request_response, list_requests
from pto_tracker.services.user import get_user_or_none

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

RECENT_REQUEST_LIMIT = 10
# Upper bound on per-user rows shown on the dashboard.
_USER_ROW_LIMIT = 100


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


async def query_audit_log(
    session: AsyncSession,
    *,
    entity_type: str | None = None,
    entity_id: uuid.UUID | None = None,
    action: str | None = None,
    actor_id: uuid.UUID | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditLogListResponse:
    """Query audit log entries with optional filters.

    ``start_date`` and ``end_date`` are UTC calendar days, both inclusive.
    """
    filters = []

    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)
    if action is not None:
        filters.append(col(AuditLog.action) == action)
    if actor_id is not None:
        filters.append(col(AuditLog.actor_id) == actor_id)
    if start_date is not None:
        filters.append(col(AuditLog.created_at) >= _start_of_day(start_date))
    if end_date is not None:
        # Inclusive of the whole end day.
        filters.append(col(AuditLog.created_at) < _start_of_day(end_date + timedelta(days=1)))

    count_result = await session.execute(select(func.count()).select_from(AuditLog).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog).where(*filters).order_by(col(AuditLog.created_at).desc()).offset(offset).limit(limit)
    )
    entries = list(result.scalars().all())

    return AuditLogListResponse(
        items=[
            AuditLogEntryResponse(
                id=e.id,
                actor_id=e.actor_id,
                entity_type=e.entity_type,
                entity_id=e.entity_id,
                action=e.action,
                before_json=e.before_json,
                after_json=e.after_json,
                changed_fields=changed_fields(e.before_json, e.after_json),
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=total,
    )


async def _count(session: AsyncSession, model: type, *filters: object) -> int:
    result = await session.execute(select(func.count()).select_from(model).where(*filters))
    return result.scalar_one()


async def _load_user_data(session: AsyncSession, user_id: uuid.UUID, year: int) -> DashboardUserData | None:
    """The user's profile with that year's balances and requests; None without a profile."""
    user = await get_user_or_none(session, user_id)
    if user is None:
        return None
    profile_result = await session.execute(
        select(EmployeeProfile.id).where(col(EmployeeProfile.user_id) == user_id)
    )
    employee_id = profile_result.scalar_one_or_none()
    if employee_id is None:
        return None

    balances = await list_balances(session, employee_id=employee_id, year=year, limit=_USER_ROW_LIMIT)
    requests = await list_requests(session, employee_id=employee_id, year=year, limit=_USER_ROW_LIMIT)
    return DashboardUserData(
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=Role(user.role),
        employee=await get_employee(session, employee_id),
        balances=balances.items,
        requests=requests.items,
    )


async def get_dashboard(
    session: AsyncSession,
    year: int | None = None,
    user_id: uuid.UUID | None = None,
) -> DashboardResponse:
    """Build the dashboard for ``year`` (default: the current year).

    Request counts cover requests that start within the year; the recent
    list spans all years.
    """
    year = year or date.today().year
    start, end = year_bounds(year)
    in_year = (col(PTORequest.start_date) >= start, col(PTORequest.start_date) < end)

    def _with_status(status: RequestStatus) -> tuple[object, ...]:
        return (*in_year, col(PTORequest.status) == status.value)

    overview = DashboardOverview(
        total_users=await _count(session, User),
        total_employees=await _count(session, EmployeeProfile),
        total_teams=await _count(session, Team),
        total_policies=await _count(session, PTOPolicy),
        total_requests=await _count(session, PTORequest, *in_year),
        pending_requests=await _count(session, PTORequest, *_with_status(RequestStatus.SUBMITTED)),
        approved_requests=await _count(session, PTORequest, *_with_status(RequestStatus.APPROVED)),
        rejected_requests=await _count(session, PTORequest, *_with_status(RequestStatus.REJECTED)),
    )

    recent_result = await session.execute(
        select(PTORequest).order_by(col(PTORequest.created_at).desc()).limit(RECENT_REQUEST_LIMIT)
    )
    recent = [await build_request_response(session, r) for r in recent_result.scalars().all()]

    status_result = await session.execute(
        select(col(PTORequest.status), func.count())
        .where(*in_year)
        .group_by(col(PTORequest.status))
        .order_by(col(PTORequest.status))
    )
    by_status = [StatusCount(status=RequestStatus(s), count=n) for s, n in status_result.all()]

    month = extract("month", col(PTORequest.start_date))
    month_result = await session.execute(
        select(month, func.count()).where(*in_year).group_by(month).order_by(month)
    )
    monthly = [MonthCount(month=int(m), count=n) for m, n in month_result.all()]

    return DashboardResponse(
        year=year,
        overview=overview,
        recent_requests=recent,
        requests_by_status=by_status,
        monthly_requests=monthly,
        user_data=await _load_user_data(session, user_id, year) if user_id is not None else None,
    )
