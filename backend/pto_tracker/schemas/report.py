# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from pto_tracker.models.enums import RequestStatus, Role
from pto_tracker.schemas.balance import BalanceResponse
from pto_tracker.schemas.employee import EmployeeResponse
from pto_tracker.schemas.request import RequestResponse

# ---------------------------------------------------------------------------
# Audit log
# ---------------------------------------------------------------------------


class AuditLogEntryResponse(BaseModel):
    """Response schema for a single audit log entry."""

    id: uuid.UUID
    actor_id: uuid.UUID
    entity_type: str
    entity_id: uuid.UUID
    action: str
    before_json: dict[str, Any] | None
    after_json: dict[str, Any] | None
    changed_fields: list[str]
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Paginated list of audit log entries."""

    items: list[AuditLogEntryResponse]
    total: int


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


class DashboardOverview(BaseModel):
    """Headline counts; request counts cover requests starting in the year."""

    total_users: int
    total_employees: int
    total_teams: int
    total_policies: int
    total_requests: int
    pending_requests: int
    approved_requests: int
    rejected_requests: int


class StatusCount(BaseModel):
    status: RequestStatus
    count: int


class MonthCount(BaseModel):
    month: int  # 1-12
    count: int


class DashboardUserData(BaseModel):
    """The requesting user's own profile, balances and requests for the year."""

    user_id: uuid.UUID
    name: str
    email: str
    role: Role
    employee: EmployeeResponse
    balances: list[BalanceResponse]
    requests: list[RequestResponse]


class DashboardResponse(BaseModel):
    """Aggregated view for the landing page."""

    year: int
    overview: DashboardOverview
    recent_requests: list[RequestResponse]
    requests_by_status: list[StatusCount]
    monthly_requests: list[MonthCount]
    user_data: DashboardUserData | None
