# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query

from pto_tracker.api.deps import AdminDep, ViewerDep
from pto_tracker.db import SessionDep
from pto_tracker.schemas.balance import MAX_YEAR, MIN_YEAR
from pto_tracker.schemas.report import AuditLogListResponse, DashboardResponse
from pto_tracker.services import report as report_service

reports_router = APIRouter(tags=["reports"])


@reports_router.get("/audit-log", response_model=AuditLogListResponse)
async def query_audit_log(
    session: SessionDep,
    auth: AdminDep,
    entity_type: str | None = Query(default=None),
    entity_id: uuid.UUID | None = Query(default=None),
    action: str | None = Query(default=None),
    actor_id: uuid.UUID | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AuditLogListResponse:
    """Query audit log entries with optional filters (admin only)."""
    return await report_service.query_audit_log(
        session,
        entity_type=entity_type,
        entity_id=entity_id,
        action=action,
        actor_id=actor_id,
        start_date=start_date,
        end_date=end_date,
        offset=offset,
        limit=limit,
    )


@reports_router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    session: SessionDep,
    auth: ViewerDep,
    year: int | None = Query(default=None, ge=MIN_YEAR, le=MAX_YEAR),
    user_id: uuid.UUID | None = Query(default=None),
) -> DashboardResponse:
    """Overview counts, recent requests and monthly activity for a year.

    With ``user_id``, also that user's profile, balances and requests.
    """
    return await report_service.get_dashboard(session, year, user_id)
