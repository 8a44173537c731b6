# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from pto_tracker.api.deps import ApproverDep, AuthDep, ViewerDep
from pto_tracker.db import SessionDep
from pto_tracker.models.enums import RequestStatus
from pto_tracker.schemas.balance import MAX_YEAR, MIN_YEAR
from pto_tracker.schemas.request import (
    CreateRequestPayload,
    DecisionPayload,
    RequestListResponse,
    RequestResponse,
    UpdateRequestPayload,
)
from pto_tracker.services import request as request_service

requests_router = APIRouter(prefix="/requests", tags=["requests"])


@requests_router.post("", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
async def create_request(
    payload: CreateRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Create a PTO request as a draft or submitted straight away."""
    return await request_service.create_request(session, auth, payload)


@requests_router.get("", response_model=RequestListResponse)
async def list_requests(
    session: SessionDep,
    auth: ViewerDep,
    employee_id: uuid.UUID | None = Query(default=None),
    status_filter: RequestStatus | None = Query(default=None, alias="status"),
    approver_id: uuid.UUID | None = Query(default=None),
    year: int | None = Query(default=None, ge=MIN_YEAR, le=MAX_YEAR),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> RequestListResponse:
    """List PTO requests with optional filters."""
    return await request_service.list_requests(
        session, employee_id, status_filter, approver_id, year, offset, limit
    )


@requests_router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: ViewerDep,
) -> RequestResponse:
    """Get a single PTO request."""
    return await request_service.get_request(session, request_id)


@requests_router.patch("/{request_id}", response_model=RequestResponse)
async def update_request(
    request_id: uuid.UUID,
    payload: UpdateRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Edit the dates, hours or note of a draft or submitted request."""
    return await request_service.update_request(session, auth, request_id, payload)


@requests_router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    await request_service.delete_request(session, auth, request_id)


@requests_router.post("/{request_id}/submit", response_model=RequestResponse)
async def submit_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Submit a draft request for approval."""
    return await request_service.submit_request(session, auth, request_id)


@requests_router.post("/{request_id}/approve", response_model=RequestResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: ApproverDep,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """Approve a submitted PTO request (manager or admin)."""
    return await request_service.approve_request(session, auth, request_id, payload)


@requests_router.post("/{request_id}/reject", response_model=RequestResponse)
async def reject_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: ApproverDep,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """Reject a submitted PTO request (manager or admin)."""
    return await request_service.reject_request(session, auth, request_id, payload)


@requests_router.post("/{request_id}/cancel", response_model=RequestResponse)
async def cancel_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> RequestResponse:
    """Cancel a draft or submitted PTO request."""
    return await request_service.cancel_request(session, auth, request_id)
