# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from pto_tracker.exceptions import AppError
from pto_tracker.models.employee import EmployeeProfile
from pto_tracker.models.enums import AuditAction, AuditEntityType, RequestStatus
from pto_tracker.models.request import PTORequest
from pto_tracker.models.user import User
from pto_tracker.rbac import Capability, can
from pto_tracker.schemas.request import RequestListResponse, RequestResponse, ensure_utc
from pto_tracker.services.audit import model_to_audit_dict, write_audit_log
from pto_tracker.services.balance import year_bounds
from pto_tracker.services.user import build_user_summary, get_user_or_none

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from pto_tracker.schemas.auth import AuthContext
    from pto_tracker.schemas.request import CreateRequestPayload, DecisionPayload, UpdateRequestPayload

_OPEN_STATUSES = frozenset({RequestStatus.DRAFT.value, RequestStatus.SUBMITTED.value})


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


async def _get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> PTORequest:
    """Fetch a request by ID. Raises 404 if not found."""
    result = await session.execute(select(PTORequest).where(col(PTORequest.id) == request_id))
    request = result.scalar_one_or_none()
    if request is None:
        raise AppError("Request not found", status_code=404)
    return request


async def _get_owner_user_id(session: AsyncSession, employee_id: uuid.UUID) -> uuid.UUID | None:
    result = await session.execute(select(EmployeeProfile.user_id).where(col(EmployeeProfile.id) == employee_id))
    return result.scalar_one_or_none()


async def _ensure_owner_or_admin(
    session: AsyncSession, auth: AuthContext, employee_id: uuid.UUID, verb: str
) -> None:
    """Only the employee's own user or an admin may act on their requests."""
    if can(auth.role, Capability.ADMINISTER):
        return
    if await _get_owner_user_id(session, employee_id) != auth.user_id:
        raise AppError(f"Not authorized to {verb} this request", status_code=403)


async def build_request_response(session: AsyncSession, request: PTORequest) -> RequestResponse:
    """Map a request model to its response schema with names resolved."""
    name_result = await session.execute(
        select(User.name)
        .join(EmployeeProfile, col(EmployeeProfile.user_id) == col(User.id))
        .where(col(EmployeeProfile.id) == request.employee_id)
    )
    approver = await get_user_or_none(session, request.approver_id)

    return RequestResponse(
        id=request.id,
        employee_id=request.employee_id,
        employee_name=name_result.scalar_one_or_none() or "",
        start_date=ensure_utc(request.start_date),
        end_date=ensure_utc(request.end_date),
        hours=request.hours,
        status=RequestStatus(request.status),
        approver=build_user_summary(approver),
        note=request.note,
        created_at=request.created_at,
        updated_at=request.updated_at,
    )


async def _transition(
    session: AsyncSession,
    auth: AuthContext,
    request: PTORequest,
    new_status: RequestStatus,
    audit_action: AuditAction,
    before_dict: dict[str, Any] | None = None,
) -> RequestResponse:
    """Apply a status change already validated by the caller and audit it.

    Callers that edit other fields first pass the image taken before those edits.
    """
    if before_dict is None:
        before_dict = model_to_audit_dict(request)
    request.status = new_status.value
    session.add(request)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=request.id,
        action=audit_action,
        before_json=before_dict,
        after_json=model_to_audit_dict(request),
    )

    await session.commit()
    await session.refresh(request)
    return await build_request_response(session, request)


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def create_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateRequestPayload,
) -> RequestResponse:
    """Create a PTO request in DRAFT or SUBMITTED state."""
    employee = await session.execute(
        select(EmployeeProfile.id).where(col(EmployeeProfile.id) == payload.employee_id)
    )
    if employee.scalar_one_or_none() is None:
        raise AppError("Invalid reference", status_code=400)
    await _ensure_owner_or_admin(session, auth, payload.employee_id, "create")

    pto_request = PTORequest(
        employee_id=payload.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        hours=payload.hours,
        status=payload.status.value,
        note=payload.note,
    )
    session.add(pto_request)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=pto_request.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(pto_request),
    )

    await session.commit()
    await session.refresh(pto_request)
    return await build_request_response(session, pto_request)


async def get_request(session: AsyncSession, request_id: uuid.UUID) -> RequestResponse:
    """Get a single request by ID."""
    pto_request = await _get_request_or_404(session, request_id)
    return await build_request_response(session, pto_request)


async def list_requests(
    session: AsyncSession,
    employee_id: uuid.UUID | None = None,
    status_filter: RequestStatus | None = None,
    approver_id: uuid.UUID | None = None,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> RequestListResponse:
    """List requests with optional filters, ordered by start_date DESC.

    ``year`` matches requests that start within that calendar year.
    """
    filters = []
    if employee_id is not None:
        filters.append(col(PTORequest.employee_id) == employee_id)
    if status_filter is not None:
        filters.append(col(PTORequest.status) == status_filter.value)
    if approver_id is not None:
        filters.append(col(PTORequest.approver_id) == approver_id)
    if year is not None:
        start, end = year_bounds(year)
        filters.extend([col(PTORequest.start_date) >= start, col(PTORequest.start_date) < end])

    count_result = await session.execute(select(func.count()).select_from(PTORequest).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(PTORequest)
        .where(*filters)
        .order_by(col(PTORequest.start_date).desc(), col(PTORequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())
    return RequestListResponse(items=[await build_request_response(session, r) for r in requests], total=total)


async def update_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: UpdateRequestPayload,
) -> RequestResponse:
    """Edit the dates, hours or note of an open request."""
    pto_request = await _get_request_or_404(session, request_id)
    if pto_request.status not in _OPEN_STATUSES:
        raise AppError("Only draft or submitted requests can be edited", status_code=400)
    await _ensure_owner_or_admin(session, auth, pto_request.employee_id, "edit")

    start_date = payload.start_date or ensure_utc(pto_request.start_date)
    end_date = payload.end_date or ensure_utc(pto_request.end_date)
    if end_date <= start_date:
        raise AppError("start_date must be before end_date", status_code=400)

    before_dict = model_to_audit_dict(pto_request)
    pto_request.start_date = start_date
    pto_request.end_date = end_date
    if payload.hours is not None:
        pto_request.hours = payload.hours
    if "note" in payload.model_fields_set:
        pto_request.note = payload.note

    session.add(pto_request)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=pto_request.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(pto_request),
    )

    await session.commit()
    await session.refresh(pto_request)
    return await build_request_response(session, pto_request)


async def delete_request(session: AsyncSession, auth: AuthContext, request_id: uuid.UUID) -> None:
    pto_request = await _get_request_or_404(session, request_id)
    await _ensure_owner_or_admin(session, auth, pto_request.employee_id, "delete")
    before_dict = model_to_audit_dict(pto_request)

    await session.delete(pto_request)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.REQUEST,
        entity_id=request_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )
    await session.commit()


# ---------------------------------------------------------------------------
# Status transitions
# ---------------------------------------------------------------------------


async def submit_request(session: AsyncSession, auth: AuthContext, request_id: uuid.UUID) -> RequestResponse:
    """DRAFT -> SUBMITTED, by the requesting employee or an admin."""
    pto_request = await _get_request_or_404(session, request_id)
    if pto_request.status != RequestStatus.DRAFT.value:
        raise AppError("Only draft requests can be submitted", status_code=400)
    await _ensure_owner_or_admin(session, auth, pto_request.employee_id, "submit")

    return await _transition(session, auth, pto_request, RequestStatus.SUBMITTED, AuditAction.SUBMIT)


async def _decide(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: DecisionPayload | None,
    new_status: RequestStatus,
    audit_action: AuditAction,
) -> RequestResponse:
    verb = "approved" if new_status == RequestStatus.APPROVED else "rejected"
    pto_request = await _get_request_or_404(session, request_id)
    if pto_request.status != RequestStatus.SUBMITTED.value:
        raise AppError(f"Only submitted requests can be {verb}", status_code=400)

    approver_id = payload.approver_id if payload and payload.approver_id else auth.user_id
    approver = await get_user_or_none(session, approver_id)
    # The recorded approver's stored role counts, not just the caller's header.
    if approver is None or not can(approver.role, Capability.DECIDE_REQUESTS):
        raise AppError(f"Only managers and admins can {verb[:-1]} requests", status_code=403)

    before_dict = model_to_audit_dict(pto_request)
    pto_request.approver_id = approver.id
    if payload and payload.note:
        pto_request.note = payload.note

    return await _transition(session, auth, pto_request, new_status, audit_action, before_dict)


async def approve_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """SUBMITTED -> APPROVED. Keeps the existing note unless a new one is given."""
    return await _decide(session, auth, request_id, payload, RequestStatus.APPROVED, AuditAction.APPROVE)


async def reject_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: DecisionPayload | None = None,
) -> RequestResponse:
    """SUBMITTED -> REJECTED. Keeps the existing note unless a new one is given."""
    return await _decide(session, auth, request_id, payload, RequestStatus.REJECTED, AuditAction.REJECT)


async def cancel_request(session: AsyncSession, auth: AuthContext, request_id: uuid.UUID) -> RequestResponse:
    """Cancel an open request.

    The employee who owns the request or an admin can cancel.
    """
    pto_request = await _get_request_or_404(session, request_id)
    if pto_request.status not in _OPEN_STATUSES:
        raise AppError("Only draft or submitted requests can be cancelled", status_code=400)
    await _ensure_owner_or_admin(session, auth, pto_request.employee_id, "cancel")

    return await _transition(session, auth, pto_request, RequestStatus.CANCELLED, AuditAction.CANCEL)
