from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from pto_tracker.config import get_settings
from pto_tracker.exceptions import AppError
from pto_tracker.models.balance import PTOBalance
from pto_tracker.models.employee import EmployeeProfile
from pto_tracker.models.enums import AuditAction, AuditEntityType, RequestStatus
from pto_tracker.models.policy import PTOPolicy
from pto_tracker.models.request import PTORequest
from pto_tracker.models.user import User
from pto_tracker.schemas.balance import (
    BalanceCalculationResponse,
    BalanceListResponse,
    BalanceResponse,
    CalculationDetail,
    CalculationEmployee,
    ExistingBalance,
)
from pto_tracker.services.audit import model_to_audit_dict, write_audit_log
from pto_tracker.services.balance_calculator import PolicyTerms, PriorYearBalance, RequestUsage, compute_balance
from pto_tracker.services.employee import get_employee_or_404, get_employee_user
from pto_tracker.services.policy import build_policy_summary, get_policy_or_404

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from pto_tracker.schemas.auth import AuthContext
    from pto_tracker.schemas.balance import CalculateBalanceRequest, CreateBalanceRequest, UpdateBalanceRequest
    from pto_tracker.services.balance_calculator import BalanceResult

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


async def _get_balance_or_404(session: AsyncSession, balance_id: uuid.UUID) -> PTOBalance:
    result = await session.execute(select(PTOBalance).where(col(PTOBalance.id) == balance_id))
    balance = result.scalar_one_or_none()
    if balance is None:
        raise AppError("Balance not found", status_code=404)
    return balance


async def _get_balance_for_year(session: AsyncSession, employee_id: uuid.UUID, year: int) -> PTOBalance | None:
    result = await session.execute(
        select(PTOBalance).where(
            col(PTOBalance.employee_id) == employee_id,
            col(PTOBalance.year) == year,
        )
    )
    return result.scalar_one_or_none()


async def _build_balance_response(session: AsyncSession, balance: PTOBalance) -> BalanceResponse:
    """Join a stored balance with its employee's name and policy."""
    name_result = await session.execute(
        select(User.name)
        .join(EmployeeProfile, col(EmployeeProfile.user_id) == col(User.id))
        .where(col(EmployeeProfile.id) == balance.employee_id)
    )
    policy_result = await session.execute(select(PTOPolicy).where(col(PTOPolicy.id) == balance.policy_id))
    policy = policy_result.scalar_one()

    return BalanceResponse(
        id=balance.id,
        employee_id=balance.employee_id,
        employee_name=name_result.scalar_one_or_none() or "",
        year=balance.year,
        policy=build_policy_summary(policy),
        accrued=balance.accrued,
        used=balance.used,
        carryover=balance.carryover,
        created_at=balance.created_at,
        updated_at=balance.updated_at,
    )


async def _ensure_references(session: AsyncSession, employee_id: uuid.UUID, policy_id: uuid.UUID) -> None:
    employee = await session.execute(select(EmployeeProfile.id).where(col(EmployeeProfile.id) == employee_id))
    policy = await session.execute(select(PTOPolicy.id).where(col(PTOPolicy.id) == policy_id))
    if employee.scalar_one_or_none() is None or policy.scalar_one_or_none() is None:
        raise AppError("Invalid reference", status_code=400)


def year_bounds(year: int) -> tuple[datetime, datetime]:
    """Return ``[Jan 1 year, Jan 1 year + 1)`` as UTC datetimes."""
    return datetime(year, 1, 1, tzinfo=UTC), datetime(year + 1, 1, 1, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Stored balances
# ---------------------------------------------------------------------------


async def create_balance(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateBalanceRequest,
) -> BalanceResponse:
    """Store a yearly balance for an employee."""
    await _ensure_references(session, payload.employee_id, payload.policy_id)
    if await _get_balance_for_year(session, payload.employee_id, payload.year) is not None:
        raise AppError("A balance for this employee and year already exists", status_code=409)

    balance = PTOBalance(
        employee_id=payload.employee_id,
        year=payload.year,
        policy_id=payload.policy_id,
        accrued=payload.accrued,
        used=payload.used,
        carryover=payload.carryover,
    )
    session.add(balance)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.BALANCE,
        entity_id=balance.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(balance),
    )

    await session.commit()
    await session.refresh(balance)
    return await _build_balance_response(session, balance)


async def get_balance(session: AsyncSession, balance_id: uuid.UUID) -> BalanceResponse:
    balance = await _get_balance_or_404(session, balance_id)
    return await _build_balance_response(session, balance)


async def list_balances(
    session: AsyncSession,
    employee_id: uuid.UUID | None = None,
    year: int | None = None,
    policy_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> BalanceListResponse:
    """List stored balances, newest year first."""
    filters = []
    if employee_id is not None:
        filters.append(col(PTOBalance.employee_id) == employee_id)
    if year is not None:
        filters.append(col(PTOBalance.year) == year)
    if policy_id is not None:
        filters.append(col(PTOBalance.policy_id) == policy_id)

    count_result = await session.execute(select(func.count()).select_from(PTOBalance).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(PTOBalance)
        .where(*filters)
        .order_by(col(PTOBalance.year).desc(), col(PTOBalance.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    balances = list(result.scalars().all())
    items = [await _build_balance_response(session, b) for b in balances]
    return BalanceListResponse(items=items, total=total)


async def update_balance(
    session: AsyncSession,
    auth: AuthContext,
    balance_id: uuid.UUID,
    payload: UpdateBalanceRequest,
) -> BalanceResponse:
    balance = await _get_balance_or_404(session, balance_id)
    before_dict = model_to_audit_dict(balance)

    if payload.accrued is not None:
        balance.accrued = payload.accrued
    if payload.used is not None:
        balance.used = payload.used
    if payload.carryover is not None:
        balance.carryover = payload.carryover

    session.add(balance)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.BALANCE,
        entity_id=balance.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(balance),
    )

    await session.commit()
    await session.refresh(balance)
    return await _build_balance_response(session, balance)


async def delete_balance(session: AsyncSession, auth: AuthContext, balance_id: uuid.UUID) -> None:
    balance = await _get_balance_or_404(session, balance_id)
    before_dict = model_to_audit_dict(balance)

    await session.delete(balance)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.BALANCE,
        entity_id=balance_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )
    await session.commit()


# ---------------------------------------------------------------------------
# Calculation
# ---------------------------------------------------------------------------


async def _load_approved_usage(session: AsyncSession, employee_id: uuid.UUID, year: int) -> list[RequestUsage]:
    """Approved requests for the employee that start within ``year``."""
    start, end = year_bounds(year)
    result = await session.execute(
        select(PTORequest)
        .where(
            col(PTORequest.employee_id) == employee_id,
            col(PTORequest.status) == RequestStatus.APPROVED.value,
            col(PTORequest.start_date) >= start,
            col(PTORequest.start_date) < end,
        )
        .order_by(col(PTORequest.start_date))
    )
    return [RequestUsage.of(r.start_date, r.hours) for r in result.scalars().all()]


async def _store_result(
    session: AsyncSession,
    auth: AuthContext,
    existing: PTOBalance | None,
    employee_id: uuid.UUID,
    policy_id: uuid.UUID,
    year: int,
    result: BalanceResult,
) -> PTOBalance:
    """Upsert the calculated figures as the stored balance for ``year``."""
    # Stored hours are non-negative.
    carryover = float(max(Decimal(0), result.carryover))

    if existing is None:
        balance = PTOBalance(
            employee_id=employee_id,
            year=year,
            policy_id=policy_id,
            accrued=float(result.total_accrual),
            used=float(result.total_used),
            carryover=carryover,
        )
        before_dict = None
        action = AuditAction.CREATE
    else:
        balance = existing
        before_dict = model_to_audit_dict(balance)
        balance.policy_id = policy_id
        balance.accrued = float(result.total_accrual)
        balance.used = float(result.total_used)
        balance.carryover = carryover
        action = AuditAction.UPDATE

    session.add(balance)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.BALANCE,
        entity_id=balance.id,
        action=action,
        before_json=before_dict,
        after_json=model_to_audit_dict(balance),
    )

    await session.commit()
    await session.refresh(balance)
    return balance


async def calculate_balance(
    session: AsyncSession,
    auth: AuthContext,
    payload: CalculateBalanceRequest,
) -> BalanceCalculationResponse:
    """Compute an employee's available PTO for a year under a policy.

    Loads the policy, the employee's tenure start, their approved requests
    in the year and the prior year's stored balance, then runs the pure
    calculator. With ``persist`` the result replaces the stored balance for
    the year and ``existing_balance`` reflects the written row.
    """
    policy = await get_policy_or_404(session, payload.policy_id)
    employee = await get_employee_or_404(session, payload.employee_id)
    user = await get_employee_user(session, employee)

    usage = await _load_approved_usage(session, employee.id, payload.year)
    prior = await _get_balance_for_year(session, employee.id, payload.year - 1)

    result = compute_balance(
        PolicyTerms.of(policy.accrual_hrs_per_month, policy.carryover_max, policy.effective_on),
        employee.start_date,
        usage,
        PriorYearBalance.of(prior.accrued, prior.used) if prior is not None else None,
        payload.year,
        floor_carryover=get_settings().carryover_floor_zero,
    )
    logger.info(
        "Calculated %s balance for employee %s: available=%s over %d approved request(s)",
        payload.year,
        employee.id,
        result.available_balance,
        result.approved_request_count,
    )

    existing = await _get_balance_for_year(session, employee.id, payload.year)
    if payload.persist:
        existing = await _store_result(session, auth, existing, employee.id, policy.id, payload.year, result)

    return BalanceCalculationResponse(
        employee=CalculationEmployee(id=employee.id, name=user.name, email=user.email, start_date=employee.start_date),
        policy=build_policy_summary(policy),
        year=payload.year,
        calculation=CalculationDetail(
            accrual_months=result.accrual_months,
            total_accrual=float(result.total_accrual),
            carryover=float(result.carryover),
            total_used=float(result.total_used),
            available_balance=float(result.available_balance),
            approved_request_count=result.approved_request_count,
        ),
        existing_balance=(
            ExistingBalance(
                id=existing.id,
                accrued=existing.accrued,
                used=existing.used,
                carryover=existing.carryover,
            )
            if existing is not None
            else None
        ),
    )
