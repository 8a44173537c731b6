# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from pto_tracker.exceptions import AppError
from pto_tracker.models.balance import PTOBalance
from pto_tracker.models.enums import AuditAction, AuditEntityType
from pto_tracker.models.policy import PTOPolicy
from pto_tracker.schemas.policy import PolicyListResponse, PolicyResponse, PolicySummary
from pto_tracker.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from pto_tracker.schemas.auth import AuthContext
    from pto_tracker.schemas.policy import CreatePolicyRequest, UpdatePolicyRequest


def build_policy_summary(policy: PTOPolicy) -> PolicySummary:
    return PolicySummary(
        id=policy.id,
        name=policy.name,
        accrual_hrs_per_month=policy.accrual_hrs_per_month,
        carryover_max=policy.carryover_max,
    )


def _build_policy_response(policy: PTOPolicy) -> PolicyResponse:
    """Build a PolicyResponse from a DB model."""
    return PolicyResponse(
        id=policy.id,
        name=policy.name,
        accrual_hrs_per_month=policy.accrual_hrs_per_month,
        carryover_max=policy.carryover_max,
        effective_on=policy.effective_on,
        created_at=policy.created_at,
        updated_at=policy.updated_at,
    )


async def get_policy_or_404(session: AsyncSession, policy_id: uuid.UUID) -> PTOPolicy:
    """Fetch a policy by ID or raise 404."""
    result = await session.execute(select(PTOPolicy).where(col(PTOPolicy.id) == policy_id))
    policy = result.scalar_one_or_none()
    if policy is None:
        raise AppError("Policy not found", status_code=404)
    return policy


async def _ensure_name_free(session: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> None:
    query = select(PTOPolicy.id).where(col(PTOPolicy.name) == name)
    if exclude_id is not None:
        query = query.where(col(PTOPolicy.id) != exclude_id)
    result = await session.execute(query)
    if result.scalar_one_or_none() is not None:
        raise AppError("A policy with this name already exists", status_code=409)


async def create_policy(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreatePolicyRequest,
) -> PolicyResponse:
    """Create a new PTO policy."""
    await _ensure_name_free(session, payload.name)

    policy = PTOPolicy(
        name=payload.name,
        accrual_hrs_per_month=payload.accrual_hrs_per_month,
        carryover_max=payload.carryover_max,
        effective_on=payload.effective_on,
    )
    session.add(policy)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.POLICY,
        entity_id=policy.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(policy),
    )

    await session.commit()
    await session.refresh(policy)
    return _build_policy_response(policy)


async def get_policy(session: AsyncSession, policy_id: uuid.UUID) -> PolicyResponse:
    """Get a single policy."""
    return _build_policy_response(await get_policy_or_404(session, policy_id))


async def list_policies(session: AsyncSession, offset: int = 0, limit: int = 50) -> PolicyListResponse:
    """List policies, most recently effective first."""
    count_result = await session.execute(select(func.count()).select_from(PTOPolicy))
    total = count_result.scalar_one()

    result = await session.execute(
        select(PTOPolicy)
        .order_by(col(PTOPolicy.effective_on).desc(), col(PTOPolicy.name))
        .offset(offset)
        .limit(limit)
    )
    policies = list(result.scalars().all())
    return PolicyListResponse(items=[_build_policy_response(p) for p in policies], total=total)


async def update_policy(
    session: AsyncSession,
    auth: AuthContext,
    policy_id: uuid.UUID,
    payload: UpdatePolicyRequest,
) -> PolicyResponse:
    """Update a policy in place.

    Stored balances are not recomputed; call the calculation endpoint with
    ``persist`` to refresh them.
    """
    policy = await get_policy_or_404(session, policy_id)
    before_dict = model_to_audit_dict(policy)

    if payload.name is not None and payload.name != policy.name:
        await _ensure_name_free(session, payload.name, exclude_id=policy.id)
        policy.name = payload.name
    if payload.accrual_hrs_per_month is not None:
        policy.accrual_hrs_per_month = payload.accrual_hrs_per_month
    if payload.carryover_max is not None:
        policy.carryover_max = payload.carryover_max
    if payload.effective_on is not None:
        policy.effective_on = payload.effective_on

    session.add(policy)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.POLICY,
        entity_id=policy.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(policy),
    )

    await session.commit()
    await session.refresh(policy)
    return _build_policy_response(policy)


async def delete_policy(session: AsyncSession, auth: AuthContext, policy_id: uuid.UUID) -> None:
    """Delete a policy that no stored balance refers to."""
    policy = await get_policy_or_404(session, policy_id)

    in_use = await session.execute(
        select(func.count()).select_from(PTOBalance).where(col(PTOBalance.policy_id) == policy_id)
    )
    if in_use.scalar_one() > 0:
        raise AppError("Policy is referenced by stored balances", status_code=409)

    before_dict = model_to_audit_dict(policy)
    await session.delete(policy)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.POLICY,
        entity_id=policy_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )
    await session.commit()
