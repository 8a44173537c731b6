# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import bcrypt
from sqlalchemy import delete, func, select, update
from sqlmodel import col

from pto_tracker.exceptions import AppError
from pto_tracker.models.balance import PTOBalance
from pto_tracker.models.employee import EmployeeProfile
from pto_tracker.models.enums import AuditAction, AuditEntityType, Role
from pto_tracker.models.request import PTORequest
from pto_tracker.models.team import Team
from pto_tracker.models.user import User
from pto_tracker.schemas.user import UserListResponse, UserResponse, UserSummary
from pto_tracker.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from pto_tracker.schemas.auth import AuthContext
    from pto_tracker.schemas.user import CreateUserRequest, UpdateUserRequest


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def build_user_response(user: User) -> UserResponse:
    """Map a user model to its response schema."""
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=Role(user.role),
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def build_user_summary(user: User | None) -> UserSummary | None:
    if user is None:
        return None
    return UserSummary(id=user.id, name=user.name, email=user.email)


async def get_user_or_none(session: AsyncSession, user_id: uuid.UUID | None) -> User | None:
    """Fetch a user by ID; ``None`` in, ``None`` out."""
    if user_id is None:
        return None
    result = await session.execute(select(User).where(col(User.id) == user_id))
    return result.scalar_one_or_none()


async def _get_user_or_404(session: AsyncSession, user_id: uuid.UUID) -> User:
    user = await get_user_or_none(session, user_id)
    if user is None:
        raise AppError("User not found", status_code=404)
    return user


async def _ensure_email_free(session: AsyncSession, email: str, exclude_id: uuid.UUID | None = None) -> None:
    query = select(User).where(func.lower(col(User.email)) == email.lower())
    if exclude_id is not None:
        query = query.where(col(User.id) != exclude_id)
    result = await session.execute(query)
    if result.scalar_one_or_none() is not None:
        raise AppError("A user with this email already exists", status_code=409)


async def create_user(session: AsyncSession, auth: AuthContext, payload: CreateUserRequest) -> UserResponse:
    """Create a user with a hashed password."""
    await _ensure_email_free(session, payload.email)

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        role=payload.role.value,
    )
    session.add(user)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.USER,
        entity_id=user.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(user),
    )

    await session.commit()
    await session.refresh(user)
    return build_user_response(user)


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> UserResponse:
    return build_user_response(await _get_user_or_404(session, user_id))


async def list_users(
    session: AsyncSession,
    role: Role | None = None,
    offset: int = 0,
    limit: int = 50,
) -> UserListResponse:
    """List users ordered by name, optionally filtered by role."""
    filters = []
    if role is not None:
        filters.append(col(User.role) == role.value)

    count_result = await session.execute(select(func.count()).select_from(User).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(User).where(*filters).order_by(col(User.name), col(User.created_at)).offset(offset).limit(limit)
    )
    users = list(result.scalars().all())
    return UserListResponse(items=[build_user_response(u) for u in users], total=total)


async def update_user(
    session: AsyncSession,
    auth: AuthContext,
    user_id: uuid.UUID,
    payload: UpdateUserRequest,
) -> UserResponse:
    """Apply a partial update to a user."""
    user = await _get_user_or_404(session, user_id)
    before_dict = model_to_audit_dict(user)

    if payload.email is not None and payload.email.lower() != user.email.lower():
        await _ensure_email_free(session, payload.email, exclude_id=user.id)
        user.email = payload.email
    if payload.name is not None:
        user.name = payload.name
    if payload.role is not None:
        user.role = payload.role.value

    session.add(user)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.USER,
        entity_id=user.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(user),
    )

    await session.commit()
    await session.refresh(user)
    return build_user_response(user)


async def purge_employee_profiles(session: AsyncSession, profile_ids: list[uuid.UUID]) -> None:
    """Delete profiles along with their requests and stored balances.

    Mirrors the ``ON DELETE CASCADE`` rules so SQLite, which leaves foreign
    keys unenforced, ends up in the same state as PostgreSQL.
    """
    if not profile_ids:
        return
    await session.execute(delete(PTORequest).where(col(PTORequest.employee_id).in_(profile_ids)))
    await session.execute(delete(PTOBalance).where(col(PTOBalance.employee_id).in_(profile_ids)))
    await session.execute(delete(EmployeeProfile).where(col(EmployeeProfile.id).in_(profile_ids)))


async def delete_user(session: AsyncSession, auth: AuthContext, user_id: uuid.UUID) -> None:
    """Delete a user together with their employee profile.

    Teams, profiles and requests that point at the user as manager or
    approver keep their rows with the reference cleared.
    """
    user = await _get_user_or_404(session, user_id)
    before_dict = model_to_audit_dict(user)

    profiles = await session.execute(select(EmployeeProfile.id).where(col(EmployeeProfile.user_id) == user_id))
    await purge_employee_profiles(session, list(profiles.scalars().all()))
    await session.execute(
        update(EmployeeProfile).where(col(EmployeeProfile.manager_id) == user_id).values(manager_id=None)
    )
    await session.execute(update(Team).where(col(Team.manager_id) == user_id).values(manager_id=None))
    await session.execute(update(PTORequest).where(col(PTORequest.approver_id) == user_id).values(approver_id=None))

    await session.delete(user)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.USER,
        entity_id=user_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )
    await session.commit()
