# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from pto_tracker.exceptions import AppError
from pto_tracker.models.employee import EmployeeProfile
from pto_tracker.models.enums import AuditAction, AuditEntityType
from pto_tracker.models.team import Team
from pto_tracker.models.user import User
from pto_tracker.schemas.team import TeamListResponse, TeamMember, TeamResponse
from pto_tracker.services.audit import model_to_audit_dict, write_audit_log
from pto_tracker.services.user import build_user_summary, get_user_or_none

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from pto_tracker.schemas.auth import AuthContext
    from pto_tracker.schemas.team import CreateTeamRequest, UpdateTeamRequest


async def _get_team_or_404(session: AsyncSession, team_id: uuid.UUID) -> Team:
    result = await session.execute(select(Team).where(col(Team.id) == team_id))
    team = result.scalar_one_or_none()
    if team is None:
        raise AppError("Team not found", status_code=404)
    return team


async def _ensure_name_free(session: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> None:
    query = select(Team.id).where(col(Team.name) == name)
    if exclude_id is not None:
        query = query.where(col(Team.id) != exclude_id)
    result = await session.execute(query)
    if result.scalar_one_or_none() is not None:
        raise AppError("A team with this name already exists", status_code=409)


async def _ensure_manager_exists(session: AsyncSession, manager_id: uuid.UUID | None) -> None:
    if manager_id is not None and await get_user_or_none(session, manager_id) is None:
        raise AppError("Invalid reference", status_code=400)


async def _load_members(session: AsyncSession, team_id: uuid.UUID) -> list[TeamMember]:
    result = await session.execute(
        select(EmployeeProfile, User)
        .join(User, col(User.id) == col(EmployeeProfile.user_id))
        .where(col(EmployeeProfile.team_id) == team_id)
        .order_by(col(User.name))
    )
    return [
        TeamMember(
            employee_id=employee.id,
            user_id=user.id,
            name=user.name,
            email=user.email,
            title=employee.title,
        )
        for employee, user in result.all()
    ]


async def _build_team_response(session: AsyncSession, team: Team) -> TeamResponse:
    manager = await get_user_or_none(session, team.manager_id)
    return TeamResponse(
        id=team.id,
        name=team.name,
        description=team.description,
        manager=build_user_summary(manager),
        members=await _load_members(session, team.id),
        created_at=team.created_at,
    )


async def create_team(session: AsyncSession, auth: AuthContext, payload: CreateTeamRequest) -> TeamResponse:
    await _ensure_name_free(session, payload.name)
    await _ensure_manager_exists(session, payload.manager_id)

    team = Team(name=payload.name, description=payload.description, manager_id=payload.manager_id)
    session.add(team)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.TEAM,
        entity_id=team.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(team),
    )

    await session.commit()
    await session.refresh(team)
    return await _build_team_response(session, team)


async def get_team(session: AsyncSession, team_id: uuid.UUID) -> TeamResponse:
    team = await _get_team_or_404(session, team_id)
    return await _build_team_response(session, team)


async def list_teams(session: AsyncSession, offset: int = 0, limit: int = 50) -> TeamListResponse:
    """List teams by name, each with its members."""
    count_result = await session.execute(select(func.count()).select_from(Team))
    total = count_result.scalar_one()

    result = await session.execute(select(Team).order_by(col(Team.name)).offset(offset).limit(limit))
    teams = list(result.scalars().all())
    return TeamListResponse(items=[await _build_team_response(session, t) for t in teams], total=total)


async def update_team(
    session: AsyncSession,
    auth: AuthContext,
    team_id: uuid.UUID,
    payload: UpdateTeamRequest,
) -> TeamResponse:
    team = await _get_team_or_404(session, team_id)
    before_dict = model_to_audit_dict(team)

    changes = payload.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    elif changes["name"] != team.name:
        await _ensure_name_free(session, changes["name"], exclude_id=team.id)
    await _ensure_manager_exists(session, changes.get("manager_id"))

    for field, value in changes.items():
        setattr(team, field, value)

    session.add(team)
    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.TEAM,
        entity_id=team.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(team),
    )

    await session.commit()
    await session.refresh(team)
    return await _build_team_response(session, team)


async def delete_team(session: AsyncSession, auth: AuthContext, team_id: uuid.UUID) -> None:
    """Delete a team; its members stay, with no team."""
    team = await _get_team_or_404(session, team_id)
    before_dict = model_to_audit_dict(team)

    result = await session.execute(select(EmployeeProfile).where(col(EmployeeProfile.team_id) == team_id))
    for member in result.scalars().all():
        member.team_id = None
        session.add(member)

    await session.delete(team)
    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.TEAM,
        entity_id=team_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )
    await session.commit()
