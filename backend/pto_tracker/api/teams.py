# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from pto_tracker.api.deps import ManagerDep, ViewerDep
from pto_tracker.db import SessionDep
from pto_tracker.schemas.team import CreateTeamRequest, TeamListResponse, TeamResponse, UpdateTeamRequest
from pto_tracker.services import team as team_service

teams_router = APIRouter(prefix="/teams", tags=["teams"])


@teams_router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(
    payload: CreateTeamRequest,
    session: SessionDep,
    auth: ManagerDep,
) -> TeamResponse:
    """Create a team (manager or admin)."""
    return await team_service.create_team(session, auth, payload)


@teams_router.get("", response_model=TeamListResponse)
async def list_teams(
    session: SessionDep,
    auth: ViewerDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> TeamListResponse:
    return await team_service.list_teams(session, offset, limit)


@teams_router.get("/{team_id}", response_model=TeamResponse)
async def get_team(
    team_id: uuid.UUID,
    session: SessionDep,
    auth: ViewerDep,
) -> TeamResponse:
    """Get a team with its manager and members."""
    return await team_service.get_team(session, team_id)


@teams_router.patch("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: uuid.UUID,
    payload: UpdateTeamRequest,
    session: SessionDep,
    auth: ManagerDep,
) -> TeamResponse:
    return await team_service.update_team(session, auth, team_id, payload)


@teams_router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(
    team_id: uuid.UUID,
    session: SessionDep,
    auth: ManagerDep,
) -> None:
    """Delete a team; members are kept without a team."""
    await team_service.delete_team(session, auth, team_id)
