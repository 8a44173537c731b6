# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from pto_tracker.schemas.user import UserSummary


class CreateTeamRequest(BaseModel):
    """Request body for creating a team."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    manager_id: uuid.UUID | None = None


class UpdateTeamRequest(BaseModel):
    """Partial update of a team; ``null`` clears description or manager."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    manager_id: uuid.UUID | None = None


class TeamMember(BaseModel):
    """An employee listed under a team."""

    employee_id: uuid.UUID
    user_id: uuid.UUID
    name: str
    email: str
    title: str | None


class TeamResponse(BaseModel):
    """Response schema for a team with its manager and members."""

    id: uuid.UUID
    name: str
    description: str | None
    manager: UserSummary | None
    members: list[TeamMember]
    created_at: datetime


class TeamListResponse(BaseModel):
    """List of teams."""

    items: list[TeamResponse]
    total: int
