# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from pto_tracker.models.enums import Role
from pto_tracker.schemas.user import UserSummary


class CreateEmployeeRequest(BaseModel):
    """Request body for creating an employee profile for an existing user."""

    user_id: uuid.UUID
    title: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    start_date: date | None = None
    manager_id: uuid.UUID | None = None
    team_id: uuid.UUID | None = None


class UpdateEmployeeRequest(BaseModel):
    """Partial update of an employee profile.

    Fields explicitly sent as ``null`` are cleared; omitted fields are kept.
    """

    title: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    start_date: date | None = None
    manager_id: uuid.UUID | None = None
    team_id: uuid.UUID | None = None


class TeamSummary(BaseModel):
    """Compact team reference embedded in other responses."""

    id: uuid.UUID
    name: str
    description: str | None


class EmployeeResponse(BaseModel):
    """Response schema for an employee profile with its user, manager and team."""

    id: uuid.UUID
    user_id: uuid.UUID
    name: str
    email: str
    role: Role
    title: str | None
    department: str | None
    start_date: date | None
    manager: UserSummary | None
    team: TeamSummary | None
    created_at: datetime


class EmployeeListResponse(BaseModel):
    """List of employee profiles."""

    items: list[EmployeeResponse]
    total: int
