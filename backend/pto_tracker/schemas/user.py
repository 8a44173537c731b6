# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from pto_tracker.models.enums import Role

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class CreateUserRequest(BaseModel):
    """Request body for creating a user."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(max_length=255, pattern=_EMAIL_PATTERN)
    password: str = Field(min_length=8, max_length=72)
    role: Role = Role.EMPLOYEE


class UpdateUserRequest(BaseModel):
    """Partial update of a user; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, max_length=255, pattern=_EMAIL_PATTERN)
    role: Role | None = None


class UserSummary(BaseModel):
    """Compact user reference embedded in other responses."""

    id: uuid.UUID
    name: str
    email: str


class UserResponse(BaseModel):
    """Response schema for a user. The password hash is never exposed."""

    id: uuid.UUID
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    """Paginated list of users."""

    items: list[UserResponse]
    total: int
