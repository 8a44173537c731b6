# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from pto_tracker.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase


class EmployeeProfile(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """Employment details attached one-to-one to a user."""

    __tablename__ = "employee_profile"

    user_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
        ),
    )
    title: str | None = Field(default=None, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    start_date: date | None = None
    manager_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True, index=True),
    )
    team_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("team.id", ondelete="SET NULL"), nullable=True, index=True),
    )
