# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from pto_tracker.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase


class Team(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """A named group of employees with an optional managing user."""

    __tablename__ = "team"

    name: str = Field(max_length=255, unique=True)
    description: str | None = None
    manager_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True, index=True),
    )
