# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from pto_tracker.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from pto_tracker.models.enums import RequestStatus


class PTORequest(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """An employee's PTO request with approval workflow state."""

    __tablename__ = "pto_request"
    __table_args__ = (sa.Index("ix_request_employee_status", "employee_id", "status"),)

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("employee_profile.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )
    start_date: datetime = Field(sa_type=sa.DateTime(timezone=True), index=True)  # ty: ignore[invalid-argument-type]
    end_date: datetime = Field(sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    hours: float
    status: str = Field(
        default=RequestStatus.DRAFT, max_length=50, index=True, sa_column_kwargs={"server_default": "DRAFT"}
    )
    approver_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True, index=True),
    )
    note: str | None = None
