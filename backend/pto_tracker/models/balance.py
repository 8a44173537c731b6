# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from pto_tracker.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase


class PTOBalance(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """Stored yearly balance for an employee; one row per (employee, year)."""

    __tablename__ = "pto_balance"
    __table_args__ = (sa.UniqueConstraint("employee_id", "year", name="uq_balance_employee_year"),)

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(
            sa.Uuid, sa.ForeignKey("employee_profile.id", ondelete="CASCADE"), nullable=False, index=True
        ),
    )
    year: int = Field(index=True)
    policy_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("pto_policy.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    accrued: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    used: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
    carryover: float = Field(default=0, sa_column_kwargs={"server_default": "0"})
