from __future__ import annotations

from datetime import date

from sqlmodel import Field

from pto_tracker.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase


class PTOPolicy(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """Accrual rate and carryover cap applied when computing balances."""

    __tablename__ = "pto_policy"

    name: str = Field(max_length=255, unique=True)
    accrual_hrs_per_month: float = Field(ge=0)
    carryover_max: float = Field(ge=0)
    effective_on: date
