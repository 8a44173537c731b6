# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# API request / response schemas
# ---------------------------------------------------------------------------


class CreatePolicyRequest(BaseModel):
    """Request body for creating a PTO policy."""

    name: str = Field(min_length=1, max_length=255)
    accrual_hrs_per_month: float = Field(ge=0, description="Hours accrued per month of tenure")
    carryover_max: float = Field(ge=0, description="Most hours that may carry into the next year")
    effective_on: date


class UpdatePolicyRequest(BaseModel):
    """Partial update of a PTO policy."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    accrual_hrs_per_month: float | None = Field(default=None, ge=0)
    carryover_max: float | None = Field(default=None, ge=0)
    effective_on: date | None = None


class PolicySummary(BaseModel):
    """Policy fields echoed alongside balances and calculations."""

    id: uuid.UUID
    name: str
    accrual_hrs_per_month: float
    carryover_max: float


class PolicyResponse(BaseModel):
    """Response schema for a PTO policy."""

    id: uuid.UUID
    name: str
    accrual_hrs_per_month: float
    carryover_max: float
    effective_on: date
    created_at: datetime
    updated_at: datetime


class PolicyListResponse(BaseModel):
    """Paginated list of policies."""

    items: list[PolicyResponse]
    total: int
