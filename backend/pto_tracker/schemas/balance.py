# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from pto_tracker.schemas.policy import PolicySummary

MIN_YEAR = 2000
MAX_YEAR = 3000

# ---------------------------------------------------------------------------
# Stored balance schemas
# ---------------------------------------------------------------------------


class CreateBalanceRequest(BaseModel):
    """Request body for storing a yearly balance."""

    employee_id: uuid.UUID
    year: int = Field(ge=MIN_YEAR, le=MAX_YEAR)
    policy_id: uuid.UUID
    accrued: float = Field(default=0, ge=0)
    used: float = Field(default=0, ge=0)
    carryover: float = Field(default=0, ge=0)


class UpdateBalanceRequest(BaseModel):
    """Partial update of a stored balance's hour totals."""

    accrued: float | None = Field(default=None, ge=0)
    used: float | None = Field(default=None, ge=0)
    carryover: float | None = Field(default=None, ge=0)


class BalanceResponse(BaseModel):
    """A stored yearly balance."""

    id: uuid.UUID
    employee_id: uuid.UUID
    employee_name: str
    year: int
    policy: PolicySummary
    accrued: float
    used: float
    carryover: float
    created_at: datetime
    updated_at: datetime


class BalanceListResponse(BaseModel):
    """Stored balances matching a filter."""

    items: list[BalanceResponse]
    total: int


# ---------------------------------------------------------------------------
# Calculation schemas
# ---------------------------------------------------------------------------


class CalculateBalanceRequest(BaseModel):
    """Request body for computing an employee's balance for a year."""

    employee_id: uuid.UUID
    year: int = Field(ge=MIN_YEAR, le=MAX_YEAR)
    policy_id: uuid.UUID
    persist: bool = Field(default=False, description="Store the result as the employee's balance for the year")


class CalculationEmployee(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    start_date: date | None


class CalculationDetail(BaseModel):
    """The computed figures, in hours."""

    accrual_months: int
    total_accrual: float
    carryover: float
    total_used: float
    available_balance: float
    approved_request_count: int


class ExistingBalance(BaseModel):
    id: uuid.UUID
    accrued: float
    used: float
    carryover: float


class BalanceCalculationResponse(BaseModel):
    """Calculated balance plus the identity of the employee and policy used."""

    employee: CalculationEmployee
    policy: PolicySummary
    year: int
    calculation: CalculationDetail
    existing_balance: ExistingBalance | None
