# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from pto_tracker.api.deps import AdminDep, ViewerDep
from pto_tracker.db import SessionDep
from pto_tracker.schemas.balance import (
    MAX_YEAR,
    MIN_YEAR,
    BalanceCalculationResponse,
    BalanceListResponse,
    BalanceResponse,
    CalculateBalanceRequest,
    CreateBalanceRequest,
    UpdateBalanceRequest,
)
from pto_tracker.services import balance as balance_service

balances_router = APIRouter(prefix="/balances", tags=["balances"])


@balances_router.post("/calculate", response_model=BalanceCalculationResponse)
async def calculate_balance(
    payload: CalculateBalanceRequest,
    session: SessionDep,
    auth: ViewerDep,
) -> BalanceCalculationResponse:
    """Compute an employee's available hours for a year, optionally storing the result."""
    return await balance_service.calculate_balance(session, auth, payload)


@balances_router.post("", response_model=BalanceResponse, status_code=status.HTTP_201_CREATED)
async def create_balance(
    payload: CreateBalanceRequest,
    session: SessionDep,
    auth: AdminDep,
) -> BalanceResponse:
    """Store a yearly balance (admin only)."""
    return await balance_service.create_balance(session, auth, payload)


@balances_router.get("", response_model=BalanceListResponse)
async def list_balances(
    session: SessionDep,
    auth: ViewerDep,
    employee_id: uuid.UUID | None = Query(default=None),
    year: int | None = Query(default=None, ge=MIN_YEAR, le=MAX_YEAR),
    policy_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> BalanceListResponse:
    return await balance_service.list_balances(session, employee_id, year, policy_id, offset, limit)


@balances_router.get("/{balance_id}", response_model=BalanceResponse)
async def get_balance(
    balance_id: uuid.UUID,
    session: SessionDep,
    auth: ViewerDep,
) -> BalanceResponse:
    return await balance_service.get_balance(session, balance_id)


@balances_router.patch("/{balance_id}", response_model=BalanceResponse)
async def update_balance(
    balance_id: uuid.UUID,
    payload: UpdateBalanceRequest,
    session: SessionDep,
    auth: AdminDep,
) -> BalanceResponse:
    """Adjust stored accrued, used or carryover hours (admin only)."""
    return await balance_service.update_balance(session, auth, balance_id, payload)


@balances_router.delete("/{balance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_balance(
    balance_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    await balance_service.delete_balance(session, auth, balance_id)
