"""Yearly PTO balance calculation.

A pure function of its arguments: no I/O, no shared state. Callers load the
policy, tenure start, approved requests and prior-year balance, then hand
the values to :func:`compute_balance`.

Hours are handled as :class:`~decimal.Decimal` so that sums and products of
values such as ``6.67`` stay exact (``6.67 * 12 == 80.04``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

MONTHS_PER_YEAR = 12

Hours = Decimal | float | int | str


def to_hours(value: Hours) -> Decimal:
    """Convert a float/int/str hour amount to an exact Decimal.

    Floats go through ``str`` so ``6.67`` becomes ``Decimal("6.67")`` rather
    than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class PolicyTerms:
    """The policy parameters that drive accrual and carryover."""

    accrual_hrs_per_month: Decimal
    carryover_max: Decimal
    effective_on: date | None = None

    @classmethod
    def of(cls, accrual_hrs_per_month: Hours, carryover_max: Hours, effective_on: date | None = None) -> PolicyTerms:
        return cls(to_hours(accrual_hrs_per_month), to_hours(carryover_max), effective_on)


@dataclass(frozen=True)
class RequestUsage:
    """Hours consumed by one approved request."""

    start_date: date | datetime
    hours: Decimal

    @classmethod
    def of(cls, start_date: date | datetime, hours: Hours) -> RequestUsage:
        return cls(start_date, to_hours(hours))


@dataclass(frozen=True)
class PriorYearBalance:
    """Stored accrued/used totals for the year before the target year."""

    accrued: Decimal
    used: Decimal

    @classmethod
    def of(cls, accrued: Hours, used: Hours) -> PriorYearBalance:
        return cls(to_hours(accrued), to_hours(used))


@dataclass(frozen=True)
class BalanceResult:
    """Outcome of a balance calculation.

    ``available_balance == total_accrual + carryover - total_used`` always holds.
    """

    accrual_months: int
    total_accrual: Decimal
    carryover: Decimal
    total_used: Decimal
    available_balance: Decimal
    approved_request_count: int


def accrual_months_for(tenure_start: date | datetime | None, year: int) -> int:
    """Months of accrual in ``year``.

    A full year unless employment started during ``year``; then the months
    from the start month through December, inclusive.
    """
    if tenure_start is None or tenure_start.year != year:
        return MONTHS_PER_YEAR
    month_index = tenure_start.month - 1
    return MONTHS_PER_YEAR - month_index


def carryover_for(
    prior: PriorYearBalance | None,
    carryover_max: Decimal,
    *,
    floor_zero: bool = False,
) -> Decimal:
    """Hours carried in from the prior year, capped at ``carryover_max``.

    Only the upper bound is clamped unless ``floor_zero`` is set, so an
    overdrawn prior year produces a negative carryover.
    """
    if prior is None:
        return Decimal(0)
    carried = min(prior.accrued - prior.used, carryover_max)
    if floor_zero:
        carried = max(Decimal(0), carried)
    return carried


def compute_balance(
    policy: PolicyTerms,
    tenure_start: date | datetime | None,
    approved_requests: Iterable[RequestUsage],
    prior_year_balance: PriorYearBalance | None,
    year: int,
    *,
    floor_carryover: bool = False,
) -> BalanceResult:
    """Compute an employee's available PTO for ``year``.

    ``approved_requests`` must already be limited to APPROVED requests
    starting in ``[Jan 1 year, Jan 1 year + 1)``.
    """
    accrual_months = accrual_months_for(tenure_start, year)
    total_accrual = policy.accrual_hrs_per_month * accrual_months
    carryover = carryover_for(prior_year_balance, policy.carryover_max, floor_zero=floor_carryover)

    total_used = Decimal(0)
    count = 0
    for usage in approved_requests:
        total_used += usage.hours
        count += 1

    return BalanceResult(
        accrual_months=accrual_months,
        total_accrual=total_accrual,
        carryover=carryover,
        total_used=total_used,
        available_balance=total_accrual + carryover - total_used,
        approved_request_count=count,
    )
