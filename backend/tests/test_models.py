from __future__ import annotations

import uuid
from datetime import UTC, date, datetime

from pto_tracker.models import (
    AuditLog,
    EmployeeProfile,
    PTOBalance,
    PTOPolicy,
    PTORequest,
    SQLModel,
    Team,
    User,
)
from pto_tracker.models.enums import RequestStatus, Role

EXPECTED_TABLES = {
    "app_user",
    "audit_log",
    "employee_profile",
    "pto_balance",
    "pto_policy",
    "pto_request",
    "team",
}


def test_all_tables_registered() -> None:
    assert set(SQLModel.metadata.tables.keys()) == EXPECTED_TABLES


def test_user_defaults_to_employee_role() -> None:
    user = User(name="Eden", email="eden@example.com", password_hash="x")
    assert user.role == Role.EMPLOYEE
    assert user.id is not None


def test_employee_profile_optional_fields() -> None:
    profile = EmployeeProfile(user_id=uuid.uuid4())
    assert profile.start_date is None
    assert profile.manager_id is None
    assert profile.team_id is None


def test_team_instantiation() -> None:
    team = Team(name="Engineering")
    assert team.description is None
    assert team.manager_id is None


def test_policy_instantiation() -> None:
    policy = PTOPolicy(name="US-Standard", accrual_hrs_per_month=6.67, carryover_max=40, effective_on=date(2025, 1, 1))
    assert policy.accrual_hrs_per_month == 6.67


def test_balance_defaults_and_uniqueness() -> None:
    balance = PTOBalance(employee_id=uuid.uuid4(), policy_id=uuid.uuid4(), year=2025)
    assert (balance.accrued, balance.used, balance.carryover) == (0, 0, 0)

    constraints = {c.name for c in PTOBalance.__table__.constraints}  # type: ignore[attr-defined]
    assert "uq_balance_employee_year" in constraints


def test_request_defaults() -> None:
    request = PTORequest(
        employee_id=uuid.uuid4(),
        start_date=datetime(2025, 7, 1, 9, tzinfo=UTC),
        end_date=datetime(2025, 7, 1, 17, tzinfo=UTC),
        hours=8,
    )
    assert request.status == RequestStatus.DRAFT
    assert request.approver_id is None
    assert request.note is None


def test_audit_log_instantiation() -> None:
    log = AuditLog(
        actor_id=uuid.uuid4(),
        entity_type="REQUEST",
        entity_id=uuid.uuid4(),
        action="CREATE",
    )
    assert log.before_json is None
    assert log.after_json is None
