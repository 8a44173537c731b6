"""initial schema

Revision ID: 0001
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps(*, updated: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return columns


def upgrade() -> None:
    op.create_table(
        "app_user",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), server_default="EMPLOYEE", nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_app_user_email", "app_user", ["email"], unique=True)

    op.create_table(
        "team",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("manager_id", sa.Uuid(), sa.ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_team_manager_id", "team", ["manager_id"])

    op.create_table(
        "employee_profile",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "user_id", sa.Uuid(), sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, unique=True
        ),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("department", sa.String(length=255), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("manager_id", sa.Uuid(), sa.ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True),
        sa.Column("team_id", sa.Uuid(), sa.ForeignKey("team.id", ondelete="SET NULL"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_employee_profile_user_id", "employee_profile", ["user_id"])
    op.create_index("ix_employee_profile_manager_id", "employee_profile", ["manager_id"])
    op.create_index("ix_employee_profile_team_id", "employee_profile", ["team_id"])

    op.create_table(
        "pto_policy",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("accrual_hrs_per_month", sa.Float(), nullable=False),
        sa.Column("carryover_max", sa.Float(), nullable=False),
        sa.Column("effective_on", sa.Date(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "pto_balance",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "employee_id", sa.Uuid(), sa.ForeignKey("employee_profile.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("policy_id", sa.Uuid(), sa.ForeignKey("pto_policy.id", ondelete="CASCADE"), nullable=False),
        sa.Column("accrued", sa.Float(), server_default="0", nullable=False),
        sa.Column("used", sa.Float(), server_default="0", nullable=False),
        sa.Column("carryover", sa.Float(), server_default="0", nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("employee_id", "year", name="uq_balance_employee_year"),
    )
    op.create_index("ix_pto_balance_employee_id", "pto_balance", ["employee_id"])
    op.create_index("ix_pto_balance_year", "pto_balance", ["year"])
    op.create_index("ix_pto_balance_policy_id", "pto_balance", ["policy_id"])

    op.create_table(
        "pto_request",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "employee_id", sa.Uuid(), sa.ForeignKey("employee_profile.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("hours", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=50), server_default="DRAFT", nullable=False),
        sa.Column("approver_id", sa.Uuid(), sa.ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True),
        sa.Column("note", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_pto_request_employee_id", "pto_request", ["employee_id"])
    op.create_index("ix_pto_request_start_date", "pto_request", ["start_date"])
    op.create_index("ix_pto_request_status", "pto_request", ["status"])
    op.create_index("ix_pto_request_approver_id", "pto_request", ["approver_id"])
    op.create_index("ix_request_employee_status", "pto_request", ["employee_id", "status"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_audit_actor_created", "audit_log", ["actor_id", "created_at"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("pto_request")
    op.drop_table("pto_balance")
    op.drop_table("pto_policy")
    op.drop_table("employee_profile")
    op.drop_table("team")
    op.drop_table("app_user")
