"""Initial Leave Desk schema

Revision ID: 0001
Revises:
Create Date: 2024-06-01 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _base_columns(*, soft_delete: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]
    if soft_delete:
        columns.append(sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False))
    return columns


def _index_is_active(table: str) -> None:
    op.create_index(op.f(f"ix_{table}_is_active"), table, ["is_active"], unique=False)


def upgrade() -> None:
    op.create_table(
        "employee",
        *_base_columns(),
        sa.Column("employee_no", sa.String(length=50), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("middle_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("regularization_date", sa.Date(), nullable=True),
        sa.Column("employment_status", sa.String(length=50), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_no"),
    )
    _index_is_active("employee")

    op.create_table(
        "leave_type",
        *_base_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("code", sa.String(length=20), nullable=True),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("is_paid", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    _index_is_active("leave_type")

    op.create_table(
        "leave_policy",
        *_base_columns(),
        sa.Column("leave_type_id", sa.Uuid(), nullable=False),
        sa.Column("annual_entitlement", sa.Float(), nullable=False),
        sa.Column("carry_limit", sa.Float(), nullable=False),
        sa.Column("encash_limit", sa.Float(), nullable=False),
        sa.Column("cycle_length_years", sa.Integer(), nullable=False),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="DRAFT", nullable=False),
        sa.Column("minimum_service_months", sa.Integer(), server_default="0", nullable=False),
        sa.Column("allowed_employment_statuses", sa.JSON(), nullable=False),
        sa.Column("remarks", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(["leave_type_id"], ["leave_type.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index_is_active("leave_policy")
    op.create_index(op.f("ix_leave_policy_leave_type_id"), "leave_policy", ["leave_type_id"], unique=False)
    op.create_index(op.f("ix_leave_policy_status"), "leave_policy", ["status"], unique=False)
    op.create_index(
        "ix_leave_policy_type_effective", "leave_policy", ["leave_type_id", "effective_date"], unique=False
    )

    op.create_table(
        "leave_year_configuration",
        *_base_columns(),
        sa.Column("cutoff_start_date", sa.Date(), nullable=False),
        sa.Column("cutoff_end_date", sa.Date(), nullable=False),
        sa.Column("leave_year", sa.String(length=9), nullable=False),
        sa.Column("remarks", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _index_is_active("leave_year_configuration")
    op.create_index(
        op.f("ix_leave_year_configuration_cutoff_start_date"),
        "leave_year_configuration",
        ["cutoff_start_date"],
        unique=False,
    )
    op.create_index(
        op.f("ix_leave_year_configuration_leave_year"), "leave_year_configuration", ["leave_year"], unique=False
    )

    op.create_table(
        "leave_balance",
        *_base_columns(),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("leave_type_id", sa.Uuid(), nullable=False),
        sa.Column("policy_id", sa.Uuid(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("beginning_balance", sa.Float(), nullable=False),
        sa.Column("earned", sa.Float(), nullable=False),
        sa.Column("used", sa.Float(), nullable=False),
        sa.Column("carried_over", sa.Float(), nullable=False),
        sa.Column("encashed", sa.Float(), nullable=False),
        sa.Column("remaining", sa.Float(), nullable=False),
        sa.Column("last_transaction_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="OPEN", nullable=False),
        sa.Column("remarks", sa.String(), nullable=True),
        sa.CheckConstraint("remaining >= 0", name="ck_balance_remaining_non_negative"),
        sa.ForeignKeyConstraint(["employee_id"], ["employee.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["leave_type_id"], ["leave_type.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["policy_id"], ["leave_policy.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index_is_active("leave_balance")
    op.create_index(op.f("ix_leave_balance_employee_id"), "leave_balance", ["employee_id"], unique=False)
    op.create_index(op.f("ix_leave_balance_leave_type_id"), "leave_balance", ["leave_type_id"], unique=False)
    op.create_index(op.f("ix_leave_balance_year"), "leave_balance", ["year"], unique=False)
    op.create_index(op.f("ix_leave_balance_status"), "leave_balance", ["status"], unique=False)
    op.create_index(
        "uq_balance_employee_type_year",
        "leave_balance",
        ["employee_id", "leave_type_id", "year"],
        unique=True,
        postgresql_where=sa.text("is_active"),
        sqlite_where=sa.text("is_active"),
    )

    op.create_table(
        "leave_transaction",
        *_base_columns(soft_delete=False),
        sa.Column("balance_id", sa.Uuid(), nullable=False),
        sa.Column("request_id", sa.Uuid(), nullable=True),
        sa.Column("transaction_type", sa.String(length=50), nullable=False),
        sa.Column("days", sa.Float(), nullable=False),
        sa.Column("remarks", sa.String(), nullable=False),
        sa.ForeignKeyConstraint(["balance_id"], ["leave_balance.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_leave_transaction_balance_id"), "leave_transaction", ["balance_id"], unique=False)

    op.create_table(
        "leave_request",
        *_base_columns(),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("leave_type_id", sa.Uuid(), nullable=False),
        sa.Column("leave_type", sa.String(length=100), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_days", sa.Float(), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("balance_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="PENDING", nullable=False),
        sa.Column("approval_by", sa.String(length=255), nullable=True),
        sa.Column("approval_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("remarks", sa.String(), nullable=False),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_date_order"),
        sa.CheckConstraint("total_days > 0", name="ck_leave_request_total_positive"),
        sa.ForeignKeyConstraint(["employee_id"], ["employee.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["leave_type_id"], ["leave_type.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["balance_id"], ["leave_balance.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index_is_active("leave_request")
    op.create_index(op.f("ix_leave_request_employee_id"), "leave_request", ["employee_id"], unique=False)
    op.create_index(op.f("ix_leave_request_status"), "leave_request", ["status"], unique=False)
    op.create_index(
        "ix_leave_request_employee_dates", "leave_request", ["employee_id", "start_date", "end_date"], unique=False
    )

    op.create_table(
        "leave_cycle",
        *_base_columns(),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("leave_type_id", sa.Uuid(), nullable=False),
        sa.Column("leave_type", sa.String(length=100), nullable=False),
        sa.Column("cycle_start_year", sa.Integer(), nullable=False),
        sa.Column("cycle_end_year", sa.Integer(), nullable=False),
        sa.Column("total_carried", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="ACTIVE", nullable=False),
        sa.CheckConstraint("cycle_start_year < cycle_end_year", name="ck_leave_cycle_year_order"),
        sa.ForeignKeyConstraint(["employee_id"], ["employee.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["leave_type_id"], ["leave_type.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    _index_is_active("leave_cycle")
    op.create_index(op.f("ix_leave_cycle_status"), "leave_cycle", ["status"], unique=False)
    op.create_index("ix_leave_cycle_employee_type", "leave_cycle", ["employee_id", "leave_type_id"], unique=False)

    op.create_table(
        "holiday",
        *_base_columns(),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    _index_is_active("holiday")
    op.create_index(op.f("ix_holiday_date"), "holiday", ["date"], unique=False)

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity", sa.String(length=50), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("username", sa.String(length=255), nullable=True),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=512), nullable=True),
        sa.Column("session_id", sa.String(length=255), nullable=True),
        sa.Column("is_success", sa.Boolean(), nullable=False),
        sa.Column("error_message", sa.String(), nullable=True),
        sa.Column("status_code", sa.Integer(), nullable=True),
        sa.Column("duration_ms", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("created_by", sa.String(length=255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_activity_log_user_id"), "activity_log", ["user_id"], unique=False)
    op.create_index(op.f("ix_activity_log_created_at"), "activity_log", ["created_at"], unique=False)
    op.create_index("ix_activity_entity_action", "activity_log", ["entity", "action"], unique=False)


def downgrade() -> None:
    for table in (
        "activity_log",
        "holiday",
        "leave_cycle",
        "leave_request",
        "leave_transaction",
        "leave_balance",
        "leave_year_configuration",
        "leave_policy",
        "leave_type",
        "employee",
    ):
        op.drop_table(table)
