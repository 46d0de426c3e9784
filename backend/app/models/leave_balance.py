# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase
from app.models.enums import LeaveBalanceStatus


class LeaveBalance(UUIDBase, TimestampMixin, SoftDeleteMixin, table=True):
    """Remaining days of one leave type for an employee in a given year."""

    __tablename__ = "leave_balance"
    __table_args__ = (
        sa.Index(
            "uq_balance_employee_type_year",
            "employee_id",
            "leave_type_id",
            "year",
            unique=True,
            postgresql_where=sa.text("is_active"),
            sqlite_where=sa.text("is_active"),
        ),
        sa.CheckConstraint("remaining >= 0", name="ck_balance_remaining_non_negative"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    policy_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_policy.id", ondelete="CASCADE"), nullable=False),
    )
    year: int = Field(index=True)
    beginning_balance: float = 0
    earned: float = 0
    used: float = 0
    carried_over: float = 0
    encashed: float = 0
    remaining: float = 0
    last_transaction_date: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    status: str = Field(
        default=LeaveBalanceStatus.OPEN, max_length=20, index=True, sa_column_kwargs={"server_default": "OPEN"}
    )
    remarks: str | None = None
