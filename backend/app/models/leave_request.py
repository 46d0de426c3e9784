# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase
from app.models.enums import LeaveRequestStatus


class LeaveRequest(UUIDBase, TimestampMixin, SoftDeleteMixin, table=True):
    """An employee's leave request with approval workflow state."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_request_employee_dates", "employee_id", "start_date", "end_date"),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_date_order"),
        sa.CheckConstraint("total_days > 0", name="ck_leave_request_total_positive"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="CASCADE"), nullable=False),
    )
    # Denormalized leave type name.
    leave_type: str = Field(max_length=100)
    start_date: date
    end_date: date
    total_days: float
    reason: str = ""
    balance_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_balance.id", ondelete="CASCADE"), nullable=False),
    )
    status: str = Field(
        default=LeaveRequestStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    approval_by: str | None = Field(default=None, max_length=255)
    approval_date: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    remarks: str = ""
