# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase
from app.models.enums import LeaveCycleStatus


class LeaveCycle(UUIDBase, TimestampMixin, SoftDeleteMixin, table=True):
    """Multi-year window over which an employee's carry-over for a leave type is tracked."""

    __tablename__ = "leave_cycle"
    __table_args__ = (
        sa.Index("ix_leave_cycle_employee_type", "employee_id", "leave_type_id"),
        sa.CheckConstraint("cycle_start_year < cycle_end_year", name="ck_leave_cycle_year_order"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
    )
    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="CASCADE"), nullable=False),
    )
    leave_type: str = Field(max_length=100)
    # Half-open: the cycle covers cycle_start_year up to, not including, cycle_end_year.
    cycle_start_year: int
    cycle_end_year: int
    total_carried: float = 0
    status: str = Field(
        default=LeaveCycleStatus.ACTIVE, max_length=20, index=True, sa_column_kwargs={"server_default": "ACTIVE"}
    )
