# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase
from app.models.enums import LeavePolicyStatus


class LeavePolicy(UUIDBase, TimestampMixin, SoftDeleteMixin, table=True):
    """Entitlement and eligibility rules governing one leave type."""

    __tablename__ = "leave_policy"
    __table_args__ = (sa.Index("ix_leave_policy_type_effective", "leave_type_id", "effective_date"),)

    leave_type_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_type.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    annual_entitlement: float = 0
    carry_limit: float = 0
    encash_limit: float = 0
    cycle_length_years: int = 1
    effective_date: date | None = None
    expiry_date: date | None = None
    status: str = Field(
        default=LeavePolicyStatus.DRAFT, max_length=20, index=True, sa_column_kwargs={"server_default": "DRAFT"}
    )
    minimum_service_months: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    # Empty list means every employment status is allowed.
    allowed_employment_statuses: list[str] = Field(default_factory=list, sa_type=sa.JSON)
    remarks: str | None = None
