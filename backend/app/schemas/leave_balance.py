# ruff: noqa: TC003
from __future__ import annotations

import enum
import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from app.models.enums import LeaveBalanceStatus


class CreateLeaveBalanceRequest(BaseModel):
    """Request body for opening a yearly leave balance."""

    employee_id: uuid.UUID
    leave_type_id: uuid.UUID
    year: int = Field(ge=1900, le=9999)
    remarks: str | None = None


class GenerateBalancesRequest(BaseModel):
    """Open balances for every active employee and policy in a year."""

    year: int = Field(ge=1900, le=9999)


class LeaveBalanceResponse(BaseModel):
    """Response schema for a leave balance."""

    id: uuid.UUID
    employee_id: uuid.UUID
    leave_type_id: uuid.UUID
    policy_id: uuid.UUID
    year: int
    beginning_balance: float
    earned: float
    used: float
    carried_over: float
    encashed: float
    remaining: float
    last_transaction_date: datetime | None
    status: LeaveBalanceStatus
    remarks: str | None


class LeaveBalanceListResponse(BaseModel):
    """List of leave balances."""

    items: list[LeaveBalanceResponse]
    total: int


class SkipReason(enum.StrEnum):
    INELIGIBLE = "ineligible"
    BALANCE_ALREADY_EXISTS = "balance_already_exists"


class SkippedBalance(BaseModel):
    """A balance the generator did not create, with the reason."""

    employee_id: uuid.UUID
    leave_type_id: uuid.UUID
    reason: SkipReason
    details: str | None = None


class GenerateBalancesResponse(BaseModel):
    """Summary of a yearly balance generation run."""

    year: int
    created: list[LeaveBalanceResponse]
    skipped: list[SkippedBalance]


class ResetBalancesRequest(BaseModel):
    """Return every balance of a year to its opening state."""

    year: int = Field(ge=1900, le=9999)


class ResetBalancesResponse(BaseModel):
    """Number of balances reset for a year."""

    year: int
    reset_count: int


class LeaveTransactionResponse(BaseModel):
    """One balance movement."""

    id: uuid.UUID
    balance_id: uuid.UUID
    request_id: uuid.UUID | None
    transaction_type: str
    days: float
    remarks: str
    created_at: datetime


class LeaveTransactionListResponse(BaseModel):
    """Balance movements in chronological order."""

    items: list[LeaveTransactionResponse]
    total: int
