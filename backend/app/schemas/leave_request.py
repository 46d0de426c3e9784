# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from app.models.enums import LeaveRequestStatus

# Date-only strings, calendar dates and instants are all accepted; the
# service normalizes them to calendar dates.
DateInput = date | datetime | str


class CreateLeaveRequestPayload(BaseModel):
    """Request body for filing a leave request."""

    employee_id: uuid.UUID
    leave_type: str = Field(min_length=1, max_length=100)
    start_date: DateInput | None = None
    end_date: DateInput | None = None
    total_days: float | None = Field(default=None, multiple_of=0.5)
    is_half_day: bool = False
    reason: str = ""


class UpdateLeaveRequestPayload(BaseModel):
    """Partial update of a PENDING leave request."""

    leave_type: str | None = Field(default=None, min_length=1, max_length=100)
    start_date: DateInput | None = None
    end_date: DateInput | None = None
    total_days: float | None = Field(default=None, multiple_of=0.5)
    is_half_day: bool = False
    reason: str | None = None


class DecisionPayload(BaseModel):
    """Approver remarks for approve or reject."""

    remarks: str | None = Field(default=None, max_length=1000)


class CancelPayload(BaseModel):
    """The employee cancelling their own request."""

    employee_id: uuid.UUID


class LeaveRequestResponse(BaseModel):
    """Response schema for a leave request."""

    id: uuid.UUID
    employee_id: uuid.UUID
    leave_type_id: uuid.UUID
    leave_type: str
    start_date: date
    end_date: date
    total_days: float
    reason: str
    balance_id: uuid.UUID
    status: LeaveRequestStatus
    approval_by: str | None
    approval_date: datetime | None
    remarks: str
    created_at: datetime


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests."""

    items: list[LeaveRequestResponse]
    total: int
