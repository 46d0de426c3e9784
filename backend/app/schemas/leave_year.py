# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field

from app.schemas.leave_request import DateInput


class CreateLeaveYearRequest(BaseModel):
    """Cutoff period of a new leave year. Dates are validated by the service."""

    cutoff_start_date: DateInput
    cutoff_end_date: DateInput
    remarks: str | None = Field(default=None, max_length=500)


class UpdateLeaveYearRequest(BaseModel):
    """Partial update of a leave year. ``is_active=false`` soft deletes it."""

    cutoff_start_date: DateInput | None = None
    cutoff_end_date: DateInput | None = None
    remarks: str | None = Field(default=None, max_length=500)
    is_active: bool | None = None


class LeaveYearResponse(BaseModel):
    """Response schema for a leave year configuration."""

    id: uuid.UUID
    cutoff_start_date: date
    cutoff_end_date: date
    leave_year: str
    balance_year: int
    remarks: str | None
    is_active: bool


class LeaveYearListResponse(BaseModel):
    """Leave years, most recent first."""

    items: list[LeaveYearResponse]
    total: int
