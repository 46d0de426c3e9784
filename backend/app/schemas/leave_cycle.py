# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from app.models.enums import LeaveCycleStatus


class CreateLeaveCycleRequest(BaseModel):
    """Open the cycle containing ``year`` (default: current year) for one employee."""

    employee_id: uuid.UUID
    leave_type: str = Field(min_length=1, max_length=100)
    year: int | None = Field(default=None, ge=1900, le=9999)


class SetupLeaveCyclesRequest(BaseModel):
    """Open cycles for every active employee under every active policy."""

    year: int | None = Field(default=None, ge=1900, le=9999)


class LeaveCycleResponse(BaseModel):
    """Response schema for a leave cycle."""

    id: uuid.UUID
    employee_id: uuid.UUID
    leave_type_id: uuid.UUID
    leave_type: str
    cycle_start_year: int
    cycle_end_year: int
    total_carried: float
    status: LeaveCycleStatus


class SetupLeaveCyclesResponse(BaseModel):
    """Summary of a cycle setup run."""

    year: int
    created: list[LeaveCycleResponse]
    skipped: int
