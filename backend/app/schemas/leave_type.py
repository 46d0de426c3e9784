# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, Field


class CreateLeaveTypeRequest(BaseModel):
    """Request body for creating a leave type."""

    name: str = Field(min_length=1, max_length=100)
    code: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=500)
    is_paid: bool = True


class UpdateLeaveTypeRequest(BaseModel):
    """Partial update of a leave type. Omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    code: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=500)
    is_paid: bool | None = None


class SetActiveRequest(BaseModel):
    """Soft delete or restore a record."""

    is_active: bool


class LeaveTypeResponse(BaseModel):
    """Response schema for a leave type."""

    id: uuid.UUID
    name: str
    code: str | None
    description: str | None
    is_paid: bool
    is_active: bool


class LeaveTypeListResponse(BaseModel):
    """List of leave types."""

    items: list[LeaveTypeResponse]
    total: int
