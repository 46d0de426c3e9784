# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel, Field


class CreateEmployeeRequest(BaseModel):
    """Request body for registering an employee."""

    employee_no: str = Field(min_length=1, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=255)
    hire_date: date | None = None
    regularization_date: date | None = None
    employment_status: str | None = Field(default=None, max_length=50)


class EmployeeResponse(BaseModel):
    """Response schema for an employee."""

    id: uuid.UUID
    employee_no: str
    first_name: str
    middle_name: str | None
    last_name: str
    email: str | None
    hire_date: date | None
    regularization_date: date | None
    employment_status: str | None
    is_active: bool


class EmployeeListResponse(BaseModel):
    """Paginated list of employees."""

    items: list[EmployeeResponse]
    total: int
