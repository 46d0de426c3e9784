from __future__ import annotations

from datetime import date

from sqlmodel import Field

from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase


class Employee(UUIDBase, TimestampMixin, SoftDeleteMixin, table=True):
    """Employee master data (the "201 file") needed by leave management."""

    __tablename__ = "employee"

    employee_no: str = Field(max_length=50, unique=True)
    first_name: str = Field(max_length=100)
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str = Field(max_length=100)
    email: str | None = Field(default=None, max_length=255)
    hire_date: date | None = None
    regularization_date: date | None = None
    employment_status: str | None = Field(default=None, max_length=50)
