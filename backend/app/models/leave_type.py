from __future__ import annotations

from sqlmodel import Field

from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase


class LeaveType(UUIDBase, TimestampMixin, SoftDeleteMixin, table=True):
    """A kind of leave, e.g. Vacation or Sick."""

    __tablename__ = "leave_type"

    name: str = Field(max_length=100, unique=True)
    code: str | None = Field(default=None, max_length=20)
    description: str | None = Field(default=None, max_length=500)
    is_paid: bool = True
