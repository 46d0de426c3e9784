from __future__ import annotations

import datetime

from sqlmodel import Field

from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase


class Holiday(UUIDBase, TimestampMixin, SoftDeleteMixin, table=True):
    """A non-business calendar date excluded from leave day counts."""

    __tablename__ = "holiday"

    date: datetime.date = Field(index=True)
    name: str = Field(max_length=255)
    description: str | None = Field(default=None, max_length=500)
