from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import UUIDBase


def _now_utc() -> datetime:
    return datetime.now(UTC)


class ActivityLog(UUIDBase, table=True):
    """Immutable record of every mutating operation, successful or not."""

    __tablename__ = "activity_log"
    __table_args__ = (sa.Index("ix_activity_entity_action", "entity", "action"),)

    action: str = Field(max_length=50)
    entity: str = Field(max_length=50)
    user_id: str = Field(max_length=255, index=True)
    username: str | None = Field(default=None, max_length=255)
    details: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    description: str | None = None
    ip_address: str | None = Field(default=None, max_length=64)
    user_agent: str | None = Field(default=None, max_length=512)
    session_id: str | None = Field(default=None, max_length=255)
    is_success: bool = True
    error_message: str | None = None
    status_code: int | None = None
    duration_ms: int | None = None
    created_at: datetime = Field(
        default_factory=_now_utc,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
    created_by: str = Field(max_length=255)
