# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from app.models.base import TimestampMixin, UUIDBase


class LeaveTransaction(UUIDBase, TimestampMixin, table=True):
    """Append-only record of every balance movement."""

    __tablename__ = "leave_transaction"

    balance_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_balance.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    request_id: uuid.UUID | None = Field(default=None, sa_type=sa.Uuid)
    transaction_type: str = Field(max_length=50)
    # Signed: negative consumes the balance, positive restores it.
    days: float
    remarks: str = ""
