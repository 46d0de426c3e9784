from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from app.models.activity_log import ActivityLog

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


class ActivityLogRepository:
    """Append-only activity log writes."""

    async def create(self, entry: ActivityLog, session: AsyncSession) -> ActivityLog:
        session.add(entry)
        await session.flush()
        return entry

    async def find_all(
        self,
        session: AsyncSession,
        entity: str | None = None,
        action: str | None = None,
    ) -> list[ActivityLog]:
        query = select(ActivityLog)
        if entity is not None:
            query = query.where(col(ActivityLog.entity) == entity)
        if action is not None:
            query = query.where(col(ActivityLog.action) == action)
        result = await session.execute(query.order_by(col(ActivityLog.created_at)))
        return list(result.scalars().all())
