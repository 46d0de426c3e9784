from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from app.models.leave_type import LeaveType

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession


class LeaveTypeRepository:
    """Leave type lookups and writes."""

    async def find_by_id(self, leave_type_id: uuid.UUID, session: AsyncSession) -> LeaveType | None:
        return await session.get(LeaveType, leave_type_id)

    async def find_by_name(self, name: str, session: AsyncSession) -> LeaveType | None:
        """Case-insensitive lookup, active or not."""
        result = await session.execute(
            select(LeaveType).where(func.lower(col(LeaveType.name)) == name.strip().lower())
        )
        return result.scalars().first()

    async def find_all(self, session: AsyncSession, include_inactive: bool = False) -> list[LeaveType]:
        query = select(LeaveType).order_by(col(LeaveType.name))
        if not include_inactive:
            query = query.where(col(LeaveType.is_active).is_(True))
        result = await session.execute(query)
        return list(result.scalars().all())

    async def create(self, leave_type: LeaveType, session: AsyncSession) -> LeaveType:
        session.add(leave_type)
        await session.flush()
        return leave_type

    async def update(self, leave_type: LeaveType, values: dict[str, Any], session: AsyncSession) -> LeaveType:
        for key, value in values.items():
            setattr(leave_type, key, value)
        await session.flush()
        return leave_type

    async def soft_delete(self, leave_type: LeaveType, is_active: bool, session: AsyncSession) -> LeaveType:
        leave_type.is_active = is_active
        await session.flush()
        return leave_type
