from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from app.models.enums import LeaveCycleStatus
from app.models.leave_cycle import LeaveCycle

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession


class LeaveCycleRepository:
    """Leave cycle lookups and writes."""

    async def find_by_id(self, cycle_id: uuid.UUID, session: AsyncSession) -> LeaveCycle | None:
        return await session.get(LeaveCycle, cycle_id)

    async def get_active_cycle(
        self,
        employee_id: uuid.UUID,
        leave_type_id: uuid.UUID,
        session: AsyncSession,
    ) -> LeaveCycle | None:
        """Most recent ACTIVE cycle for an employee and leave type."""
        result = await session.execute(
            select(LeaveCycle)
            .where(
                col(LeaveCycle.employee_id) == employee_id,
                col(LeaveCycle.leave_type_id) == leave_type_id,
                col(LeaveCycle.status) == LeaveCycleStatus.ACTIVE.value,
                col(LeaveCycle.is_active).is_(True),
            )
            .order_by(col(LeaveCycle.cycle_start_year).desc())
            .limit(1)
        )
        return result.scalars().first()

    async def find_overlapping_cycle(
        self,
        employee_id: uuid.UUID,
        leave_type_id: uuid.UUID,
        start_year: int,
        end_year: int,
        session: AsyncSession,
    ) -> LeaveCycle | None:
        """Any cycle, active or completed, sharing a year with [start_year, end_year)."""
        result = await session.execute(
            select(LeaveCycle)
            .where(
                col(LeaveCycle.employee_id) == employee_id,
                col(LeaveCycle.leave_type_id) == leave_type_id,
                col(LeaveCycle.is_active).is_(True),
                col(LeaveCycle.cycle_start_year) < end_year,
                col(LeaveCycle.cycle_end_year) > start_year,
            )
            .limit(1)
        )
        return result.scalars().first()

    async def create(self, cycle: LeaveCycle, session: AsyncSession) -> LeaveCycle:
        session.add(cycle)
        await session.flush()
        return cycle

    async def close_cycle(self, cycle: LeaveCycle, session: AsyncSession) -> LeaveCycle:
        cycle.status = LeaveCycleStatus.COMPLETED.value
        await session.flush()
        return cycle
