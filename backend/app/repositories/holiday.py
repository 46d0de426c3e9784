from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import extract, func, select
from sqlmodel import col

from app.models.holiday import Holiday

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession


class HolidayRepository:
    """Queries over active holidays."""

    async def find_by_id(self, holiday_id: uuid.UUID, session: AsyncSession) -> Holiday | None:
        return await session.get(Holiday, holiday_id)

    async def find_by_date(self, day: date, session: AsyncSession) -> Holiday | None:
        result = await session.execute(
            select(Holiday).where(col(Holiday.date) == day, col(Holiday.is_active).is_(True))
        )
        return result.scalars().first()

    async def find_by_date_range(self, start: date, end: date, session: AsyncSession) -> list[Holiday]:
        """Active holidays with start <= date <= end, ordered by date."""
        result = await session.execute(
            select(Holiday)
            .where(
                col(Holiday.is_active).is_(True),
                col(Holiday.date) >= start,
                col(Holiday.date) <= end,
            )
            .order_by(col(Holiday.date))
        )
        return list(result.scalars().all())

    async def find_all(
        self,
        session: AsyncSession,
        year: int | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[Holiday], int]:
        filters = [col(Holiday.is_active).is_(True)]
        if year is not None:
            filters.append(extract("year", col(Holiday.date)) == year)

        count_result = await session.execute(select(func.count()).select_from(Holiday).where(*filters))
        total = count_result.scalar_one()

        result = await session.execute(
            select(Holiday).where(*filters).order_by(col(Holiday.date)).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def create(self, holiday: Holiday, session: AsyncSession) -> Holiday:
        session.add(holiday)
        await session.flush()
        return holiday

    async def soft_delete(self, holiday: Holiday, is_active: bool, session: AsyncSession) -> Holiday:
        holiday.is_active = is_active
        await session.flush()
        return holiday
