from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import extract, select
from sqlmodel import col

from app.models.leave_year import LeaveYearConfiguration

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession


class LeaveYearRepository:
    """Leave year cutoff configuration lookups and writes. Only active rows are returned."""

    async def find_by_id(self, config_id: uuid.UUID, session: AsyncSession) -> LeaveYearConfiguration | None:
        config = await session.get(LeaveYearConfiguration, config_id)
        if config is None or not config.is_active:
            return None
        return config

    async def find_by_leave_year(self, leave_year: str, session: AsyncSession) -> LeaveYearConfiguration | None:
        result = await session.execute(
            select(LeaveYearConfiguration).where(
                col(LeaveYearConfiguration.leave_year) == leave_year,
                col(LeaveYearConfiguration.is_active).is_(True),
            )
        )
        return result.scalars().first()

    async def find_by_start_year(self, year: int, session: AsyncSession) -> LeaveYearConfiguration | None:
        """The leave year whose cutoff period begins in calendar year ``year``."""
        result = await session.execute(
            select(LeaveYearConfiguration)
            .where(
                extract("year", col(LeaveYearConfiguration.cutoff_start_date)) == year,
                col(LeaveYearConfiguration.is_active).is_(True),
            )
            .order_by(col(LeaveYearConfiguration.cutoff_start_date))
        )
        return result.scalars().first()

    async def find_previous(
        self,
        config: LeaveYearConfiguration,
        session: AsyncSession,
    ) -> LeaveYearConfiguration | None:
        """The latest leave year that starts before ``config``."""
        result = await session.execute(
            select(LeaveYearConfiguration)
            .where(
                col(LeaveYearConfiguration.cutoff_start_date) < config.cutoff_start_date,
                col(LeaveYearConfiguration.is_active).is_(True),
            )
            .order_by(col(LeaveYearConfiguration.cutoff_start_date).desc())
            .limit(1)
        )
        return result.scalars().first()

    async def find_overlapping(
        self,
        start: date,
        end: date,
        exclude_id: uuid.UUID | None,
        session: AsyncSession,
    ) -> LeaveYearConfiguration | None:
        query = select(LeaveYearConfiguration).where(
            col(LeaveYearConfiguration.cutoff_start_date) <= end,
            col(LeaveYearConfiguration.cutoff_end_date) >= start,
            col(LeaveYearConfiguration.is_active).is_(True),
        )
        if exclude_id is not None:
            query = query.where(col(LeaveYearConfiguration.id) != exclude_id)
        result = await session.execute(query.limit(1))
        return result.scalars().first()

    async def find_all(self, session: AsyncSession) -> list[LeaveYearConfiguration]:
        result = await session.execute(
            select(LeaveYearConfiguration)
            .where(col(LeaveYearConfiguration.is_active).is_(True))
            .order_by(col(LeaveYearConfiguration.cutoff_start_date).desc())
        )
        return list(result.scalars().all())

    async def create(self, config: LeaveYearConfiguration, session: AsyncSession) -> LeaveYearConfiguration:
        session.add(config)
        await session.flush()
        return config

    async def update(
        self,
        config: LeaveYearConfiguration,
        values: dict[str, Any],
        session: AsyncSession,
    ) -> LeaveYearConfiguration:
        for key, value in values.items():
            setattr(config, key, value)
        await session.flush()
        return config
