from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from app.models.enums import LeaveRequestStatus
from app.models.leave_request import LeaveRequest

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

# Statuses that still occupy the calendar.
_BLOCKING_STATUSES = [LeaveRequestStatus.PENDING.value, LeaveRequestStatus.APPROVED.value]


class LeaveRequestRepository:
    """Leave request lookups and writes."""

    async def find_by_id(self, request_id: uuid.UUID, session: AsyncSession) -> LeaveRequest | None:
        return await session.get(LeaveRequest, request_id)

    async def find_by_employee(self, employee_id: uuid.UUID, session: AsyncSession) -> list[LeaveRequest]:
        result = await session.execute(
            select(LeaveRequest)
            .where(col(LeaveRequest.employee_id) == employee_id, col(LeaveRequest.is_active).is_(True))
            .order_by(col(LeaveRequest.start_date).desc())
        )
        return list(result.scalars().all())

    async def find_pending(self, session: AsyncSession) -> list[LeaveRequest]:
        result = await session.execute(
            select(LeaveRequest)
            .where(
                col(LeaveRequest.status) == LeaveRequestStatus.PENDING.value,
                col(LeaveRequest.is_active).is_(True),
            )
            .order_by(col(LeaveRequest.start_date))
        )
        return list(result.scalars().all())

    async def find_paginated(
        self,
        session: AsyncSession,
        status: str | None = None,
        employee_id: uuid.UUID | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> tuple[list[LeaveRequest], int]:
        filters = [col(LeaveRequest.is_active).is_(True)]
        if status is not None:
            filters.append(col(LeaveRequest.status) == status)
        if employee_id is not None:
            filters.append(col(LeaveRequest.employee_id) == employee_id)

        count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(*filters))
        total = count_result.scalar_one()

        result = await session.execute(
            select(LeaveRequest)
            .where(*filters)
            .order_by(col(LeaveRequest.created_at).desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total

    async def find_overlapping_requests(
        self,
        employee_id: uuid.UUID,
        start_date: date,
        end_date: date,
        exclude_id: uuid.UUID | None,
        session: AsyncSession,
    ) -> list[LeaveRequest]:
        """Pending or approved requests whose inclusive range intersects [start, end].

        Two ranges overlap when existing.start <= new.end AND existing.end >= new.start.
        """
        query = select(LeaveRequest).where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.is_active).is_(True),
            col(LeaveRequest.status).in_(_BLOCKING_STATUSES),
            col(LeaveRequest.start_date) <= end_date,
            col(LeaveRequest.end_date) >= start_date,
        )
        if exclude_id is not None:
            query = query.where(col(LeaveRequest.id) != exclude_id)

        result = await session.execute(query.order_by(col(LeaveRequest.start_date)))
        return list(result.scalars().all())

    async def create(self, request: LeaveRequest, session: AsyncSession) -> LeaveRequest:
        session.add(request)
        await session.flush()
        return request

    async def update(self, request: LeaveRequest, values: dict[str, Any], session: AsyncSession) -> LeaveRequest:
        for key, value in values.items():
            setattr(request, key, value)
        await session.flush()
        await session.refresh(request)
        return request
