from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlmodel import col

from app.models.enums import LeavePolicyStatus
from app.models.leave_policy import LeavePolicy

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession


class LeavePolicyRepository:
    """Leave policy lookups and status transitions."""

    async def find_by_id(self, policy_id: uuid.UUID, session: AsyncSession) -> LeavePolicy | None:
        return await session.get(LeavePolicy, policy_id)

    async def get_active_policy(self, leave_type_id: uuid.UUID, session: AsyncSession) -> LeavePolicy | None:
        """Latest-effective ACTIVE policy for a leave type."""
        result = await session.execute(
            select(LeavePolicy)
            .where(
                col(LeavePolicy.leave_type_id) == leave_type_id,
                col(LeavePolicy.status) == LeavePolicyStatus.ACTIVE.value,
                col(LeavePolicy.is_active).is_(True),
            )
            .order_by(col(LeavePolicy.effective_date).desc(), col(LeavePolicy.created_at).desc())
            .limit(1)
        )
        return result.scalars().first()

    async def list_active(self, session: AsyncSession) -> list[LeavePolicy]:
        result = await session.execute(
            select(LeavePolicy).where(
                col(LeavePolicy.status) == LeavePolicyStatus.ACTIVE.value,
                col(LeavePolicy.is_active).is_(True),
            )
        )
        return list(result.scalars().all())

    async def find_all(self, session: AsyncSession, leave_type_id: uuid.UUID | None = None) -> list[LeavePolicy]:
        query = select(LeavePolicy).where(col(LeavePolicy.is_active).is_(True))
        if leave_type_id is not None:
            query = query.where(col(LeavePolicy.leave_type_id) == leave_type_id)
        result = await session.execute(query.order_by(col(LeavePolicy.created_at).desc()))
        return list(result.scalars().all())

    async def create(self, policy: LeavePolicy, session: AsyncSession) -> LeavePolicy:
        session.add(policy)
        await session.flush()
        return policy

    async def set_status(self, policy: LeavePolicy, status: LeavePolicyStatus, session: AsyncSession) -> LeavePolicy:
        policy.status = status.value
        await session.flush()
        return policy

    async def update(self, policy: LeavePolicy, values: dict[str, Any], session: AsyncSession) -> LeavePolicy:
        for key, value in values.items():
            setattr(policy, key, value)
        await session.flush()
        return policy

    async def soft_delete(self, policy: LeavePolicy, is_active: bool, session: AsyncSession) -> LeavePolicy:
        policy.is_active = is_active
        await session.flush()
        return policy
