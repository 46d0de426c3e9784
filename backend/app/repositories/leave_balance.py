from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import select, update
from sqlmodel import col

from app.models.enums import LeaveBalanceStatus
from app.models.leave_balance import LeaveBalance
from app.models.leave_transaction import LeaveTransaction

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession


class LeaveBalanceRepository:
    """Leave balance lookups and balance movements."""

    async def find_by_id(self, balance_id: uuid.UUID, session: AsyncSession) -> LeaveBalance | None:
        return await session.get(LeaveBalance, balance_id)

    async def find_by_leave_type(
        self,
        employee_id: uuid.UUID,
        leave_type_id: uuid.UUID,
        year: int,
        session: AsyncSession,
    ) -> LeaveBalance | None:
        """The active balance for (employee, leave type, year), if any."""
        result = await session.execute(
            select(LeaveBalance).where(
                col(LeaveBalance.employee_id) == employee_id,
                col(LeaveBalance.leave_type_id) == leave_type_id,
                col(LeaveBalance.year) == year,
                col(LeaveBalance.is_active).is_(True),
            )
        )
        return result.scalars().first()

    async def find_by_employee(
        self,
        employee_id: uuid.UUID,
        session: AsyncSession,
        year: int | None = None,
    ) -> list[LeaveBalance]:
        query = select(LeaveBalance).where(
            col(LeaveBalance.employee_id) == employee_id,
            col(LeaveBalance.is_active).is_(True),
        )
        if year is not None:
            query = query.where(col(LeaveBalance.year) == year)
        result = await session.execute(query.order_by(col(LeaveBalance.year).desc()))
        return list(result.scalars().all())

    async def find_transactions(self, balance_id: uuid.UUID, session: AsyncSession) -> list[LeaveTransaction]:
        result = await session.execute(
            select(LeaveTransaction)
            .where(col(LeaveTransaction.balance_id) == balance_id)
            .order_by(col(LeaveTransaction.created_at))
        )
        return list(result.scalars().all())

    async def create(self, balance: LeaveBalance, session: AsyncSession) -> LeaveBalance:
        session.add(balance)
        await session.flush()
        return balance

    async def close_balance(self, balance: LeaveBalance, session: AsyncSession) -> LeaveBalance:
        balance.status = LeaveBalanceStatus.CLOSED.value
        await session.flush()
        return balance

    async def consume(self, balance_id: uuid.UUID, days: float, session: AsyncSession) -> bool:
        """Conditionally decrement an OPEN balance.

        The row is only updated when it still covers ``days``, so two
        approvals racing for the same balance cannot both succeed.
        Returns False when no row matched.
        """
        result = await session.execute(
            update(LeaveBalance)
            .where(
                col(LeaveBalance.id) == balance_id,
                col(LeaveBalance.status) == LeaveBalanceStatus.OPEN.value,
                col(LeaveBalance.remaining) >= days,
            )
            .values(
                remaining=col(LeaveBalance.remaining) - days,
                used=col(LeaveBalance.used) + days,
                last_transaction_date=datetime.now(UTC),
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    async def restore(self, balance_id: uuid.UUID, days: float, session: AsyncSession) -> bool:
        """Give ``days`` back to an OPEN balance."""
        result = await session.execute(
            update(LeaveBalance)
            .where(
                col(LeaveBalance.id) == balance_id,
                col(LeaveBalance.status) == LeaveBalanceStatus.OPEN.value,
            )
            .values(
                remaining=col(LeaveBalance.remaining) + days,
                used=col(LeaveBalance.used) - days,
                last_transaction_date=datetime.now(UTC),
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    async def add_transaction(self, transaction: LeaveTransaction, session: AsyncSession) -> LeaveTransaction:
        session.add(transaction)
        await session.flush()
        return transaction

    async def soft_delete(self, balance: LeaveBalance, is_active: bool, session: AsyncSession) -> LeaveBalance:
        balance.is_active = is_active
        await session.flush()
        return balance

    async def reset_for_year(self, year: int, session: AsyncSession) -> int:
        """Return every active balance of ``year`` to its opening state.

        Returns the number of balances reset.
        """
        result = await session.execute(
            update(LeaveBalance)
            .where(col(LeaveBalance.year) == year, col(LeaveBalance.is_active).is_(True))
            .values(
                used=0,
                encashed=0,
                remaining=col(LeaveBalance.beginning_balance),
                last_transaction_date=datetime.now(UTC),
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount
