from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from app.models.employee import Employee

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession


class EmployeeRepository:
    """Employee master data lookups."""

    async def find_by_id(self, employee_id: uuid.UUID, session: AsyncSession) -> Employee | None:
        return await session.get(Employee, employee_id)

    async def find_by_employee_no(self, employee_no: str, session: AsyncSession) -> Employee | None:
        result = await session.execute(select(Employee).where(col(Employee.employee_no) == employee_no))
        return result.scalar_one_or_none()

    async def list_active(self, session: AsyncSession) -> list[Employee]:
        result = await session.execute(
            select(Employee).where(col(Employee.is_active).is_(True)).order_by(col(Employee.last_name))
        )
        return list(result.scalars().all())

    async def find_all(self, session: AsyncSession, offset: int = 0, limit: int = 50) -> tuple[list[Employee], int]:
        count_result = await session.execute(select(func.count()).select_from(Employee))
        total = count_result.scalar_one()
        result = await session.execute(
            select(Employee).order_by(col(Employee.last_name), col(Employee.first_name)).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def create(self, employee: Employee, session: AsyncSession) -> Employee:
        session.add(employee)
        await session.flush()
        return employee

    async def soft_delete(self, employee: Employee, is_active: bool, session: AsyncSession) -> Employee:
        employee.is_active = is_active
        await session.flush()
        return employee
