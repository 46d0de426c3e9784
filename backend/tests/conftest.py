from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.deps import get_today, get_transaction_manager
from app.db import build_engine, get_session, init_models
from app.main import app
from app.models import Employee, LeaveBalance, LeavePolicy, LeaveType, LeaveYearConfiguration
from app.models.enums import LeavePolicyStatus
from app.services.transaction import TransactionManager

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine

# Frozen "today" so the 2024 scenarios stay in the future.
TODAY = date(2024, 6, 1)


@dataclass
class LeaveSetup:
    """Ids of a ready-to-file employee: hired 2023-01-01 with 10 Vacation days in 2024."""

    employee_id: uuid.UUID
    leave_type_id: uuid.UUID
    policy_id: uuid.UUID
    balance_id: uuid.UUID


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """A fresh in-memory database per test."""
    _engine = build_engine("sqlite+aiosqlite:///:memory:")
    await init_models(_engine)
    yield _engine
    await _engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
def tx(session_factory: async_sessionmaker[AsyncSession]) -> TransactionManager:
    return TransactionManager(session_factory)


@pytest.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
    tx: TransactionManager,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client bound to the test database and a frozen clock."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_get_session
    app.dependency_overrides[get_transaction_manager] = lambda: tx
    app.dependency_overrides[get_today] = lambda: TODAY
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def leave_setup(session_factory: async_sessionmaker[AsyncSession]) -> LeaveSetup:
    """Seed an eligible employee, the Vacation leave type, its active policy and a 2024 balance."""
    async with session_factory() as session:
        employee = Employee(
            employee_no="EMP-0001",
            first_name="Maria",
            last_name="Santos",
            hire_date=date(2023, 1, 1),
            employment_status="regular",
        )
        leave_type = LeaveType(name="Vacation", code="VL")
        session.add_all([employee, leave_type])
        await session.flush()

        policy = LeavePolicy(
            leave_type_id=leave_type.id,
            annual_entitlement=10,
            carry_limit=5,
            status=LeavePolicyStatus.ACTIVE.value,
            effective_date=date(2024, 1, 1),
        )
        session.add(policy)
        await session.flush()

        balance = LeaveBalance(
            employee_id=employee.id,
            leave_type_id=leave_type.id,
            policy_id=policy.id,
            year=2024,
            beginning_balance=10,
            earned=10,
            remaining=10,
        )
        session.add(balance)
        await session.commit()

        return LeaveSetup(
            employee_id=employee.id,
            leave_type_id=leave_type.id,
            policy_id=policy.id,
            balance_id=balance.id,
        )


@pytest.fixture
async def calendar_leave_years(session_factory: async_sessionmaker[AsyncSession]) -> None:
    """Calendar-year leave year configurations for 2023 through 2025."""
    async with session_factory() as session:
        session.add_all(
            [
                LeaveYearConfiguration(
                    cutoff_start_date=date(year, 1, 1),
                    cutoff_end_date=date(year, 12, 31),
                    leave_year=f"{year}-{year}",
                )
                for year in (2023, 2024, 2025)
            ]
        )
        await session.commit()
