"""Service-level tests for filing, editing and deciding leave requests."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

import pytest

from app.exceptions import BadRequestException, NotFoundException
from app.models import (
    ActivityLog,
    Employee,
    Holiday,
    LeaveBalance,
    LeavePolicy,
    LeaveRequest,
    LeaveTransaction,
    LeaveType,
)
from app.models.enums import (
    ActivityAction,
    LeaveBalanceStatus,
    LeavePolicyStatus,
    LeaveRequestStatus,
    LeaveTransactionType,
)
from app.repositories import ActivityLogRepository, LeaveBalanceRepository
from app.schemas.context import SystemActor, UserActor
from app.schemas.leave_request import CreateLeaveRequestPayload, UpdateLeaveRequestPayload
from app.services import leave_request as service

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from app.services.transaction import TransactionManager
    from conftest import LeaveSetup

TODAY = date(2024, 6, 1)
EMPLOYEE_ACTOR = UserActor(user_id="employee-1")
APPROVER = UserActor(user_id="approver-1")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _payload(setup: LeaveSetup, start: str, end: str, **overrides: object) -> CreateLeaveRequestPayload:
    data: dict[str, object] = {
        "employee_id": setup.employee_id,
        "leave_type": "Vacation",
        "start_date": start,
        "end_date": end,
    }
    data.update(overrides)
    return CreateLeaveRequestPayload(**data)


async def _file(tx: TransactionManager, setup: LeaveSetup, start: str, end: str, **overrides: object):
    return await service.create_leave_request(
        tx, EMPLOYEE_ACTOR, _payload(setup, start, end, **overrides), today=TODAY
    )


async def _add(session_factory: async_sessionmaker[AsyncSession], *rows: object) -> None:
    async with session_factory() as session:
        session.add_all(rows)
        await session.commit()


async def _balance(session_factory: async_sessionmaker[AsyncSession], balance_id: uuid.UUID) -> LeaveBalance:
    async with session_factory() as session:
        balance = await session.get(LeaveBalance, balance_id)
        assert balance is not None
        return balance


async def _logs(session_factory: async_sessionmaker[AsyncSession], action: ActivityAction) -> list[ActivityLog]:
    async with session_factory() as session:
        return await ActivityLogRepository().find_all(session, action=action.value)


async def _add_sick_leave(
    session_factory: async_sessionmaker[AsyncSession],
    setup: LeaveSetup,
    remaining: float = 5,
    status: LeaveBalanceStatus = LeaveBalanceStatus.OPEN,
) -> LeaveBalance:
    sick = LeaveType(name="Sick", code="SL")
    await _add(session_factory, sick)
    policy = LeavePolicy(leave_type_id=sick.id, annual_entitlement=5, status=LeavePolicyStatus.ACTIVE.value)
    await _add(session_factory, policy)
    balance = LeaveBalance(
        employee_id=setup.employee_id,
        leave_type_id=sick.id,
        policy_id=policy.id,
        year=2024,
        earned=remaining,
        remaining=remaining,
        status=status.value,
    )
    await _add(session_factory, balance)
    return balance


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


async def test_create_full_week(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    request = await _file(tx, leave_setup, "2024-06-03", "2024-06-07", reason="Family trip")

    assert request.total_days == 5
    assert request.status == LeaveRequestStatus.PENDING
    assert request.leave_type == "Vacation"
    assert request.start_date == date(2024, 6, 3)
    assert request.end_date == date(2024, 6, 7)
    assert request.balance_id == leave_setup.balance_id
    assert request.reason == "Family trip"

    balance = await _balance(session_factory, leave_setup.balance_id)
    assert balance.remaining == 10
    assert balance.used == 0


async def test_create_excludes_holidays(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    await _add(session_factory, Holiday(date=date(2024, 6, 5), name="Company Day"))

    request = await _file(tx, leave_setup, "2024-06-03", "2024-06-07")

    assert request.total_days == 4


async def test_create_half_day(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    request = await _file(tx, leave_setup, "2024-06-10", "2024-06-10", is_half_day=True)
    assert request.total_days == 0.5


async def test_create_with_explicit_total(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    request = await _file(tx, leave_setup, "2024-06-10", "2024-06-11", total_days=1.5)
    assert request.total_days == 1.5


async def test_create_accepts_instants(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    # 16:00 UTC is midnight of the next day in Manila.
    request = await _file(tx, leave_setup, "2024-06-02T16:00:00+00:00", "2024-06-03T15:59:00+00:00")
    assert request.start_date == date(2024, 6, 3)
    assert request.end_date == date(2024, 6, 3)


async def test_start_before_today_fails_regardless_of_other_fields(tx: TransactionManager) -> None:
    payload = CreateLeaveRequestPayload(
        employee_id=uuid.uuid4(),
        leave_type="Unknown",
        start_date="2024-05-31",
        end_date="2024-06-03",
    )
    with pytest.raises(BadRequestException, match="Start date cannot be before today"):
        await service.create_leave_request(tx, EMPLOYEE_ACTOR, payload, today=TODAY)


async def test_half_day_over_range_fails_regardless_of_other_fields(tx: TransactionManager) -> None:
    payload = CreateLeaveRequestPayload(
        employee_id=uuid.uuid4(),
        leave_type="Unknown",
        start_date="2024-06-10",
        end_date="2024-06-11",
        is_half_day=True,
    )
    with pytest.raises(BadRequestException, match="Half-day leave requires start date and end date to be the same"):
        await service.create_leave_request(tx, EMPLOYEE_ACTOR, payload, today=TODAY)


async def test_create_requires_dates(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    payload = CreateLeaveRequestPayload(employee_id=leave_setup.employee_id, leave_type="Vacation")
    with pytest.raises(BadRequestException, match="Start date is required"):
        await service.create_leave_request(tx, EMPLOYEE_ACTOR, payload, today=TODAY)


async def test_create_rejects_inverted_range(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    with pytest.raises(BadRequestException, match="Start date must be before or equal to end date"):
        await _file(tx, leave_setup, "2024-06-07", "2024-06-03")


async def test_create_rejects_holiday_only_period(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    await _add(session_factory, Holiday(date=date(2024, 6, 12), name="Independence Day"))
    with pytest.raises(BadRequestException, match="All dates in the leave request period are holidays"):
        await _file(tx, leave_setup, "2024-06-12", "2024-06-12")


async def test_create_unknown_employee(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    payload = CreateLeaveRequestPayload(
        employee_id=uuid.uuid4(), leave_type="Vacation", start_date="2024-06-03", end_date="2024-06-03"
    )
    with pytest.raises(NotFoundException, match="Employee not found"):
        await service.create_leave_request(tx, EMPLOYEE_ACTOR, payload, today=TODAY)


async def test_create_unknown_leave_type(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    with pytest.raises(NotFoundException, match='Leave type "Maternity" not found or inactive'):
        await _file(tx, leave_setup, "2024-06-03", "2024-06-03", leave_type="Maternity")


async def test_create_leave_type_lookup_ignores_case(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    request = await _file(tx, leave_setup, "2024-06-03", "2024-06-03", leave_type="vacation")
    assert request.leave_type == "Vacation"


async def test_create_inactive_leave_type(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    async with session_factory() as session:
        leave_type = await session.get(LeaveType, leave_setup.leave_type_id)
        assert leave_type is not None
        leave_type.is_active = False
        await session.commit()

    with pytest.raises(NotFoundException, match="not found or inactive"):
        await _file(tx, leave_setup, "2024-06-03", "2024-06-03")


async def test_create_without_active_policy(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    async with session_factory() as session:
        policy = await session.get(LeavePolicy, leave_setup.policy_id)
        assert policy is not None
        policy.status = LeavePolicyStatus.RETIRED.value
        await session.commit()

    with pytest.raises(NotFoundException, match='Active leave policy not found for leave type "Vacation"'):
        await _file(tx, leave_setup, "2024-06-03", "2024-06-03")


async def test_create_ineligible_employee(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    async with session_factory() as session:
        policy = await session.get(LeavePolicy, leave_setup.policy_id)
        assert policy is not None
        policy.minimum_service_months = 24
        await session.commit()

    with pytest.raises(BadRequestException, match="Employee is not eligible for Vacation. Requires 24 month"):
        await _file(tx, leave_setup, "2024-06-03", "2024-06-03")


async def test_create_exact_balance_passes(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    request = await _file(tx, leave_setup, "2024-06-03", "2024-06-12")
    assert request.total_days == 10


async def test_create_insufficient_balance(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    with pytest.raises(BadRequestException) as exc_info:
        await _file(tx, leave_setup, "2024-06-03", "2024-06-13")
    assert exc_info.value.message == "Insufficient leave balance. Available: 10 days, Requested: 11 days"


async def test_create_closed_balance(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    async with session_factory() as session:
        balance = await session.get(LeaveBalance, leave_setup.balance_id)
        assert balance is not None
        await LeaveBalanceRepository().close_balance(balance, session)
        await session.commit()

    with pytest.raises(BadRequestException, match="Leave balance is closed"):
        await _file(tx, leave_setup, "2024-06-03", "2024-06-03")


async def test_create_without_balance_for_year(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    with pytest.raises(NotFoundException, match=r'leave type "Vacation", year 2025'):
        await _file(tx, leave_setup, "2025-01-06", "2025-01-06")


async def test_create_overlapping_request(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    await _file(tx, leave_setup, "2024-06-03", "2024-06-07")

    with pytest.raises(BadRequestException) as exc_info:
        await _file(tx, leave_setup, "2024-06-07", "2024-06-08")
    assert exc_info.value.message == (
        "Leave request overlaps with existing request(s): Vacation (2024-06-03 - 2024-06-07)"
    )


async def test_adjacent_request_does_not_overlap(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    await _file(tx, leave_setup, "2024-06-03", "2024-06-05")
    request = await _file(tx, leave_setup, "2024-06-06", "2024-06-07")
    assert request.status == LeaveRequestStatus.PENDING


async def test_rejected_request_does_not_block(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    first = await _file(tx, leave_setup, "2024-06-03", "2024-06-05")
    await service.reject_leave_request(tx, APPROVER, first.id, "Peak season")

    second = await _file(tx, leave_setup, "2024-06-03", "2024-06-05")
    assert second.id != first.id


# ---------------------------------------------------------------------------
# Activity log
# ---------------------------------------------------------------------------


async def test_each_create_writes_one_activity_log(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    with pytest.raises(BadRequestException):
        await _file(tx, leave_setup, "2024-06-03", "2024-06-30")

    logs = await _logs(session_factory, ActivityAction.CREATE_LEAVE)
    assert len(logs) == 2
    success, failure = logs
    assert success.is_success
    assert success.user_id == "employee-1"
    assert success.details is not None
    assert success.details["total_days"] == 2
    assert not failure.is_success
    assert failure.status_code == 400
    assert failure.error_message is not None
    assert failure.error_message.startswith("Insufficient leave balance")
    assert failure.details is not None
    assert failure.details["start_date"] == "2024-06-03"


async def test_failed_create_persists_nothing_but_the_log(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    with pytest.raises(BadRequestException):
        await _file(tx, leave_setup, "2024-06-03", "2024-06-30")

    async with session_factory() as session:
        requests = await service.list_employee_requests(session, leave_setup.employee_id)
    assert requests.total == 0
    assert len(await _logs(session_factory, ActivityAction.CREATE_LEAVE)) == 1


async def test_system_actor_is_logged_as_system(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    await service.create_leave_request(
        tx, SystemActor(), _payload(leave_setup, "2024-06-03", "2024-06-03"), today=TODAY
    )
    (log,) = await _logs(session_factory, ActivityAction.CREATE_LEAVE)
    assert log.user_id == "system"
    assert log.created_by == "system"


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


async def test_update_reason_only(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-07")

    updated = await service.update_leave_request(
        tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(reason="Changed plans"), today=TODAY
    )

    assert updated.reason == "Changed plans"
    assert updated.total_days == 5


async def test_update_same_dates_does_not_conflict_with_itself(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-07")

    updated = await service.update_leave_request(
        tx,
        EMPLOYEE_ACTOR,
        created.id,
        UpdateLeaveRequestPayload(start_date="2024-06-03", end_date="2024-06-07"),
        today=TODAY,
    )

    assert updated.start_date == date(2024, 6, 3)
    assert updated.total_days == 5


async def test_update_dates_recounts_holidays(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    await _add(session_factory, Holiday(date=date(2024, 6, 12), name="Independence Day"))

    updated = await service.update_leave_request(
        tx,
        EMPLOYEE_ACTOR,
        created.id,
        UpdateLeaveRequestPayload(start_date="2024-06-10", end_date="2024-06-14"),
        today=TODAY,
    )

    assert updated.start_date == date(2024, 6, 10)
    assert updated.total_days == 4


async def test_update_end_date_only(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")

    updated = await service.update_leave_request(
        tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(end_date="2024-06-05"), today=TODAY
    )

    assert updated.end_date == date(2024, 6, 5)
    assert updated.total_days == 3


async def test_update_dates_overlapping_another_request(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    other = await _file(tx, leave_setup, "2024-06-10", "2024-06-11")

    with pytest.raises(BadRequestException, match=r"Vacation \(2024-06-03 - 2024-06-04\)"):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, other.id, UpdateLeaveRequestPayload(start_date="2024-06-04"), today=TODAY
        )


async def test_update_dates_in_the_past(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    with pytest.raises(BadRequestException, match="Start date cannot be before today"):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(start_date="2024-05-30"), today=TODAY
        )


async def test_update_half_day(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")

    updated = await service.update_leave_request(
        tx,
        EMPLOYEE_ACTOR,
        created.id,
        UpdateLeaveRequestPayload(start_date="2024-06-04", is_half_day=True),
        today=TODAY,
    )

    assert updated.total_days == 0.5


async def test_update_total_beyond_balance(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    with pytest.raises(BadRequestException) as exc_info:
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(total_days=12), today=TODAY
        )
    assert exc_info.value.message == "Insufficient leave balance. Available: 10 days, Requested: 12 days"


async def test_update_total_must_be_positive(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    with pytest.raises(BadRequestException, match="Total days must be greater than 0"):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(total_days=0), today=TODAY
        )


async def test_update_total_only(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    updated = await service.update_leave_request(
        tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(total_days=1.5), today=TODAY
    )
    assert updated.total_days == 1.5


async def test_update_total_against_closed_balance(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    async with session_factory() as session:
        balance = await session.get(LeaveBalance, leave_setup.balance_id)
        assert balance is not None
        await LeaveBalanceRepository().close_balance(balance, session)
        await session.commit()

    with pytest.raises(BadRequestException, match="Cannot update request. Balance is closed."):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(total_days=1), today=TODAY
        )


async def test_update_change_leave_type_moves_balance(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    sick_balance = await _add_sick_leave(session_factory, leave_setup, remaining=5)
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")

    updated = await service.update_leave_request(
        tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(leave_type="Sick"), today=TODAY
    )

    assert updated.leave_type == "Sick"
    assert updated.leave_type_id == sick_balance.leave_type_id
    assert updated.balance_id == sick_balance.id


async def test_update_change_leave_type_insufficient(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    await _add_sick_leave(session_factory, leave_setup, remaining=1)
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")

    with pytest.raises(BadRequestException) as exc_info:
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(leave_type="Sick"), today=TODAY
        )
    assert exc_info.value.message == (
        "Insufficient leave balance for new leave type. Available: 1 days, Requested: 2 days"
    )


async def test_update_change_leave_type_closed(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    await _add_sick_leave(session_factory, leave_setup, status=LeaveBalanceStatus.CLOSED)
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")

    with pytest.raises(BadRequestException, match='Cannot change leave type. Balance for "Sick" is closed.'):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(leave_type="Sick"), today=TODAY
        )


async def test_update_change_leave_type_without_balance(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    await _add(session_factory, LeaveType(name="Emergency"))
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")

    with pytest.raises(NotFoundException, match='leave type "Emergency", year 2024'):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(leave_type="Emergency"), today=TODAY
        )


async def test_update_nothing(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    with pytest.raises(BadRequestException, match="No fields to update"):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(), today=TODAY
        )


async def test_update_missing_request(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    with pytest.raises(NotFoundException, match="Leave request not found"):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, uuid.uuid4(), UpdateLeaveRequestPayload(reason="x"), today=TODAY
        )


async def test_update_only_pending(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    await service.approve_leave_request(tx, APPROVER, created.id)

    with pytest.raises(BadRequestException, match="Current status: APPROVED. Only PENDING requests can be updated."):
        await service.update_leave_request(
            tx, EMPLOYEE_ACTOR, created.id, UpdateLeaveRequestPayload(reason="x"), today=TODAY
        )


# ---------------------------------------------------------------------------
# Approve / reject / cancel
# ---------------------------------------------------------------------------


async def test_approve_consumes_balance(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-07")

    approved = await service.approve_leave_request(tx, APPROVER, created.id, "Enjoy")

    assert approved.status == LeaveRequestStatus.APPROVED
    assert approved.approval_by == "approver-1"
    assert approved.approval_date is not None
    assert approved.remarks == "Enjoy"

    balance = await _balance(session_factory, leave_setup.balance_id)
    assert balance.remaining == 5
    assert balance.used == 5

    async with session_factory() as session:
        (entry,) = await LeaveBalanceRepository().find_transactions(leave_setup.balance_id, session)
    assert isinstance(entry, LeaveTransaction)
    assert entry.transaction_type == LeaveTransactionType.REQUEST
    assert entry.days == -5
    assert entry.request_id == created.id


async def test_second_approval_cannot_overdraw(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    first = await _file(tx, leave_setup, "2024-06-03", "2024-06-08")
    second = await _file(tx, leave_setup, "2024-06-10", "2024-06-15")
    await service.approve_leave_request(tx, APPROVER, first.id)

    with pytest.raises(BadRequestException) as exc_info:
        await service.approve_leave_request(tx, APPROVER, second.id)
    assert exc_info.value.message == "Insufficient leave balance. Available: 4 days, Requested: 6 days"

    balance = await _balance(session_factory, leave_setup.balance_id)
    assert balance.remaining == 4
    async with session_factory() as session:
        still_pending = await service.get_leave_request(session, second.id)
    assert still_pending.status == LeaveRequestStatus.PENDING


async def test_approve_closed_balance(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    async with session_factory() as session:
        balance = await session.get(LeaveBalance, leave_setup.balance_id)
        assert balance is not None
        await LeaveBalanceRepository().close_balance(balance, session)
        await session.commit()

    with pytest.raises(BadRequestException, match="Cannot approve request. Balance is closed."):
        await service.approve_leave_request(tx, APPROVER, created.id)


async def test_approve_twice(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    await service.approve_leave_request(tx, APPROVER, created.id)
    with pytest.raises(BadRequestException, match="Only PENDING requests can be approved"):
        await service.approve_leave_request(tx, APPROVER, created.id)


async def test_reject_requires_remarks(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    with pytest.raises(BadRequestException, match="Rejection remarks are required"):
        await service.reject_leave_request(tx, APPROVER, created.id, "   ")


async def test_reject_leaves_balance_untouched(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")

    rejected = await service.reject_leave_request(tx, APPROVER, created.id, "Short staffed")

    assert rejected.status == LeaveRequestStatus.REJECTED
    assert rejected.remarks == "Short staffed"
    balance = await _balance(session_factory, leave_setup.balance_id)
    assert balance.remaining == 10


async def test_cancel_pending(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")

    cancelled = await service.cancel_leave_request(tx, EMPLOYEE_ACTOR, created.id, leave_setup.employee_id)

    assert cancelled.status == LeaveRequestStatus.CANCELLED
    balance = await _balance(session_factory, leave_setup.balance_id)
    assert balance.remaining == 10
    async with session_factory() as session:
        assert await LeaveBalanceRepository().find_transactions(leave_setup.balance_id, session) == []


async def test_cancel_approved_restores_balance(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-05")
    await service.approve_leave_request(tx, APPROVER, created.id)

    await service.cancel_leave_request(tx, EMPLOYEE_ACTOR, created.id, leave_setup.employee_id)

    balance = await _balance(session_factory, leave_setup.balance_id)
    assert balance.remaining == 10
    assert balance.used == 0
    async with session_factory() as session:
        entries = await LeaveBalanceRepository().find_transactions(leave_setup.balance_id, session)
    assert [(e.transaction_type, e.days) for e in entries] == [
        (LeaveTransactionType.REQUEST, -3),
        (LeaveTransactionType.CANCELLATION, 3),
    ]


async def test_cancel_by_other_employee(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    other = Employee(employee_no="EMP-0002", first_name="Jose", last_name="Rizal")
    await _add(session_factory, other)

    with pytest.raises(BadRequestException, match="Employee does not own this request"):
        await service.cancel_leave_request(tx, EMPLOYEE_ACTOR, created.id, other.id)


async def test_cancel_rejected_request(tx: TransactionManager, leave_setup: LeaveSetup) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    await service.reject_leave_request(tx, APPROVER, created.id, "No")

    with pytest.raises(BadRequestException, match="Only PENDING or APPROVED requests can be cancelled"):
        await service.cancel_leave_request(tx, EMPLOYEE_ACTOR, created.id, leave_setup.employee_id)


async def test_status_transitions_are_logged(
    tx: TransactionManager,
    leave_setup: LeaveSetup,
    caplog: pytest.LogCaptureFixture,
) -> None:
    approved = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    rejected = await _file(tx, leave_setup, "2024-06-10", "2024-06-10")
    cancelled = await _file(tx, leave_setup, "2024-06-17", "2024-06-17")

    with caplog.at_level(logging.INFO, logger="app.services.leave_request"):
        await service.approve_leave_request(tx, APPROVER, approved.id)
        await service.reject_leave_request(tx, APPROVER, rejected.id, "Peak season")
        await service.cancel_leave_request(tx, EMPLOYEE_ACTOR, cancelled.id, leave_setup.employee_id)

    messages = [record.getMessage() for record in caplog.records if record.name == "app.services.leave_request"]
    assert messages == [
        f"Approving leave request {approved.id} (2 days)",
        f"Rejecting leave request {rejected.id}",
        f"Cancelling leave request {cancelled.id} (was PENDING)",
    ]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def test_queries(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    first = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    second = await _file(tx, leave_setup, "2024-06-10", "2024-06-10")
    await service.approve_leave_request(tx, APPROVER, first.id)

    async with session_factory() as session:
        by_employee = await service.list_employee_requests(session, leave_setup.employee_id)
        pending = await service.list_pending_requests(session)
        approved = await service.list_leave_requests(session, status_filter=LeaveRequestStatus.APPROVED)
        page = await service.list_leave_requests(session, employee_id=leave_setup.employee_id, limit=1)
        fetched = await service.get_leave_request(session, second.id)

    assert by_employee.total == 2
    assert [r.id for r in pending.items] == [second.id]
    assert [r.id for r in approved.items] == [first.id]
    assert page.total == 2
    assert len(page.items) == 1
    assert fetched.id == second.id


async def test_get_missing_request(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        with pytest.raises(NotFoundException, match="Leave request not found"):
            await service.get_leave_request(session, uuid.uuid4())


async def test_soft_deleted_request_is_hidden(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
    leave_setup: LeaveSetup,
) -> None:
    created = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    async with session_factory() as session:
        row = await session.get(LeaveRequest, created.id)
        assert row is not None
        row.is_active = False
        await session.commit()

    # A hidden request no longer blocks its dates.
    again = await _file(tx, leave_setup, "2024-06-03", "2024-06-04")
    assert again.id != created.id
