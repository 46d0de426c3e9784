"""Tests for activity logging and transaction boundaries."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from app.exceptions import ConflictException
from app.models import Holiday
from app.models.enums import ActivityAction, EntityType
from app.repositories import ActivityLogRepository, HolidayRepository
from app.schemas.context import RequestInfo, SystemActor, UserActor
from app.services.activity import ActivityLogger, run_logged, to_audit_details

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from app.services.transaction import TransactionManager


async def _all_logs(session_factory: async_sessionmaker[AsyncSession]) -> list:
    async with session_factory() as session:
        return await ActivityLogRepository().find_all(session)


async def _all_holidays(session_factory: async_sessionmaker[AsyncSession]) -> list[Holiday]:
    async with session_factory() as session:
        holidays, _ = await HolidayRepository().find_all(session)
        return holidays


async def test_success_is_logged_with_request_info(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    activity = ActivityLogger()
    options = activity.create_options(
        ActivityAction.CREATE_HOLIDAY,
        EntityType.HOLIDAY,
        UserActor(user_id="hr-1"),
        request_info=RequestInfo(ip_address="10.0.0.5", user_agent="pytest", session_id="s-1", username="hr"),
        success_description="Created holiday",
    )

    async def _create(session: AsyncSession) -> Holiday:
        return await HolidayRepository().create(Holiday(date=date(2024, 6, 12), name="Independence Day"), session)

    holiday = await run_logged(tx, activity, options, _create)

    (log,) = await _all_logs(session_factory)
    assert log.is_success
    assert log.status_code == 200
    assert log.action == "CREATE_HOLIDAY"
    assert log.entity == "HOLIDAY"
    assert log.user_id == "hr-1"
    assert log.username == "hr"
    assert log.ip_address == "10.0.0.5"
    assert log.session_id == "s-1"
    assert log.description == "Created holiday"
    assert log.details is not None
    assert log.details["id"] == str(holiday.id)
    assert log.duration_ms is not None


async def test_app_error_rolls_back_mutation_and_keeps_failure_log(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    activity = ActivityLogger()
    options = activity.create_options(
        ActivityAction.CREATE_HOLIDAY,
        EntityType.HOLIDAY,
        SystemActor(),
        operation_data={"name": "Doomed"},
        failure_description="Failed to create holiday",
    )

    async def _create_then_fail(session: AsyncSession) -> Holiday:
        await HolidayRepository().create(Holiday(date=date(2024, 6, 12), name="Doomed"), session)
        raise ConflictException("Holiday already exists for this date")

    with pytest.raises(ConflictException, match="Holiday already exists"):
        await run_logged(tx, activity, options, _create_then_fail)

    assert await _all_holidays(session_factory) == []
    (log,) = await _all_logs(session_factory)
    assert not log.is_success
    assert log.status_code == 409
    assert log.error_message == "Holiday already exists for this date"
    assert log.description == "Failed to create holiday"
    assert log.details == {"name": "Doomed"}
    assert log.user_id == "system"


async def test_unexpected_error_is_reraised_unchanged(
    tx: TransactionManager,
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    activity = ActivityLogger()
    options = activity.create_options(ActivityAction.DELETE_HOLIDAY, EntityType.HOLIDAY)
    error = RuntimeError("boom")

    async def _explode(session: AsyncSession) -> None:
        raise error

    with pytest.raises(RuntimeError) as exc_info:
        await run_logged(tx, activity, options, _explode)

    assert exc_info.value is error
    (log,) = await _all_logs(session_factory)
    assert log.status_code == 500
    assert log.error_message == "RuntimeError('boom')"


def test_audit_details_handles_scalars_and_models() -> None:
    assert to_audit_details(None) is None
    assert to_audit_details(True) == {"value": True}
    assert to_audit_details({"day": date(2024, 6, 12)}) == {"day": "2024-06-12"}
    details = to_audit_details(Holiday(date=date(2024, 6, 12), name="Independence Day"))
    assert details is not None
    assert details["date"] == "2024-06-12"


def test_actor_audit_ids() -> None:
    assert UserActor(user_id="u-1").audit_id == "u-1"
    assert SystemActor().audit_id == "system"
