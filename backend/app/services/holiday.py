from __future__ import annotations

from typing import TYPE_CHECKING

from app.exceptions import BadRequestException, ConflictException, NotFoundException
from app.models.enums import ActivityAction, EntityType
from app.models.holiday import Holiday
from app.repositories import HolidayRepository
from app.schemas.holiday import HolidayListResponse, HolidayResponse
from app.services.activity import ActivityLogger, run_logged

if TYPE_CHECKING:
    import uuid
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.context import Actor, RequestInfo
    from app.schemas.holiday import CreateHolidayRequest
    from app.services.transaction import TransactionManager

_holidays = HolidayRepository()
_activity = ActivityLogger()


def _build_holiday_response(holiday: Holiday) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        date=holiday.date,
        name=holiday.name,
        description=holiday.description,
        is_active=holiday.is_active,
    )


async def _get_holiday_or_404(session: AsyncSession, holiday_id: uuid.UUID) -> Holiday:
    holiday = await _holidays.find_by_id(holiday_id, session)
    if holiday is None or not holiday.is_active:
        raise NotFoundException("Holiday not found")
    return holiday


async def create_holiday(
    tx: TransactionManager,
    actor: Actor,
    payload: CreateHolidayRequest,
    request_info: RequestInfo | None = None,
) -> HolidayResponse:
    """Create a holiday. Only one active holiday may exist per date."""
    options = _activity.create_options(
        ActivityAction.CREATE_HOLIDAY,
        EntityType.HOLIDAY,
        actor,
        payload,
        request_info,
        f"Created holiday {payload.name} on {payload.date.isoformat()}",
        f"Failed to create holiday {payload.name} on {payload.date.isoformat()}",
    )

    async def _create(session: AsyncSession) -> Holiday:
        if await _holidays.find_by_date(payload.date, session) is not None:
            raise ConflictException("Holiday already exists for this date")
        holiday = Holiday(date=payload.date, name=payload.name, description=payload.description)
        return await _holidays.create(holiday, session)

    return _build_holiday_response(await run_logged(tx, _activity, options, _create))


async def list_holidays(
    session: AsyncSession,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> HolidayListResponse:
    """List active holidays with optional year filter."""
    holidays, total = await _holidays.find_all(session, year=year, offset=offset, limit=limit)
    return HolidayListResponse(items=[_build_holiday_response(h) for h in holidays], total=total)


async def list_holidays_in_range(session: AsyncSession, start: date, end: date) -> HolidayListResponse:
    """Active holidays between start and end, inclusive."""
    if start > end:
        raise BadRequestException("Start date must be before or equal to end date")
    holidays = await _holidays.find_by_date_range(start, end, session)
    return HolidayListResponse(items=[_build_holiday_response(h) for h in holidays], total=len(holidays))


async def get_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> HolidayResponse:
    return _build_holiday_response(await _get_holiday_or_404(session, holiday_id))


async def delete_holiday(
    tx: TransactionManager,
    actor: Actor,
    holiday_id: uuid.UUID,
    request_info: RequestInfo | None = None,
) -> None:
    """Soft delete a holiday so it no longer reduces leave day counts."""
    options = _activity.create_options(
        ActivityAction.DELETE_HOLIDAY,
        EntityType.HOLIDAY,
        actor,
        {"holiday_id": str(holiday_id)},
        request_info,
        f"Deleted holiday with ID: {holiday_id}",
        f"Failed to delete holiday with ID: {holiday_id}",
    )

    async def _delete(session: AsyncSession) -> Holiday:
        holiday = await _get_holiday_or_404(session, holiday_id)
        return await _holidays.soft_delete(holiday, False, session)

    await run_logged(tx, _activity, options, _delete)
