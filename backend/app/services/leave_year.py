# ruff: noqa: TC003
"""Leave year cutoff periods.

A leave year need not follow the calendar (e.g. July to June). Balances for
a leave year are keyed by the calendar year its cutoff period starts in, and
that start date is the reference date for balance eligibility.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from app.exceptions import BadRequestException, ConflictException, NotFoundException
from app.models.enums import ActivityAction, EntityType
from app.models.leave_year import LeaveYearConfiguration
from app.repositories import LeaveYearRepository
from app.schemas.leave_year import LeaveYearListResponse, LeaveYearResponse
from app.services.activity import ActivityLogger, run_logged
from app.services.dates import to_calendar_date

if TYPE_CHECKING:
    from datetime import date

    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.context import Actor, RequestInfo
    from app.schemas.leave_year import CreateLeaveYearRequest, UpdateLeaveYearRequest
    from app.services.transaction import TransactionManager

_leave_years = LeaveYearRepository()
_activity = ActivityLogger()


def leave_year_identifier(cutoff_start: date, cutoff_end: date) -> str:
    """``"<start year>-<end year>"``, e.g. ``"2024-2025"``."""
    return f"{cutoff_start.year}-{cutoff_end.year}"


def _ensure_cutoff_order(cutoff_start: date, cutoff_end: date) -> None:
    if cutoff_end <= cutoff_start:
        raise BadRequestException("Cutoff end date must be after cutoff start date")


def _build_leave_year_response(config: LeaveYearConfiguration) -> LeaveYearResponse:
    return LeaveYearResponse(
        id=config.id,
        cutoff_start_date=config.cutoff_start_date,
        cutoff_end_date=config.cutoff_end_date,
        leave_year=config.leave_year,
        balance_year=config.balance_year,
        remarks=config.remarks,
        is_active=config.is_active,
    )


async def _ensure_available(
    session: AsyncSession,
    cutoff_start: date,
    cutoff_end: date,
    exclude_id: uuid.UUID | None = None,
) -> str:
    """Reject a period whose identifier is taken or that overlaps another leave year."""
    identifier = leave_year_identifier(cutoff_start, cutoff_end)
    existing = await _leave_years.find_by_leave_year(identifier, session)
    if existing is not None and existing.id != exclude_id:
        raise ConflictException(f"Leave year configuration already exists for year {identifier}")

    overlapping = await _leave_years.find_overlapping(cutoff_start, cutoff_end, exclude_id, session)
    if overlapping is not None:
        raise ConflictException(
            f"Cutoff period overlaps leave year {overlapping.leave_year} "
            f"({overlapping.cutoff_start_date.isoformat()} - {overlapping.cutoff_end_date.isoformat()})"
        )
    return identifier


async def _get_leave_year_or_404(session: AsyncSession, config_id: uuid.UUID) -> LeaveYearConfiguration:
    config = await _leave_years.find_by_id(config_id, session)
    if config is None:
        raise NotFoundException(f"Leave year configuration with id {config_id} not found")
    return config


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_leave_year(
    tx: TransactionManager,
    actor: Actor,
    payload: CreateLeaveYearRequest,
    request_info: RequestInfo | None = None,
) -> LeaveYearResponse:
    """Define the cutoff period of a leave year."""
    options = _activity.create_options(
        ActivityAction.CREATE_LEAVE_YEAR,
        EntityType.LEAVE_YEAR,
        actor,
        payload,
        request_info,
        f"Created leave year configuration for period {payload.cutoff_start_date} to {payload.cutoff_end_date}",
        "Failed to create leave year configuration",
    )

    async def _create(session: AsyncSession) -> LeaveYearConfiguration:
        cutoff_start = to_calendar_date(payload.cutoff_start_date, "cutoff start")
        cutoff_end = to_calendar_date(payload.cutoff_end_date, "cutoff end")
        _ensure_cutoff_order(cutoff_start, cutoff_end)
        identifier = await _ensure_available(session, cutoff_start, cutoff_end)

        config = LeaveYearConfiguration(
            cutoff_start_date=cutoff_start,
            cutoff_end_date=cutoff_end,
            leave_year=identifier,
            remarks=payload.remarks,
        )
        return await _leave_years.create(config, session)

    return _build_leave_year_response(await run_logged(tx, _activity, options, _create))


async def update_leave_year(
    tx: TransactionManager,
    actor: Actor,
    config_id: uuid.UUID,
    payload: UpdateLeaveYearRequest,
    request_info: RequestInfo | None = None,
) -> LeaveYearResponse:
    """Move a leave year's cutoff dates, change its remarks, or deactivate it.

    Changed dates regenerate the identifier, which must stay unique.
    """
    options = _activity.create_options(
        ActivityAction.UPDATE_LEAVE_YEAR,
        EntityType.LEAVE_YEAR,
        actor,
        payload,
        request_info,
        f"Updated leave year configuration {config_id}",
        f"Failed to update leave year configuration {config_id}",
    )

    async def _update(session: AsyncSession) -> LeaveYearConfiguration:
        config = await _get_leave_year_or_404(session, config_id)
        fields = payload.model_fields_set
        values: dict[str, Any] = {}

        if "cutoff_start_date" in fields or "cutoff_end_date" in fields:
            cutoff_start = (
                to_calendar_date(payload.cutoff_start_date, "cutoff start")
                if "cutoff_start_date" in fields
                else config.cutoff_start_date
            )
            cutoff_end = (
                to_calendar_date(payload.cutoff_end_date, "cutoff end")
                if "cutoff_end_date" in fields
                else config.cutoff_end_date
            )
            _ensure_cutoff_order(cutoff_start, cutoff_end)
            values.update(cutoff_start_date=cutoff_start, cutoff_end_date=cutoff_end)
            if payload.is_active is not False:
                values["leave_year"] = await _ensure_available(session, cutoff_start, cutoff_end, config.id)
            else:
                values["leave_year"] = leave_year_identifier(cutoff_start, cutoff_end)

        if "remarks" in fields:
            values["remarks"] = payload.remarks
        if payload.is_active is not None:
            values["is_active"] = payload.is_active

        if not values:
            raise BadRequestException("No fields to update")

        return await _leave_years.update(config, values, session)

    return _build_leave_year_response(await run_logged(tx, _activity, options, _update))


async def get_leave_year(session: AsyncSession, config_id: uuid.UUID) -> LeaveYearResponse:
    return _build_leave_year_response(await _get_leave_year_or_404(session, config_id))


async def list_leave_years(session: AsyncSession) -> LeaveYearListResponse:
    configs = await _leave_years.find_all(session)
    return LeaveYearListResponse(items=[_build_leave_year_response(c) for c in configs], total=len(configs))
