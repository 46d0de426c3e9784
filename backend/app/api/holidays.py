# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query, status

from app.api.deps import ActorDep, RequestInfoDep, TransactionDep
from app.db import SessionDep
from app.schemas.holiday import CreateHolidayRequest, HolidayListResponse, HolidayResponse
from app.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/holidays", tags=["holidays"])


@holidays_router.post("", response_model=HolidayResponse, status_code=status.HTTP_201_CREATED)
async def create_holiday(
    payload: CreateHolidayRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> HolidayResponse:
    """Create a holiday."""
    return await holiday_service.create_holiday(tx, actor, payload, request_info)


@holidays_router.get("", response_model=HolidayListResponse)
async def list_holidays(
    session: SessionDep,
    year: int | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> HolidayListResponse:
    """List holidays with optional year filter."""
    return await holiday_service.list_holidays(session, year, offset, limit)


@holidays_router.get("/range", response_model=HolidayListResponse)
async def list_holidays_in_range(
    session: SessionDep,
    start: date = Query(),
    end: date = Query(),
) -> HolidayListResponse:
    """Holidays between two dates, inclusive."""
    return await holiday_service.list_holidays_in_range(session, start, end)


@holidays_router.get("/{holiday_id}", response_model=HolidayResponse)
async def get_holiday(holiday_id: uuid.UUID, session: SessionDep) -> HolidayResponse:
    return await holiday_service.get_holiday(session, holiday_id)


@holidays_router.delete("/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holiday(
    holiday_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> None:
    """Soft delete a holiday."""
    await holiday_service.delete_holiday(tx, actor, holiday_id, request_info)
