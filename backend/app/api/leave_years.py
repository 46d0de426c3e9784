# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, status

from app.api.deps import ActorDep, RequestInfoDep, TransactionDep
from app.db import SessionDep
from app.schemas.leave_year import (
    CreateLeaveYearRequest,
    LeaveYearListResponse,
    LeaveYearResponse,
    UpdateLeaveYearRequest,
)
from app.services import leave_year as leave_year_service

leave_years_router = APIRouter(prefix="/leave-years", tags=["leave-years"])


@leave_years_router.post("", response_model=LeaveYearResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_year(
    payload: CreateLeaveYearRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveYearResponse:
    """Define a leave year cutoff period."""
    return await leave_year_service.create_leave_year(tx, actor, payload, request_info)


@leave_years_router.get("", response_model=LeaveYearListResponse)
async def list_leave_years(session: SessionDep) -> LeaveYearListResponse:
    return await leave_year_service.list_leave_years(session)


@leave_years_router.get("/{config_id}", response_model=LeaveYearResponse)
async def get_leave_year(config_id: uuid.UUID, session: SessionDep) -> LeaveYearResponse:
    return await leave_year_service.get_leave_year(session, config_id)


@leave_years_router.patch("/{config_id}", response_model=LeaveYearResponse)
async def update_leave_year(
    config_id: uuid.UUID,
    payload: UpdateLeaveYearRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveYearResponse:
    return await leave_year_service.update_leave_year(tx, actor, config_id, payload, request_info)
