# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, status

from app.api.deps import ActorDep, RequestInfoDep, TodayDep, TransactionDep
from app.db import SessionDep
from app.schemas.leave_cycle import (
    CreateLeaveCycleRequest,
    LeaveCycleResponse,
    SetupLeaveCyclesRequest,
    SetupLeaveCyclesResponse,
)
from app.services import leave_cycle as leave_cycle_service

leave_cycles_router = APIRouter(prefix="/leave-cycles", tags=["leave-cycles"])


@leave_cycles_router.post("", response_model=LeaveCycleResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_cycle(
    payload: CreateLeaveCycleRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
    today: TodayDep,
) -> LeaveCycleResponse:
    """Open the cycle containing a year for one employee and leave type."""
    return await leave_cycle_service.create_leave_cycle(tx, actor, payload, request_info, today)


@leave_cycles_router.post("/setup", response_model=SetupLeaveCyclesResponse)
async def setup_leave_cycles(
    payload: SetupLeaveCyclesRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
    today: TodayDep,
) -> SetupLeaveCyclesResponse:
    """Open cycles for all active employees under all active policies."""
    return await leave_cycle_service.setup_leave_cycles(tx, actor, payload.year, request_info, today)


@leave_cycles_router.get("/active", response_model=LeaveCycleResponse)
async def get_active_cycle(
    employee_id: uuid.UUID,
    leave_type_id: uuid.UUID,
    session: SessionDep,
) -> LeaveCycleResponse:
    return await leave_cycle_service.get_active_cycle(session, employee_id, leave_type_id)


@leave_cycles_router.post("/{cycle_id}/close", response_model=LeaveCycleResponse)
async def close_cycle(
    cycle_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveCycleResponse:
    return await leave_cycle_service.close_cycle(tx, actor, cycle_id, request_info)
