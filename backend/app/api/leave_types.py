# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from app.api.deps import ActorDep, RequestInfoDep, TransactionDep
from app.db import SessionDep
from app.schemas.leave_type import (
    CreateLeaveTypeRequest,
    LeaveTypeListResponse,
    LeaveTypeResponse,
    SetActiveRequest,
    UpdateLeaveTypeRequest,
)
from app.services import leave_type as leave_type_service

leave_types_router = APIRouter(prefix="/leave-types", tags=["leave-types"])


@leave_types_router.post("", response_model=LeaveTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_type(
    payload: CreateLeaveTypeRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveTypeResponse:
    return await leave_type_service.create_leave_type(tx, actor, payload, request_info)


@leave_types_router.get("", response_model=LeaveTypeListResponse)
async def list_leave_types(
    session: SessionDep,
    include_inactive: bool = Query(default=False),
) -> LeaveTypeListResponse:
    """List leave types, active only unless asked otherwise."""
    return await leave_type_service.list_leave_types(session, include_inactive)


@leave_types_router.get("/by-name/{name}", response_model=LeaveTypeResponse)
async def find_leave_type_by_name(name: str, session: SessionDep) -> LeaveTypeResponse:
    return await leave_type_service.find_leave_type_by_name(session, name)


@leave_types_router.get("/{leave_type_id}", response_model=LeaveTypeResponse)
async def get_leave_type(leave_type_id: uuid.UUID, session: SessionDep) -> LeaveTypeResponse:
    return await leave_type_service.get_leave_type(session, leave_type_id)


@leave_types_router.patch("/{leave_type_id}", response_model=LeaveTypeResponse)
async def update_leave_type(
    leave_type_id: uuid.UUID,
    payload: UpdateLeaveTypeRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveTypeResponse:
    return await leave_type_service.update_leave_type(tx, actor, leave_type_id, payload, request_info)


@leave_types_router.put("/{leave_type_id}/active", response_model=LeaveTypeResponse)
async def set_leave_type_active(
    leave_type_id: uuid.UUID,
    payload: SetActiveRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveTypeResponse:
    """Soft delete or restore a leave type."""
    return await leave_type_service.set_leave_type_active(tx, actor, leave_type_id, payload.is_active, request_info)
