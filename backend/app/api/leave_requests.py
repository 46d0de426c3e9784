# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from app.api.deps import ActorDep, RequestInfoDep, TodayDep, TransactionDep
from app.db import SessionDep
from app.models.enums import LeaveRequestStatus
from app.schemas.leave_request import (
    CancelPayload,
    CreateLeaveRequestPayload,
    DecisionPayload,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    UpdateLeaveRequestPayload,
)
from app.services import leave_request as leave_request_service

leave_requests_router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


@leave_requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_request(
    payload: CreateLeaveRequestPayload,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
    today: TodayDep,
) -> LeaveRequestResponse:
    """File a new leave request."""
    return await leave_request_service.create_leave_request(tx, actor, payload, request_info, today=today)


@leave_requests_router.get("", response_model=LeaveRequestListResponse)
async def list_leave_requests(
    session: SessionDep,
    status_filter: LeaveRequestStatus | None = Query(default=None, alias="status"),
    employee_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List leave requests with optional filters."""
    return await leave_request_service.list_leave_requests(session, status_filter, employee_id, offset, limit)


@leave_requests_router.get("/pending", response_model=LeaveRequestListResponse)
async def list_pending_requests(session: SessionDep) -> LeaveRequestListResponse:
    """Requests awaiting a decision, earliest start first."""
    return await leave_request_service.list_pending_requests(session)


@leave_requests_router.get("/employee/{employee_id}", response_model=LeaveRequestListResponse)
async def list_employee_requests(employee_id: uuid.UUID, session: SessionDep) -> LeaveRequestListResponse:
    return await leave_request_service.list_employee_requests(session, employee_id)


@leave_requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_leave_request(request_id: uuid.UUID, session: SessionDep) -> LeaveRequestResponse:
    return await leave_request_service.get_leave_request(session, request_id)


@leave_requests_router.patch("/{request_id}", response_model=LeaveRequestResponse)
async def update_leave_request(
    request_id: uuid.UUID,
    payload: UpdateLeaveRequestPayload,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
    today: TodayDep,
) -> LeaveRequestResponse:
    """Edit a PENDING leave request."""
    return await leave_request_service.update_leave_request(tx, actor, request_id, payload, request_info, today=today)


@leave_requests_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_leave_request(
    request_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
    payload: DecisionPayload | None = None,
) -> LeaveRequestResponse:
    """Approve a PENDING request and consume the balance."""
    remarks = payload.remarks if payload else None
    return await leave_request_service.approve_leave_request(tx, actor, request_id, remarks, request_info)


@leave_requests_router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_leave_request(
    request_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
    payload: DecisionPayload | None = None,
) -> LeaveRequestResponse:
    """Reject a PENDING request. Remarks are required."""
    remarks = payload.remarks if payload else None
    return await leave_request_service.reject_leave_request(tx, actor, request_id, remarks, request_info)


@leave_requests_router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_leave_request(
    request_id: uuid.UUID,
    payload: CancelPayload,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveRequestResponse:
    """Cancel an employee's own PENDING or APPROVED request."""
    return await leave_request_service.cancel_leave_request(tx, actor, request_id, payload.employee_id, request_info)
