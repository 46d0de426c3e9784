# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from app.api.deps import ActorDep, RequestInfoDep, TransactionDep
from app.db import SessionDep
from app.schemas.employee import CreateEmployeeRequest, EmployeeListResponse, EmployeeResponse
from app.services import employee as employee_service

employees_router = APIRouter(prefix="/employees", tags=["employees"])


@employees_router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: CreateEmployeeRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> EmployeeResponse:
    """Register an employee."""
    return await employee_service.create_employee(tx, actor, payload, request_info)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(
    session: SessionDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> EmployeeListResponse:
    return await employee_service.list_employees(session, offset, limit)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: uuid.UUID, session: SessionDep) -> EmployeeResponse:
    return await employee_service.get_employee(session, employee_id)


@employees_router.delete("/{employee_id}", response_model=EmployeeResponse)
async def deactivate_employee(
    employee_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> EmployeeResponse:
    """Soft delete an employee."""
    return await employee_service.set_employee_active(tx, actor, employee_id, False, request_info)
