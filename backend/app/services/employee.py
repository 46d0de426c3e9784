# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from app.exceptions import ConflictException, NotFoundException
from app.models.employee import Employee
from app.models.enums import ActivityAction, EntityType
from app.repositories import EmployeeRepository
from app.schemas.employee import EmployeeListResponse, EmployeeResponse
from app.services.activity import ActivityLogger, run_logged

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.context import Actor, RequestInfo
    from app.schemas.employee import CreateEmployeeRequest
    from app.services.transaction import TransactionManager

_employees = EmployeeRepository()
_activity = ActivityLogger()


def _build_employee_response(employee: Employee) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        employee_no=employee.employee_no,
        first_name=employee.first_name,
        middle_name=employee.middle_name,
        last_name=employee.last_name,
        email=employee.email,
        hire_date=employee.hire_date,
        regularization_date=employee.regularization_date,
        employment_status=employee.employment_status,
        is_active=employee.is_active,
    )


async def _get_employee_or_404(session: AsyncSession, employee_id: uuid.UUID) -> Employee:
    employee = await _employees.find_by_id(employee_id, session)
    if employee is None:
        raise NotFoundException("Employee not found")
    return employee


async def create_employee(
    tx: TransactionManager,
    actor: Actor,
    payload: CreateEmployeeRequest,
    request_info: RequestInfo | None = None,
) -> EmployeeResponse:
    """Register an employee. Employee numbers are unique."""
    options = _activity.create_options(
        ActivityAction.CREATE_EMPLOYEE,
        EntityType.EMPLOYEE,
        actor,
        payload,
        request_info,
        f"Created employee {payload.employee_no}",
        f"Failed to create employee {payload.employee_no}",
    )

    async def _create(session: AsyncSession) -> Employee:
        if await _employees.find_by_employee_no(payload.employee_no, session) is not None:
            raise ConflictException(f"Employee number {payload.employee_no} already exists")
        employee = Employee(**payload.model_dump())
        return await _employees.create(employee, session)

    return _build_employee_response(await run_logged(tx, _activity, options, _create))


async def get_employee(session: AsyncSession, employee_id: uuid.UUID) -> EmployeeResponse:
    return _build_employee_response(await _get_employee_or_404(session, employee_id))


async def list_employees(session: AsyncSession, offset: int = 0, limit: int = 50) -> EmployeeListResponse:
    employees, total = await _employees.find_all(session, offset=offset, limit=limit)
    return EmployeeListResponse(items=[_build_employee_response(e) for e in employees], total=total)


async def set_employee_active(
    tx: TransactionManager,
    actor: Actor,
    employee_id: uuid.UUID,
    is_active: bool,
    request_info: RequestInfo | None = None,
) -> EmployeeResponse:
    """Soft delete (or restore) an employee."""
    options = _activity.create_options(
        ActivityAction.DELETE_EMPLOYEE,
        EntityType.EMPLOYEE,
        actor,
        {"employee_id": str(employee_id), "is_active": is_active},
        request_info,
        f"Set employee {employee_id} active={is_active}",
        f"Failed to set employee {employee_id} active={is_active}",
    )

    async def _toggle(session: AsyncSession) -> Employee:
        employee = await _get_employee_or_404(session, employee_id)
        return await _employees.soft_delete(employee, is_active, session)

    return _build_employee_response(await run_logged(tx, _activity, options, _toggle))
