# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from app.exceptions import BadRequestException, ConflictException, NotFoundException
from app.models.enums import ActivityAction, EntityType, LeaveCycleStatus
from app.models.leave_cycle import LeaveCycle
from app.repositories import EmployeeRepository, LeaveCycleRepository, LeavePolicyRepository, LeaveTypeRepository
from app.schemas.leave_cycle import LeaveCycleResponse, SetupLeaveCyclesResponse
from app.services.activity import ActivityLogger, run_logged
from app.services.dates import business_today

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.models.employee import Employee
    from app.models.leave_policy import LeavePolicy
    from app.schemas.context import Actor, RequestInfo
    from app.schemas.leave_cycle import CreateLeaveCycleRequest
    from app.services.transaction import TransactionManager

logger = logging.getLogger(__name__)

_employees = EmployeeRepository()
_leave_types = LeaveTypeRepository()
_policies = LeavePolicyRepository()
_cycles = LeaveCycleRepository()
_activity = ActivityLogger()


# ---------------------------------------------------------------------------
# Cycle arithmetic
# ---------------------------------------------------------------------------


def employee_start_year(employee: Employee) -> int | None:
    """Year cycles are counted from: regularization, else hire, else unknown."""
    if employee.regularization_date is not None:
        return employee.regularization_date.year
    if employee.hire_date is not None:
        return employee.hire_date.year
    return None


def calculate_cycle_years(start_year: int | None, base_year: int, cycle_length: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the cycle containing ``base_year``.

    Cycles are laid end to end from ``start_year`` in steps of
    ``cycle_length``; e.g. from 2013 with length 5, 2025 falls in 2023-2028.
    Without a start year the cycle begins at ``base_year``. A base year
    before the start year gets the first cycle.
    """
    anchor = start_year if start_year is not None else base_year
    if base_year < anchor:
        return anchor, anchor + cycle_length
    cycle_start = anchor + ((base_year - anchor) // cycle_length) * cycle_length
    return cycle_start, cycle_start + cycle_length


def _build_cycle_response(cycle: LeaveCycle) -> LeaveCycleResponse:
    return LeaveCycleResponse(
        id=cycle.id,
        employee_id=cycle.employee_id,
        leave_type_id=cycle.leave_type_id,
        leave_type=cycle.leave_type,
        cycle_start_year=cycle.cycle_start_year,
        cycle_end_year=cycle.cycle_end_year,
        total_carried=cycle.total_carried,
        status=LeaveCycleStatus(cycle.status),
    )


def _new_cycle(employee: Employee, policy: LeavePolicy, leave_type_name: str, base_year: int) -> LeaveCycle:
    start, end = calculate_cycle_years(employee_start_year(employee), base_year, policy.cycle_length_years)
    return LeaveCycle(
        employee_id=employee.id,
        leave_type_id=policy.leave_type_id,
        leave_type=leave_type_name,
        cycle_start_year=start,
        cycle_end_year=end,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_leave_cycle(
    tx: TransactionManager,
    actor: Actor,
    payload: CreateLeaveCycleRequest,
    request_info: RequestInfo | None = None,
    today: date | None = None,
) -> LeaveCycleResponse:
    """Open the cycle containing the given year for one employee and leave type.

    Fails when any cycle of the same employee and leave type, active or
    completed, already covers one of its years.
    """
    options = _activity.create_options(
        ActivityAction.CREATE_LEAVE_CYCLE,
        EntityType.LEAVE_CYCLE,
        actor,
        payload,
        request_info,
        f'Created leave cycle for employee {payload.employee_id}, leave type "{payload.leave_type}"',
        f'Failed to create leave cycle for employee {payload.employee_id}, leave type "{payload.leave_type}"',
    )
    base_year = payload.year or (today or business_today()).year

    async def _create(session: AsyncSession) -> LeaveCycle:
        employee = await _employees.find_by_id(payload.employee_id, session)
        if employee is None or not employee.is_active:
            raise NotFoundException("Employee not found")

        leave_type = await _leave_types.find_by_name(payload.leave_type, session)
        if leave_type is None or not leave_type.is_active:
            raise NotFoundException(f'Leave type "{payload.leave_type}" not found or inactive')

        policy = await _policies.get_active_policy(leave_type.id, session)
        if policy is None:
            raise BadRequestException(f"No active leave policy found for leave type {leave_type.name}")

        cycle = _new_cycle(employee, policy, leave_type.name, base_year)
        overlapping = await _cycles.find_overlapping_cycle(
            employee.id, leave_type.id, cycle.cycle_start_year, cycle.cycle_end_year, session
        )
        if overlapping is not None:
            state = "An active" if overlapping.status == LeaveCycleStatus.ACTIVE else "A completed"
            raise ConflictException(
                f"{state} cycle already exists for employee {employee.employee_no}, leave type {leave_type.name} "
                f"covering years {overlapping.cycle_start_year}-{overlapping.cycle_end_year}"
            )

        return await _cycles.create(cycle, session)

    return _build_cycle_response(await run_logged(tx, _activity, options, _create))


async def setup_leave_cycles(
    tx: TransactionManager,
    actor: Actor,
    year: int | None = None,
    request_info: RequestInfo | None = None,
    today: date | None = None,
) -> SetupLeaveCyclesResponse:
    """Open a cycle for every active employee under every active policy.

    Pairs that already have an active or overlapping cycle are skipped.
    """
    base_year = year or (today or business_today()).year
    options = _activity.create_options(
        ActivityAction.SETUP_LEAVE_CYCLES,
        EntityType.LEAVE_CYCLE,
        actor,
        {"year": base_year},
        request_info,
        f"Set up leave cycles for year {base_year}",
        f"Failed to set up leave cycles for year {base_year}",
    )

    async def _setup(session: AsyncSession) -> SetupLeaveCyclesResponse:
        policies = await _policies.list_active(session)
        if not policies:
            raise BadRequestException("No active leave policies found")

        employees = await _employees.list_active(session)
        if not employees:
            raise NotFoundException("No active employees found")

        created: list[LeaveCycleResponse] = []
        skipped = 0
        for policy in policies:
            leave_type = await _leave_types.find_by_id(policy.leave_type_id, session)
            leave_type_name = leave_type.name if leave_type is not None else ""
            for employee in employees:
                if await _cycles.get_active_cycle(employee.id, policy.leave_type_id, session) is not None:
                    skipped += 1
                    continue

                cycle = _new_cycle(employee, policy, leave_type_name, base_year)
                overlapping = await _cycles.find_overlapping_cycle(
                    employee.id, policy.leave_type_id, cycle.cycle_start_year, cycle.cycle_end_year, session
                )
                if overlapping is not None:
                    skipped += 1
                    continue

                created.append(_build_cycle_response(await _cycles.create(cycle, session)))

        logger.info("Leave cycle setup for %s: %d created, %d skipped", base_year, len(created), skipped)
        return SetupLeaveCyclesResponse(year=base_year, created=created, skipped=skipped)

    return await run_logged(tx, _activity, options, _setup)


async def close_cycle(
    tx: TransactionManager,
    actor: Actor,
    cycle_id: uuid.UUID,
    request_info: RequestInfo | None = None,
) -> LeaveCycleResponse:
    """Mark a cycle COMPLETED."""
    options = _activity.create_options(
        ActivityAction.CLOSE_LEAVE_CYCLE,
        EntityType.LEAVE_CYCLE,
        actor,
        {"cycle_id": str(cycle_id)},
        request_info,
        f"Closed leave cycle {cycle_id}",
        f"Failed to close leave cycle {cycle_id}",
    )

    async def _close(session: AsyncSession) -> LeaveCycle:
        cycle = await _cycles.find_by_id(cycle_id, session)
        if cycle is None or not cycle.is_active:
            raise NotFoundException(f"Leave cycle with id {cycle_id} not found")
        if cycle.status == LeaveCycleStatus.COMPLETED:
            raise BadRequestException("Leave cycle is already completed")
        return await _cycles.close_cycle(cycle, session)

    return _build_cycle_response(await run_logged(tx, _activity, options, _close))


async def get_active_cycle(
    session: AsyncSession,
    employee_id: uuid.UUID,
    leave_type_id: uuid.UUID,
) -> LeaveCycleResponse:
    cycle = await _cycles.get_active_cycle(employee_id, leave_type_id, session)
    if cycle is None:
        raise NotFoundException(f"No active cycle found for employee {employee_id} and leave type {leave_type_id}")
    return _build_cycle_response(cycle)
