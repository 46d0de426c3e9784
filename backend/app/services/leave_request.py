# ruff: noqa: TC003
"""Leave request lifecycle.

Filing and editing a request run the same pipeline: normalize dates, count
days net of holidays, check eligibility, check the balance, check overlaps,
then persist. Approval consumes the balance with a conditional decrement;
cancelling an approved request gives the days back.
"""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any

from app.exceptions import BadRequestException, NotFoundException
from app.models.enums import (
    ActivityAction,
    EntityType,
    LeaveBalanceStatus,
    LeaveRequestStatus,
    LeaveTransactionType,
)
from app.models.leave_request import LeaveRequest
from app.models.leave_transaction import LeaveTransaction
from app.repositories import (
    EmployeeRepository,
    HolidayRepository,
    LeaveBalanceRepository,
    LeavePolicyRepository,
    LeaveRequestRepository,
    LeaveTypeRepository,
)
from app.schemas.leave_request import LeaveRequestListResponse, LeaveRequestResponse
from app.services.activity import ActivityLogger, run_logged
from app.services.dates import business_today, date_key, to_calendar_date
from app.services.duration import ensure_positive_total, fetch_holiday_dates, resolve_total_days
from app.services.leave_policy import check_eligibility
from app.services.leave_validation import (
    ValidationMode,
    ensure_balance_usable,
    ensure_half_day_same_date,
    ensure_no_overlaps,
    format_days,
    validate_date_range,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.models.leave_type import LeaveType
    from app.schemas.context import Actor, RequestInfo
    from app.schemas.leave_request import CreateLeaveRequestPayload, UpdateLeaveRequestPayload
    from app.services.duration import DayCount
    from app.services.transaction import TransactionManager

logger = logging.getLogger(__name__)

_employees = EmployeeRepository()
_leave_types = LeaveTypeRepository()
_policies = LeavePolicyRepository()
_balances = LeaveBalanceRepository()
_requests = LeaveRequestRepository()
_holidays = HolidayRepository()
_activity = ActivityLogger()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(request: LeaveRequest) -> LeaveRequestResponse:
    """Map a request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        employee_id=request.employee_id,
        leave_type_id=request.leave_type_id,
        leave_type=request.leave_type,
        start_date=request.start_date,
        end_date=request.end_date,
        total_days=request.total_days,
        reason=request.reason,
        balance_id=request.balance_id,
        status=LeaveRequestStatus(request.status),
        approval_by=request.approval_by,
        approval_date=request.approval_date,
        remarks=request.remarks,
        created_at=request.created_at,
    )


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


async def _get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    request = await _requests.find_by_id(request_id, session)
    if request is None or not request.is_active:
        raise NotFoundException("Leave request not found")
    return request


async def _get_active_leave_type(session: AsyncSession, name: str) -> LeaveType:
    leave_type = await _leave_types.find_by_name(name, session)
    if leave_type is None or not leave_type.is_active:
        raise NotFoundException(f'Leave type "{name}" not found or inactive')
    return leave_type


async def _count_days(
    session: AsyncSession,
    start: date,
    end: date,
    explicit_total: float | None,
    is_half_day: bool,
) -> DayCount:
    """Resolve and validate the number of days a range consumes."""
    holidays = await fetch_holiday_dates(session, start, end, _holidays)
    count = resolve_total_days(start, end, holidays, explicit_total=explicit_total, is_half_day=is_half_day)
    ensure_positive_total(count)
    return count


async def _ensure_balance_covers(session: AsyncSession, balance_id: uuid.UUID, requested: float) -> None:
    balance = await _balances.find_by_id(balance_id, session)
    ensure_balance_usable(balance, requested, ValidationMode.UPDATE)


# ---------------------------------------------------------------------------
# Create / update
# ---------------------------------------------------------------------------


async def create_leave_request(
    tx: TransactionManager,
    actor: Actor,
    payload: CreateLeaveRequestPayload,
    request_info: RequestInfo | None = None,
    today: date | None = None,
) -> LeaveRequestResponse:
    """File a new PENDING leave request.

    1. Normalize dates and check them against today and each other.
    2. Employee, leave type (active) and its active policy must exist.
    3. Employee must be eligible under the policy as of the start date.
    4. Count days: explicit total, half-day, or calendar days minus holidays.
    5. Balance for the start date's year must be OPEN and sufficient.
    6. No overlap with the employee's PENDING or APPROVED requests.
    7. Persist. The balance is only consumed on approval.
    """
    options = _activity.create_options(
        ActivityAction.CREATE_LEAVE,
        EntityType.LEAVE_REQUEST,
        actor,
        payload,
        request_info,
        f"Created leave request for employee {payload.employee_id}",
        f"Failed to create leave request for employee {payload.employee_id}",
    )

    async def _create(session: AsyncSession) -> LeaveRequest:
        start = to_calendar_date(payload.start_date, "start")
        end = to_calendar_date(payload.end_date, "end")
        validate_date_range(start, end, today or business_today())
        ensure_half_day_same_date(start, end, payload.is_half_day)

        employee = await _employees.find_by_id(payload.employee_id, session)
        if employee is None or not employee.is_active:
            raise NotFoundException("Employee not found")

        leave_type = await _get_active_leave_type(session, payload.leave_type)
        policy = await _policies.get_active_policy(leave_type.id, session)
        if policy is None:
            raise NotFoundException(f'Active leave policy not found for leave type "{payload.leave_type}"')

        eligibility = check_eligibility(policy, employee.hire_date, employee.employment_status, start)
        if not eligibility.eligible:
            raise BadRequestException(f"Employee is not eligible for {payload.leave_type}. {eligibility.reason}")

        count = await _count_days(session, start, end, payload.total_days, payload.is_half_day)

        balance = await _balances.find_by_leave_type(employee.id, leave_type.id, start.year, session)
        balance = ensure_balance_usable(
            balance,
            count.total_days,
            ValidationMode.CREATE,
            not_found_message=(
                f'Leave balance not found for employee {employee.id}, '
                f'leave type "{payload.leave_type}", year {start.year}'
            ),
        )

        overlaps = await _requests.find_overlapping_requests(employee.id, start, end, None, session)
        ensure_no_overlaps(overlaps)

        request = LeaveRequest(
            employee_id=employee.id,
            leave_type_id=leave_type.id,
            leave_type=leave_type.name,
            start_date=start,
            end_date=end,
            total_days=count.total_days,
            reason=payload.reason,
            balance_id=balance.id,
        )
        return await _requests.create(request, session)

    return _build_request_response(await run_logged(tx, _activity, options, _create))


async def update_leave_request(
    tx: TransactionManager,
    actor: Actor,
    request_id: uuid.UUID,
    payload: UpdateLeaveRequestPayload,
    request_info: RequestInfo | None = None,
    today: date | None = None,
) -> LeaveRequestResponse:
    """Edit a PENDING request.

    1. Changing the leave type moves the request to that type's balance,
       which must exist, be OPEN and cover the current total.
    2. New dates go through the same checks as filing; the total is
       recounted and overlaps are checked excluding this request.
    3. A new total without new dates must be positive.
    4. Whenever the total changes the applicable balance is re-checked.
    """
    options = _activity.create_options(
        ActivityAction.UPDATE_LEAVE,
        EntityType.LEAVE_REQUEST,
        actor,
        payload,
        request_info,
        f"Updated leave request with ID: {request_id}",
        f"Failed to update leave request with ID: {request_id}",
    )

    async def _update(session: AsyncSession) -> LeaveRequest:
        existing = await _get_request_or_404(session, request_id)
        if existing.status != LeaveRequestStatus.PENDING:
            raise BadRequestException(
                f"Cannot update request. Current status: {existing.status}. Only PENDING requests can be updated."
            )

        dates_updated = _has_value(payload.start_date) or _has_value(payload.end_date)
        start = to_calendar_date(payload.start_date, "start") if _has_value(payload.start_date) else existing.start_date
        end = to_calendar_date(payload.end_date, "end") if _has_value(payload.end_date) else existing.end_date

        values: dict[str, Any] = {}
        balance_id = existing.balance_id

        if payload.leave_type is not None:
            leave_type = await _get_active_leave_type(session, payload.leave_type)
            if leave_type.id != existing.leave_type_id:
                new_balance = await _balances.find_by_leave_type(
                    existing.employee_id, leave_type.id, start.year, session
                )
                if new_balance is None:
                    raise NotFoundException(
                        f"Leave balance not found for employee {existing.employee_id}, "
                        f'leave type "{payload.leave_type}", year {start.year}'
                    )
                if new_balance.status != LeaveBalanceStatus.OPEN:
                    raise BadRequestException(
                        f'Cannot change leave type. Balance for "{payload.leave_type}" is closed.'
                    )
                if new_balance.remaining < existing.total_days:
                    raise BadRequestException(
                        "Insufficient leave balance for new leave type. "
                        f"Available: {format_days(new_balance.remaining)} days, "
                        f"Requested: {format_days(existing.total_days)} days"
                    )
                balance_id = new_balance.id
            values.update(leave_type_id=leave_type.id, leave_type=leave_type.name, balance_id=balance_id)

        if dates_updated:
            validate_date_range(start, end, today or business_today())
            ensure_half_day_same_date(start, end, payload.is_half_day)
            count = await _count_days(session, start, end, payload.total_days, payload.is_half_day)
            if count.total_days != existing.total_days:
                await _ensure_balance_covers(session, balance_id, count.total_days)

            overlaps = await _requests.find_overlapping_requests(
                existing.employee_id, start, end, existing.id, session
            )
            ensure_no_overlaps(overlaps)
            values.update(start_date=start, end_date=end, total_days=count.total_days)
        elif payload.total_days is not None:
            if payload.total_days <= 0:
                raise BadRequestException("Total days must be greater than 0")
            if payload.total_days != existing.total_days:
                await _ensure_balance_covers(session, balance_id, payload.total_days)
            values["total_days"] = payload.total_days

        if payload.reason is not None:
            values["reason"] = payload.reason

        if not values:
            raise BadRequestException("No fields to update")

        return await _requests.update(existing, values, session)

    return _build_request_response(await run_logged(tx, _activity, options, _update))


# ---------------------------------------------------------------------------
# Approval workflow
# ---------------------------------------------------------------------------


async def approve_leave_request(
    tx: TransactionManager,
    actor: Actor,
    request_id: uuid.UUID,
    remarks: str | None = None,
    request_info: RequestInfo | None = None,
) -> LeaveRequestResponse:
    """Approve a PENDING request and consume its balance.

    The balance row is decremented only if it is still OPEN and still
    covers the request, then a negative ledger entry is written.
    """
    options = _activity.create_options(
        ActivityAction.APPROVE_LEAVE,
        EntityType.LEAVE_REQUEST,
        actor,
        {"request_id": str(request_id), "remarks": remarks},
        request_info,
        f"Approved leave request with ID: {request_id}",
        f"Failed to approve leave request with ID: {request_id}",
    )

    async def _approve(session: AsyncSession) -> LeaveRequest:
        request = await _get_request_or_404(session, request_id)
        if request.status != LeaveRequestStatus.PENDING:
            raise BadRequestException(
                f"Cannot approve request. Current status: {request.status}. Only PENDING requests can be approved."
            )

        balance = await _balances.find_by_id(request.balance_id, session)
        if balance is None:
            raise NotFoundException("Leave balance not found")
        if balance.status != LeaveBalanceStatus.OPEN:
            raise BadRequestException("Cannot approve request. Balance is closed.")

        if not await _balances.consume(balance.id, request.total_days, session):
            raise BadRequestException(
                f"Insufficient leave balance. Available: {format_days(balance.remaining)} days, "
                f"Requested: {format_days(request.total_days)} days"
            )

        await _balances.add_transaction(
            LeaveTransaction(
                balance_id=balance.id,
                request_id=request.id,
                transaction_type=LeaveTransactionType.REQUEST.value,
                days=-request.total_days,
                remarks=(
                    f"Leave request approved - {format_days(request.total_days)} days from "
                    f"{date_key(request.start_date)} to {date_key(request.end_date)}"
                ),
            ),
            session,
        )

        logger.info("Approving leave request %s (%s days)", request.id, format_days(request.total_days))
        return await _requests.update(
            request,
            {
                "status": LeaveRequestStatus.APPROVED.value,
                "approval_by": actor.audit_id,
                "approval_date": datetime.now(UTC),
                "remarks": remarks or "",
            },
            session,
        )

    return _build_request_response(await run_logged(tx, _activity, options, _approve))


async def reject_leave_request(
    tx: TransactionManager,
    actor: Actor,
    request_id: uuid.UUID,
    remarks: str | None,
    request_info: RequestInfo | None = None,
) -> LeaveRequestResponse:
    """Reject a PENDING request. Remarks are mandatory; the balance is untouched."""
    options = _activity.create_options(
        ActivityAction.REJECT_LEAVE,
        EntityType.LEAVE_REQUEST,
        actor,
        {"request_id": str(request_id), "remarks": remarks},
        request_info,
        f"Rejected leave request with ID: {request_id}",
        f"Failed to reject leave request with ID: {request_id}",
    )

    async def _reject(session: AsyncSession) -> LeaveRequest:
        if not remarks or not remarks.strip():
            raise BadRequestException("Rejection remarks are required")

        request = await _get_request_or_404(session, request_id)
        if request.status != LeaveRequestStatus.PENDING:
            raise BadRequestException(
                f"Cannot reject request. Current status: {request.status}. Only PENDING requests can be rejected."
            )

        logger.info("Rejecting leave request %s", request.id)
        return await _requests.update(
            request,
            {
                "status": LeaveRequestStatus.REJECTED.value,
                "approval_by": actor.audit_id,
                "approval_date": datetime.now(UTC),
                "remarks": remarks.strip(),
            },
            session,
        )

    return _build_request_response(await run_logged(tx, _activity, options, _reject))


async def cancel_leave_request(
    tx: TransactionManager,
    actor: Actor,
    request_id: uuid.UUID,
    employee_id: uuid.UUID,
    request_info: RequestInfo | None = None,
) -> LeaveRequestResponse:
    """Cancel an employee's own request.

    A PENDING request never touched the balance. An APPROVED request gives
    its days back, which requires the balance to still be OPEN.
    """
    options = _activity.create_options(
        ActivityAction.CANCEL_LEAVE,
        EntityType.LEAVE_REQUEST,
        actor,
        {"request_id": str(request_id), "employee_id": str(employee_id)},
        request_info,
        f"Cancelled leave request with ID: {request_id}",
        f"Failed to cancel leave request with ID: {request_id}",
    )

    async def _cancel(session: AsyncSession) -> LeaveRequest:
        request = await _get_request_or_404(session, request_id)
        if request.employee_id != employee_id:
            raise BadRequestException("Cannot cancel request. Employee does not own this request.")

        if request.status == LeaveRequestStatus.APPROVED:
            balance = await _balances.find_by_id(request.balance_id, session)
            if balance is None:
                raise NotFoundException("Leave balance not found")
            if balance.status != LeaveBalanceStatus.OPEN:
                raise BadRequestException("Cannot cancel approved request. Balance is closed.")

            await _balances.restore(balance.id, request.total_days, session)
            await _balances.add_transaction(
                LeaveTransaction(
                    balance_id=balance.id,
                    request_id=request.id,
                    transaction_type=LeaveTransactionType.CANCELLATION.value,
                    days=request.total_days,
                    remarks=f"Leave request cancelled - {format_days(request.total_days)} days restored",
                ),
                session,
            )
        elif request.status != LeaveRequestStatus.PENDING:
            raise BadRequestException(
                f"Cannot cancel request. Current status: {request.status}. "
                "Only PENDING or APPROVED requests can be cancelled."
            )

        logger.info("Cancelling leave request %s (was %s)", request.id, request.status)
        return await _requests.update(request, {"status": LeaveRequestStatus.CANCELLED.value}, session)

    return _build_request_response(await run_logged(tx, _activity, options, _cancel))


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_leave_request(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequestResponse:
    return _build_request_response(await _get_request_or_404(session, request_id))


async def list_employee_requests(session: AsyncSession, employee_id: uuid.UUID) -> LeaveRequestListResponse:
    requests = await _requests.find_by_employee(employee_id, session)
    return LeaveRequestListResponse(items=[_build_request_response(r) for r in requests], total=len(requests))


async def list_pending_requests(session: AsyncSession) -> LeaveRequestListResponse:
    requests = await _requests.find_pending(session)
    return LeaveRequestListResponse(items=[_build_request_response(r) for r in requests], total=len(requests))


async def list_leave_requests(
    session: AsyncSession,
    status_filter: LeaveRequestStatus | None = None,
    employee_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List leave requests with optional filters, newest first."""
    requests, total = await _requests.find_paginated(
        session,
        status=status_filter.value if status_filter is not None else None,
        employee_id=employee_id,
        offset=offset,
        limit=limit,
    )
    return LeaveRequestListResponse(items=[_build_request_response(r) for r in requests], total=total)
