# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.exceptions import BadRequestException, ConflictException, NotFoundException
from app.models.enums import ActivityAction, EntityType, LeaveBalanceStatus
from app.models.leave_balance import LeaveBalance
from app.repositories import (
    EmployeeRepository,
    LeaveBalanceRepository,
    LeavePolicyRepository,
    LeaveTypeRepository,
    LeaveYearRepository,
)
from app.schemas.leave_balance import (
    GenerateBalancesResponse,
    LeaveBalanceListResponse,
    LeaveBalanceResponse,
    LeaveTransactionListResponse,
    LeaveTransactionResponse,
    ResetBalancesResponse,
    SkippedBalance,
    SkipReason,
)
from app.services.activity import ActivityLogger, run_logged
from app.services.leave_policy import check_eligibility

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.models.employee import Employee
    from app.models.leave_policy import LeavePolicy
    from app.models.leave_transaction import LeaveTransaction
    from app.models.leave_year import LeaveYearConfiguration
    from app.schemas.context import Actor, RequestInfo
    from app.schemas.leave_balance import CreateLeaveBalanceRequest
    from app.services.transaction import TransactionManager

logger = logging.getLogger(__name__)

_employees = EmployeeRepository()
_leave_types = LeaveTypeRepository()
_policies = LeavePolicyRepository()
_balances = LeaveBalanceRepository()
_leave_years = LeaveYearRepository()
_activity = ActivityLogger()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_balance_response(balance: LeaveBalance) -> LeaveBalanceResponse:
    return LeaveBalanceResponse(
        id=balance.id,
        employee_id=balance.employee_id,
        leave_type_id=balance.leave_type_id,
        policy_id=balance.policy_id,
        year=balance.year,
        beginning_balance=balance.beginning_balance,
        earned=balance.earned,
        used=balance.used,
        carried_over=balance.carried_over,
        encashed=balance.encashed,
        remaining=balance.remaining,
        last_transaction_date=balance.last_transaction_date,
        status=LeaveBalanceStatus(balance.status),
        remarks=balance.remarks,
    )


def _build_transaction_response(transaction: LeaveTransaction) -> LeaveTransactionResponse:
    return LeaveTransactionResponse(
        id=transaction.id,
        balance_id=transaction.balance_id,
        request_id=transaction.request_id,
        transaction_type=transaction.transaction_type,
        days=transaction.days,
        remarks=transaction.remarks,
        created_at=transaction.created_at,
    )


def calculate_carry_over(previous: LeaveBalance | None, policy: LeavePolicy) -> float:
    """Days carried into a new year: previous remaining, capped by the policy."""
    if previous is None:
        return 0.0
    return max(0.0, min(previous.remaining, policy.carry_limit))


async def _resolve_leave_year(session: AsyncSession, year: int) -> tuple[LeaveYearConfiguration, int | None]:
    """Leave year whose cutoff starts in ``year``, plus the balance year carried over from."""
    config = await _leave_years.find_by_start_year(year, session)
    if config is None:
        raise NotFoundException(f"Leave year configuration not found for year {year}")
    previous = await _leave_years.find_previous(config, session)
    return config, previous.balance_year if previous is not None else None


async def _open_balance(
    session: AsyncSession,
    employee: Employee,
    policy: LeavePolicy,
    year: int,
    previous_year: int | None,
    remarks: str | None = None,
) -> LeaveBalance:
    """Insert an OPEN balance seeded with entitlement and carry-over."""
    previous = None
    if previous_year is not None:
        previous = await _balances.find_by_leave_type(employee.id, policy.leave_type_id, previous_year, session)
    carried_over = calculate_carry_over(previous, policy)
    earned = policy.annual_entitlement

    balance = LeaveBalance(
        employee_id=employee.id,
        leave_type_id=policy.leave_type_id,
        policy_id=policy.id,
        year=year,
        beginning_balance=earned + carried_over,
        earned=earned,
        carried_over=carried_over,
        remaining=earned + carried_over,
        last_transaction_date=datetime.now(UTC),
        remarks=remarks,
    )
    return await _balances.create(balance, session)


async def _get_balance_or_404(session: AsyncSession, balance_id: uuid.UUID) -> LeaveBalance:
    balance = await _balances.find_by_id(balance_id, session)
    if balance is None or not balance.is_active:
        raise NotFoundException("Leave balance not found")
    return balance


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_balance(
    tx: TransactionManager,
    actor: Actor,
    payload: CreateLeaveBalanceRequest,
    request_info: RequestInfo | None = None,
) -> LeaveBalanceResponse:
    """Open a yearly balance for one employee and leave type.

    1. Employee, leave type and the type's active policy must exist.
    2. A leave year configuration must start in the requested year.
    3. Employee must be eligible as of that leave year's cutoff start.
    4. Only one balance per employee, leave type and year.
    5. Carry over from the previous leave year, capped by the policy.
    """
    options = _activity.create_options(
        ActivityAction.CREATE_LEAVE_BALANCE,
        EntityType.LEAVE_BALANCE,
        actor,
        payload,
        request_info,
        f"Created leave balance for employee {payload.employee_id}, year {payload.year}",
        f"Failed to create leave balance for employee {payload.employee_id}, year {payload.year}",
    )

    async def _create(session: AsyncSession) -> LeaveBalance:
        employee = await _employees.find_by_id(payload.employee_id, session)
        if employee is None or not employee.is_active:
            raise NotFoundException("Employee not found")

        leave_type = await _leave_types.find_by_id(payload.leave_type_id, session)
        if leave_type is None or not leave_type.is_active:
            raise NotFoundException("Leave type not found or inactive")

        policy = await _policies.get_active_policy(leave_type.id, session)
        if policy is None:
            raise NotFoundException(f'Active leave policy not found for leave type "{leave_type.name}"')

        config, previous_year = await _resolve_leave_year(session, payload.year)

        eligibility = check_eligibility(
            policy, employee.hire_date, employee.employment_status, config.cutoff_start_date
        )
        if not eligibility.eligible:
            raise BadRequestException(
                f'Employee is not eligible for leave type "{leave_type.name}" in year {payload.year}. '
                f"{eligibility.reason}"
            )

        if await _balances.find_by_leave_type(employee.id, leave_type.id, payload.year, session) is not None:
            raise ConflictException(
                f"Leave balance already exists for employee {employee.employee_no}, "
                f"leave type {leave_type.name}, year {payload.year}"
            )

        return await _open_balance(session, employee, policy, payload.year, previous_year, payload.remarks)

    return _build_balance_response(await run_logged(tx, _activity, options, _create))


async def close_balance(
    tx: TransactionManager,
    actor: Actor,
    balance_id: uuid.UUID,
    request_info: RequestInfo | None = None,
) -> LeaveBalanceResponse:
    """Close a balance so no further requests can draw on it."""
    options = _activity.create_options(
        ActivityAction.CLOSE_LEAVE_BALANCE,
        EntityType.LEAVE_BALANCE,
        actor,
        {"balance_id": str(balance_id)},
        request_info,
        f"Closed leave balance with ID: {balance_id}",
        f"Failed to close leave balance with ID: {balance_id}",
    )

    async def _close(session: AsyncSession) -> LeaveBalance:
        balance = await _get_balance_or_404(session, balance_id)
        if balance.status == LeaveBalanceStatus.CLOSED:
            raise BadRequestException("Leave balance is already closed")
        return await _balances.close_balance(balance, session)

    return _build_balance_response(await run_logged(tx, _activity, options, _close))


async def delete_balance(
    tx: TransactionManager,
    actor: Actor,
    balance_id: uuid.UUID,
    request_info: RequestInfo | None = None,
) -> None:
    """Soft delete a balance; its year can then be opened again."""
    options = _activity.create_options(
        ActivityAction.DELETE_LEAVE_BALANCE,
        EntityType.LEAVE_BALANCE,
        actor,
        {"balance_id": str(balance_id)},
        request_info,
        f"Soft deleted leave balance with ID: {balance_id}",
        f"Failed to delete leave balance with ID: {balance_id}",
    )

    async def _delete(session: AsyncSession) -> LeaveBalance:
        balance = await _get_balance_or_404(session, balance_id)
        return await _balances.soft_delete(balance, False, session)

    await run_logged(tx, _activity, options, _delete)


async def reset_balances_for_year(
    tx: TransactionManager,
    actor: Actor,
    year: int,
    request_info: RequestInfo | None = None,
) -> ResetBalancesResponse:
    """Return every active balance of a year to its opening state.

    Used and encashed days go back to zero and remaining to the beginning
    balance. Ledger rows are kept.
    """
    options = _activity.create_options(
        ActivityAction.RESET_LEAVE_BALANCES,
        EntityType.LEAVE_BALANCE,
        actor,
        {"year": year},
        request_info,
        f"Reset leave balances for year {year}",
        f"Failed to reset leave balances for year {year}",
    )

    async def _reset(session: AsyncSession) -> ResetBalancesResponse:
        reset_count = await _balances.reset_for_year(year, session)
        logger.info("Reset %d leave balances for year %s", reset_count, year)
        return ResetBalancesResponse(year=year, reset_count=reset_count)

    return await run_logged(tx, _activity, options, _reset)


async def generate_annual_balances(
    tx: TransactionManager,
    actor: Actor,
    year: int,
    request_info: RequestInfo | None = None,
) -> GenerateBalancesResponse:
    """Open balances for every active employee under every active policy.

    Fails when there is no active policy, no active employee, or no leave
    year starting in ``year``. Ineligible employees and existing balances
    are skipped and reported.
    """
    options = _activity.create_options(
        ActivityAction.GENERATE_LEAVE_BALANCES,
        EntityType.LEAVE_BALANCE,
        actor,
        {"year": year},
        request_info,
        f"Generated leave balances for year {year}",
        f"Failed to generate leave balances for year {year}",
    )

    async def _generate(session: AsyncSession) -> GenerateBalancesResponse:
        policies = await _policies.list_active(session)
        if not policies:
            raise BadRequestException("No active leave policies found")

        employees = await _employees.list_active(session)
        if not employees:
            raise NotFoundException("No active employees found")

        config, previous_year = await _resolve_leave_year(session, year)

        created: list[LeaveBalanceResponse] = []
        skipped: list[SkippedBalance] = []
        for employee in employees:
            for policy in policies:
                eligibility = check_eligibility(
                    policy, employee.hire_date, employee.employment_status, config.cutoff_start_date
                )
                if not eligibility.eligible:
                    skipped.append(
                        SkippedBalance(
                            employee_id=employee.id,
                            leave_type_id=policy.leave_type_id,
                            reason=SkipReason.INELIGIBLE,
                            details=eligibility.reason,
                        )
                    )
                    continue

                existing = await _balances.find_by_leave_type(employee.id, policy.leave_type_id, year, session)
                if existing is not None:
                    skipped.append(
                        SkippedBalance(
                            employee_id=employee.id,
                            leave_type_id=policy.leave_type_id,
                            reason=SkipReason.BALANCE_ALREADY_EXISTS,
                        )
                    )
                    continue

                balance = await _open_balance(session, employee, policy, year, previous_year)
                created.append(_build_balance_response(balance))

        logger.info("Balance generation for %s: %d created, %d skipped", year, len(created), len(skipped))
        return GenerateBalancesResponse(year=year, created=created, skipped=skipped)

    return await run_logged(tx, _activity, options, _generate)


async def get_balance(session: AsyncSession, balance_id: uuid.UUID) -> LeaveBalanceResponse:
    return _build_balance_response(await _get_balance_or_404(session, balance_id))


async def list_employee_balances(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int | None = None,
) -> LeaveBalanceListResponse:
    balances = await _balances.find_by_employee(employee_id, session, year=year)
    return LeaveBalanceListResponse(items=[_build_balance_response(b) for b in balances], total=len(balances))


async def list_balance_transactions(session: AsyncSession, balance_id: uuid.UUID) -> LeaveTransactionListResponse:
    """Ledger of movements against a balance, oldest first."""
    await _get_balance_or_404(session, balance_id)
    transactions = await _balances.find_transactions(balance_id, session)
    return LeaveTransactionListResponse(
        items=[_build_transaction_response(t) for t in transactions],
        total=len(transactions),
    )
