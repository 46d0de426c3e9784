# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from app.exceptions import BadRequestException, NotFoundException
from app.models.enums import ActivityAction, EntityType, LeavePolicyStatus
from app.models.leave_policy import LeavePolicy
from app.repositories import LeavePolicyRepository, LeaveTypeRepository
from app.schemas.leave_policy import EligibilityResult, LeavePolicyListResponse, LeavePolicyResponse
from app.services.activity import ActivityLogger, run_logged

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.context import Actor, RequestInfo
    from app.schemas.leave_policy import CreateLeavePolicyRequest, UpdateLeavePolicyRequest
    from app.services.transaction import TransactionManager

_policies = LeavePolicyRepository()
_leave_types = LeaveTypeRepository()
_activity = ActivityLogger()

# Fields an update may set back to null.
_CLEARABLE_POLICY_FIELDS = frozenset({"effective_date", "expiry_date", "remarks"})


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------


def months_of_service(hire_date: date, reference_date: date) -> int:
    """Completed months between hire date and reference date."""
    months = (reference_date.year - hire_date.year) * 12 + (reference_date.month - hire_date.month)
    if reference_date.day < hire_date.day:
        months -= 1
    return max(0, months)


def check_eligibility(
    policy: LeavePolicy,
    hire_date: date | None,
    employment_status: str | None,
    reference_date: date,
) -> EligibilityResult:
    """Decide whether an employee may use leave under ``policy``.

    ``reference_date`` is the request start date when filing, or the leave
    year cutoff start when opening balances.
    """
    allowed = {status.strip().lower() for status in policy.allowed_employment_statuses if status.strip()}
    if allowed:
        current = (employment_status or "").strip().lower()
        if current not in allowed:
            return EligibilityResult(
                eligible=False,
                reason=f'Employment status "{employment_status or "unknown"}" is not allowed. '
                f"Allowed statuses: {', '.join(sorted(allowed))}.",
            )

    required = policy.minimum_service_months
    if required > 0:
        if hire_date is None:
            return EligibilityResult(eligible=False, reason="Hire date is not set.")
        served = months_of_service(hire_date, reference_date)
        if served < required:
            return EligibilityResult(
                eligible=False,
                reason=f"Requires {required} month(s) of service as of {reference_date.isoformat()}, "
                f"employee has {served}.",
            )

    return EligibilityResult(eligible=True)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_policy_response(policy: LeavePolicy) -> LeavePolicyResponse:
    return LeavePolicyResponse(
        id=policy.id,
        leave_type_id=policy.leave_type_id,
        annual_entitlement=policy.annual_entitlement,
        carry_limit=policy.carry_limit,
        encash_limit=policy.encash_limit,
        cycle_length_years=policy.cycle_length_years,
        effective_date=policy.effective_date,
        expiry_date=policy.expiry_date,
        status=LeavePolicyStatus(policy.status),
        minimum_service_months=policy.minimum_service_months,
        allowed_employment_statuses=list(policy.allowed_employment_statuses),
        remarks=policy.remarks,
    )


async def _get_policy_or_404(session: AsyncSession, policy_id: uuid.UUID) -> LeavePolicy:
    policy = await _policies.find_by_id(policy_id, session)
    if policy is None or not policy.is_active:
        raise NotFoundException("Leave policy not found")
    return policy


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_policy(
    tx: TransactionManager,
    actor: Actor,
    payload: CreateLeavePolicyRequest,
    request_info: RequestInfo | None = None,
) -> LeavePolicyResponse:
    """Draft a policy for a leave type. It takes effect once activated."""
    options = _activity.create_options(
        ActivityAction.CREATE_LEAVE_POLICY,
        EntityType.LEAVE_POLICY,
        actor,
        payload,
        request_info,
        f"Created leave policy for leave type {payload.leave_type_id}",
        f"Failed to create leave policy for leave type {payload.leave_type_id}",
    )

    async def _create(session: AsyncSession) -> LeavePolicy:
        leave_type = await _leave_types.find_by_id(payload.leave_type_id, session)
        if leave_type is None or not leave_type.is_active:
            raise NotFoundException("Leave type not found or inactive")

        policy = LeavePolicy(
            leave_type_id=leave_type.id,
            annual_entitlement=payload.annual_entitlement,
            carry_limit=payload.carry_limit,
            encash_limit=payload.encash_limit,
            cycle_length_years=payload.cycle_length_years,
            effective_date=payload.effective_date,
            expiry_date=payload.expiry_date,
            minimum_service_months=payload.minimum_service_months,
            allowed_employment_statuses=[s.strip() for s in payload.allowed_employment_statuses if s.strip()],
            remarks=payload.remarks,
        )
        return await _policies.create(policy, session)

    return _build_policy_response(await run_logged(tx, _activity, options, _create))


async def update_policy(
    tx: TransactionManager,
    actor: Actor,
    policy_id: uuid.UUID,
    payload: UpdateLeavePolicyRequest,
    request_info: RequestInfo | None = None,
) -> LeavePolicyResponse:
    """Change a policy's entitlements or rules.

    A new ``leave_type`` is resolved by name and must be active.
    """
    options = _activity.create_options(
        ActivityAction.UPDATE_LEAVE_POLICY,
        EntityType.LEAVE_POLICY,
        actor,
        payload,
        request_info,
        f"Updated leave policy with ID: {policy_id}",
        f"Failed to update leave policy with ID: {policy_id}",
    )

    async def _update(session: AsyncSession) -> LeavePolicy:
        policy = await _get_policy_or_404(session, policy_id)
        values = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key in _CLEARABLE_POLICY_FIELDS
        }
        if not values:
            raise BadRequestException("No fields to update")

        if "leave_type" in values:
            name = values.pop("leave_type")
            leave_type = await _leave_types.find_by_name(name, session)
            if leave_type is None or not leave_type.is_active:
                raise NotFoundException(f'Leave type "{name}" not found or inactive')
            values["leave_type_id"] = leave_type.id

        if values.get("allowed_employment_statuses") is not None:
            values["allowed_employment_statuses"] = [
                s.strip() for s in values["allowed_employment_statuses"] if s.strip()
            ]

        effective = values.get("effective_date", policy.effective_date)
        expiry = values.get("expiry_date", policy.expiry_date)
        if effective and expiry and expiry < effective:
            raise BadRequestException("Expiry date must be on or after effective date")

        return await _policies.update(policy, values, session)

    return _build_policy_response(await run_logged(tx, _activity, options, _update))


async def delete_policy(
    tx: TransactionManager,
    actor: Actor,
    policy_id: uuid.UUID,
    request_info: RequestInfo | None = None,
) -> None:
    """Soft delete a policy. A deleted ACTIVE policy stops governing its leave type."""
    options = _activity.create_options(
        ActivityAction.DELETE_LEAVE_POLICY,
        EntityType.LEAVE_POLICY,
        actor,
        {"policy_id": str(policy_id)},
        request_info,
        f"Soft deleted leave policy with ID: {policy_id}",
        f"Failed to soft delete leave policy with ID: {policy_id}",
    )

    async def _delete(session: AsyncSession) -> LeavePolicy:
        policy = await _get_policy_or_404(session, policy_id)
        return await _policies.soft_delete(policy, False, session)

    await run_logged(tx, _activity, options, _delete)


async def activate_policy(
    tx: TransactionManager,
    actor: Actor,
    policy_id: uuid.UUID,
    request_info: RequestInfo | None = None,
) -> LeavePolicyResponse:
    """Make a DRAFT policy the active one for its leave type.

    Any other ACTIVE policy of the same leave type is retired.
    """
    options = _activity.create_options(
        ActivityAction.ACTIVATE_LEAVE_POLICY,
        EntityType.LEAVE_POLICY,
        actor,
        {"policy_id": str(policy_id)},
        request_info,
        f"Activated leave policy with ID: {policy_id}",
        f"Failed to activate leave policy with ID: {policy_id}",
    )

    async def _activate(session: AsyncSession) -> LeavePolicy:
        policy = await _get_policy_or_404(session, policy_id)
        if policy.status != LeavePolicyStatus.DRAFT:
            raise BadRequestException(
                f"Cannot activate policy. Current status: {policy.status}. Only DRAFT policies can be activated."
            )

        for other in await _policies.find_all(session, leave_type_id=policy.leave_type_id):
            if other.id != policy.id and other.status == LeavePolicyStatus.ACTIVE:
                await _policies.set_status(other, LeavePolicyStatus.RETIRED, session)

        return await _policies.set_status(policy, LeavePolicyStatus.ACTIVE, session)

    return _build_policy_response(await run_logged(tx, _activity, options, _activate))


async def retire_policy(
    tx: TransactionManager,
    actor: Actor,
    policy_id: uuid.UUID,
    request_info: RequestInfo | None = None,
) -> LeavePolicyResponse:
    """Retire an ACTIVE policy."""
    options = _activity.create_options(
        ActivityAction.RETIRE_LEAVE_POLICY,
        EntityType.LEAVE_POLICY,
        actor,
        {"policy_id": str(policy_id)},
        request_info,
        f"Retired leave policy with ID: {policy_id}",
        f"Failed to retire leave policy with ID: {policy_id}",
    )

    async def _retire(session: AsyncSession) -> LeavePolicy:
        policy = await _get_policy_or_404(session, policy_id)
        if policy.status != LeavePolicyStatus.ACTIVE:
            raise BadRequestException(
                f"Cannot retire policy. Current status: {policy.status}. Only ACTIVE policies can be retired."
            )
        return await _policies.set_status(policy, LeavePolicyStatus.RETIRED, session)

    return _build_policy_response(await run_logged(tx, _activity, options, _retire))


async def get_policy(session: AsyncSession, policy_id: uuid.UUID) -> LeavePolicyResponse:
    return _build_policy_response(await _get_policy_or_404(session, policy_id))


async def get_active_policy(session: AsyncSession, leave_type_id: uuid.UUID) -> LeavePolicyResponse:
    """The ACTIVE policy governing a leave type."""
    policy = await _policies.get_active_policy(leave_type_id, session)
    if policy is None:
        raise NotFoundException("Active leave policy not found for leave type")
    return _build_policy_response(policy)


async def list_policies(session: AsyncSession, leave_type_id: uuid.UUID | None = None) -> LeavePolicyListResponse:
    policies = await _policies.find_all(session, leave_type_id=leave_type_id)
    return LeavePolicyListResponse(items=[_build_policy_response(p) for p in policies], total=len(policies))
