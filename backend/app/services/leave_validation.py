"""Validation shared by the create and update leave request flows.

Both flows go through the same functions; :class:`ValidationMode` only
selects the wording of balance failures so callers can tell which flow
rejected them.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from app.exceptions import BadRequestException, NotFoundException
from app.models.enums import LeaveBalanceStatus
from app.services.dates import date_key

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from app.models.leave_balance import LeaveBalance
    from app.models.leave_request import LeaveRequest


class ValidationMode(enum.StrEnum):
    CREATE = "create"
    UPDATE = "update"


_CLOSED_BALANCE_MESSAGES = {
    ValidationMode.CREATE: "Leave balance is closed. Cannot create request for closed balance.",
    ValidationMode.UPDATE: "Cannot update request. Balance is closed.",
}


def validate_date_range(start: date, end: date, today: date) -> None:
    """Reject ranges that start in the past or end before they start."""
    if start < today:
        raise BadRequestException("Start date cannot be before today")
    if start > end:
        raise BadRequestException("Start date must be before or equal to end date")


def ensure_half_day_same_date(start: date, end: date, is_half_day: bool) -> None:
    if is_half_day and start != end:
        raise BadRequestException("Half-day leave requires start date and end date to be the same")


def format_days(days: float) -> str:
    """Render a day count without a trailing ``.0``."""
    return f"{days:g}"


def ensure_balance_usable(
    balance: LeaveBalance | None,
    requested: float,
    mode: ValidationMode = ValidationMode.CREATE,
    not_found_message: str = "Leave balance not found",
) -> LeaveBalance:
    """Check the balance exists, is OPEN and covers ``requested`` days.

    A balance whose remaining equals the requested amount is sufficient.
    """
    if balance is None:
        raise NotFoundException(not_found_message)
    if balance.status != LeaveBalanceStatus.OPEN:
        raise BadRequestException(_CLOSED_BALANCE_MESSAGES[mode])
    if balance.remaining < requested:
        raise BadRequestException(
            f"Insufficient leave balance. Available: {format_days(balance.remaining)} days, "
            f"Requested: {format_days(requested)} days"
        )
    return balance


def format_overlaps(requests: Sequence[LeaveRequest]) -> str:
    return ", ".join(
        f"{request.leave_type} ({date_key(request.start_date)} - {date_key(request.end_date)})" for request in requests
    )


def ensure_no_overlaps(requests: Sequence[LeaveRequest]) -> None:
    if requests:
        raise BadRequestException(f"Leave request overlaps with existing request(s): {format_overlaps(requests)}")
