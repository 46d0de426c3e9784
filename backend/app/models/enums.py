from __future__ import annotations

import enum


class LeaveRequestStatus(enum.StrEnum):
    """State machine for leave requests. Only PENDING is mutable."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class LeaveBalanceStatus(enum.StrEnum):
    """Whether a balance can still be consumed."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"


class LeavePolicyStatus(enum.StrEnum):
    """Lifecycle of a leave policy."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    RETIRED = "RETIRED"


class LeaveCycleStatus(enum.StrEnum):
    """Lifecycle of a multi-year leave cycle."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class LeaveTransactionType(enum.StrEnum):
    """Origin of a balance movement."""

    REQUEST = "REQUEST"
    CANCELLATION = "CANCELLATION"


class EmploymentStatus(enum.StrEnum):
    """Common employment statuses. Stored as free text on the employee."""

    REGULAR = "regular"
    PROBATIONARY = "probationary"
    CONTRACTUAL = "contractual"


class ActivityAction(enum.StrEnum):
    """Action recorded in the activity log."""

    CREATE_LEAVE = "CREATE_LEAVE"
    UPDATE_LEAVE = "UPDATE_LEAVE"
    APPROVE_LEAVE = "APPROVE_LEAVE"
    REJECT_LEAVE = "REJECT_LEAVE"
    CANCEL_LEAVE = "CANCEL_LEAVE"
    CREATE_LEAVE_TYPE = "CREATE_LEAVE_TYPE"
    UPDATE_LEAVE_TYPE = "UPDATE_LEAVE_TYPE"
    DELETE_LEAVE_TYPE = "DELETE_LEAVE_TYPE"
    CREATE_LEAVE_POLICY = "CREATE_LEAVE_POLICY"
    UPDATE_LEAVE_POLICY = "UPDATE_LEAVE_POLICY"
    DELETE_LEAVE_POLICY = "DELETE_LEAVE_POLICY"
    ACTIVATE_LEAVE_POLICY = "ACTIVATE_LEAVE_POLICY"
    RETIRE_LEAVE_POLICY = "RETIRE_LEAVE_POLICY"
    CREATE_LEAVE_BALANCE = "CREATE_LEAVE_BALANCE"
    CLOSE_LEAVE_BALANCE = "CLOSE_LEAVE_BALANCE"
    GENERATE_LEAVE_BALANCES = "GENERATE_LEAVE_BALANCES"
    DELETE_LEAVE_BALANCE = "DELETE_LEAVE_BALANCE"
    RESET_LEAVE_BALANCES = "RESET_LEAVE_BALANCES"
    CREATE_LEAVE_YEAR = "CREATE_LEAVE_YEAR"
    UPDATE_LEAVE_YEAR = "UPDATE_LEAVE_YEAR"
    CREATE_LEAVE_CYCLE = "CREATE_LEAVE_CYCLE"
    SETUP_LEAVE_CYCLES = "SETUP_LEAVE_CYCLES"
    CLOSE_LEAVE_CYCLE = "CLOSE_LEAVE_CYCLE"
    CREATE_HOLIDAY = "CREATE_HOLIDAY"
    DELETE_HOLIDAY = "DELETE_HOLIDAY"
    CREATE_EMPLOYEE = "CREATE_EMPLOYEE"
    DELETE_EMPLOYEE = "DELETE_EMPLOYEE"


class EntityType(enum.StrEnum):
    """Entity recorded in the activity log."""

    EMPLOYEE = "EMPLOYEE"
    LEAVE_REQUEST = "LEAVE_REQUEST"
    LEAVE_TYPE = "LEAVE_TYPE"
    LEAVE_POLICY = "LEAVE_POLICY"
    LEAVE_BALANCE = "LEAVE_BALANCE"
    LEAVE_YEAR = "LEAVE_YEAR"
    LEAVE_CYCLE = "LEAVE_CYCLE"
    HOLIDAY = "HOLIDAY"
