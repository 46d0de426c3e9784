from sqlmodel import SQLModel

from app.models.activity_log import ActivityLog
from app.models.base import SoftDeleteMixin, TimestampMixin, UUIDBase
from app.models.employee import Employee
from app.models.enums import (
    ActivityAction,
    EmploymentStatus,
    EntityType,
    LeaveBalanceStatus,
    LeaveCycleStatus,
    LeavePolicyStatus,
    LeaveRequestStatus,
    LeaveTransactionType,
)
from app.models.holiday import Holiday
from app.models.leave_balance import LeaveBalance
from app.models.leave_cycle import LeaveCycle
from app.models.leave_policy import LeavePolicy
from app.models.leave_request import LeaveRequest
from app.models.leave_transaction import LeaveTransaction
from app.models.leave_type import LeaveType
from app.models.leave_year import LeaveYearConfiguration

__all__ = [
    "ActivityAction",
    "ActivityLog",
    "Employee",
    "EmploymentStatus",
    "EntityType",
    "Holiday",
    "LeaveBalance",
    "LeaveBalanceStatus",
    "LeaveCycle",
    "LeaveCycleStatus",
    "LeavePolicy",
    "LeavePolicyStatus",
    "LeaveRequest",
    "LeaveRequestStatus",
    "LeaveTransaction",
    "LeaveTransactionType",
    "LeaveType",
    "LeaveYearConfiguration",
    "SQLModel",
    "SoftDeleteMixin",
    "TimestampMixin",
    "UUIDBase",
]
