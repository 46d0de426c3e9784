from app.repositories.activity_log import ActivityLogRepository
from app.repositories.employee import EmployeeRepository
from app.repositories.holiday import HolidayRepository
from app.repositories.leave_balance import LeaveBalanceRepository
from app.repositories.leave_cycle import LeaveCycleRepository
from app.repositories.leave_policy import LeavePolicyRepository
from app.repositories.leave_request import LeaveRequestRepository
from app.repositories.leave_type import LeaveTypeRepository
from app.repositories.leave_year import LeaveYearRepository

__all__ = [
    "ActivityLogRepository",
    "EmployeeRepository",
    "HolidayRepository",
    "LeaveBalanceRepository",
    "LeaveCycleRepository",
    "LeavePolicyRepository",
    "LeaveRequestRepository",
    "LeaveTypeRepository",
    "LeaveYearRepository",
]
