from fastapi import APIRouter

from app.api.employees import employees_router
from app.api.holidays import holidays_router
from app.api.leave_balances import leave_balances_router
from app.api.leave_cycles import leave_cycles_router
from app.api.leave_policies import leave_policies_router
from app.api.leave_requests import leave_requests_router
from app.api.leave_types import leave_types_router
from app.api.leave_years import leave_years_router

api_router = APIRouter()
api_router.include_router(leave_requests_router)
api_router.include_router(leave_types_router)
api_router.include_router(leave_policies_router)
api_router.include_router(leave_balances_router)
api_router.include_router(leave_years_router)
api_router.include_router(leave_cycles_router)
api_router.include_router(holidays_router)
api_router.include_router(employees_router)
