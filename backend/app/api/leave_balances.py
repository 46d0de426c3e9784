# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from app.api.deps import ActorDep, RequestInfoDep, TransactionDep
from app.db import SessionDep
from app.schemas.leave_balance import (
    CreateLeaveBalanceRequest,
    GenerateBalancesRequest,
    GenerateBalancesResponse,
    LeaveBalanceListResponse,
    LeaveBalanceResponse,
    LeaveTransactionListResponse,
    ResetBalancesRequest,
    ResetBalancesResponse,
)
from app.services import leave_balance as leave_balance_service

leave_balances_router = APIRouter(prefix="/leave-balances", tags=["leave-balances"])


@leave_balances_router.post("", response_model=LeaveBalanceResponse, status_code=status.HTTP_201_CREATED)
async def create_balance(
    payload: CreateLeaveBalanceRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveBalanceResponse:
    """Open a yearly balance for an employee and leave type."""
    return await leave_balance_service.create_balance(tx, actor, payload, request_info)


@leave_balances_router.post("/generate", response_model=GenerateBalancesResponse)
async def generate_annual_balances(
    payload: GenerateBalancesRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> GenerateBalancesResponse:
    """Open balances for all active employees under all active policies."""
    return await leave_balance_service.generate_annual_balances(tx, actor, payload.year, request_info)


@leave_balances_router.post("/reset", response_model=ResetBalancesResponse)
async def reset_balances_for_year(
    payload: ResetBalancesRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> ResetBalancesResponse:
    """Zero used and encashed days of every balance in a year."""
    return await leave_balance_service.reset_balances_for_year(tx, actor, payload.year, request_info)


@leave_balances_router.get("/employee/{employee_id}", response_model=LeaveBalanceListResponse)
async def list_employee_balances(
    employee_id: uuid.UUID,
    session: SessionDep,
    year: int | None = Query(default=None),
) -> LeaveBalanceListResponse:
    return await leave_balance_service.list_employee_balances(session, employee_id, year)


@leave_balances_router.get("/{balance_id}", response_model=LeaveBalanceResponse)
async def get_balance(balance_id: uuid.UUID, session: SessionDep) -> LeaveBalanceResponse:
    return await leave_balance_service.get_balance(session, balance_id)


@leave_balances_router.get("/{balance_id}/transactions", response_model=LeaveTransactionListResponse)
async def list_balance_transactions(balance_id: uuid.UUID, session: SessionDep) -> LeaveTransactionListResponse:
    """Ledger of balance movements."""
    return await leave_balance_service.list_balance_transactions(session, balance_id)


@leave_balances_router.post("/{balance_id}/close", response_model=LeaveBalanceResponse)
async def close_balance(
    balance_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeaveBalanceResponse:
    return await leave_balance_service.close_balance(tx, actor, balance_id, request_info)


@leave_balances_router.delete("/{balance_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_balance(
    balance_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> None:
    await leave_balance_service.delete_balance(tx, actor, balance_id, request_info)
