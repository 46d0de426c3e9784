# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from app.api.deps import ActorDep, RequestInfoDep, TransactionDep
from app.db import SessionDep
from app.schemas.leave_policy import (
    CreateLeavePolicyRequest,
    LeavePolicyListResponse,
    LeavePolicyResponse,
    UpdateLeavePolicyRequest,
)
from app.services import leave_policy as leave_policy_service

leave_policies_router = APIRouter(prefix="/leave-policies", tags=["leave-policies"])


@leave_policies_router.post("", response_model=LeavePolicyResponse, status_code=status.HTTP_201_CREATED)
async def create_policy(
    payload: CreateLeavePolicyRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeavePolicyResponse:
    """Draft a leave policy."""
    return await leave_policy_service.create_policy(tx, actor, payload, request_info)


@leave_policies_router.get("", response_model=LeavePolicyListResponse)
async def list_policies(
    session: SessionDep,
    leave_type_id: uuid.UUID | None = Query(default=None),
) -> LeavePolicyListResponse:
    return await leave_policy_service.list_policies(session, leave_type_id)


@leave_policies_router.get("/active/{leave_type_id}", response_model=LeavePolicyResponse)
async def get_active_policy(leave_type_id: uuid.UUID, session: SessionDep) -> LeavePolicyResponse:
    """The policy currently governing a leave type."""
    return await leave_policy_service.get_active_policy(session, leave_type_id)


@leave_policies_router.get("/{policy_id}", response_model=LeavePolicyResponse)
async def get_policy(policy_id: uuid.UUID, session: SessionDep) -> LeavePolicyResponse:
    return await leave_policy_service.get_policy(session, policy_id)


@leave_policies_router.patch("/{policy_id}", response_model=LeavePolicyResponse)
async def update_policy(
    policy_id: uuid.UUID,
    payload: UpdateLeavePolicyRequest,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeavePolicyResponse:
    return await leave_policy_service.update_policy(tx, actor, policy_id, payload, request_info)


@leave_policies_router.delete("/{policy_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_policy(
    policy_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> None:
    """Soft delete a policy."""
    await leave_policy_service.delete_policy(tx, actor, policy_id, request_info)


@leave_policies_router.post("/{policy_id}/activate", response_model=LeavePolicyResponse)
async def activate_policy(
    policy_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeavePolicyResponse:
    """Activate a DRAFT policy, retiring the previous one."""
    return await leave_policy_service.activate_policy(tx, actor, policy_id, request_info)


@leave_policies_router.post("/{policy_id}/retire", response_model=LeavePolicyResponse)
async def retire_policy(
    policy_id: uuid.UUID,
    tx: TransactionDep,
    actor: ActorDep,
    request_info: RequestInfoDep,
) -> LeavePolicyResponse:
    return await leave_policy_service.retire_policy(tx, actor, policy_id, request_info)
