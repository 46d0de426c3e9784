# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from app.exceptions import BadRequestException, ConflictException, NotFoundException
from app.models.enums import ActivityAction, EntityType
from app.models.leave_type import LeaveType
from app.repositories import LeaveTypeRepository
from app.schemas.leave_type import LeaveTypeListResponse, LeaveTypeResponse
from app.services.activity import ActivityLogger, run_logged

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from app.schemas.context import Actor, RequestInfo
    from app.schemas.leave_type import CreateLeaveTypeRequest, UpdateLeaveTypeRequest
    from app.services.transaction import TransactionManager

_leave_types = LeaveTypeRepository()
_activity = ActivityLogger()


def _build_leave_type_response(leave_type: LeaveType) -> LeaveTypeResponse:
    return LeaveTypeResponse(
        id=leave_type.id,
        name=leave_type.name,
        code=leave_type.code,
        description=leave_type.description,
        is_paid=leave_type.is_paid,
        is_active=leave_type.is_active,
    )


async def _get_leave_type_or_404(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveType:
    leave_type = await _leave_types.find_by_id(leave_type_id, session)
    if leave_type is None:
        raise NotFoundException("Leave type not found")
    return leave_type


async def _ensure_name_available(session: AsyncSession, name: str, exclude_id: uuid.UUID | None = None) -> None:
    existing = await _leave_types.find_by_name(name, session)
    if existing is not None and existing.id != exclude_id:
        raise ConflictException(f'Leave type "{name}" already exists')


async def create_leave_type(
    tx: TransactionManager,
    actor: Actor,
    payload: CreateLeaveTypeRequest,
    request_info: RequestInfo | None = None,
) -> LeaveTypeResponse:
    """Create a leave type with a unique name."""
    options = _activity.create_options(
        ActivityAction.CREATE_LEAVE_TYPE,
        EntityType.LEAVE_TYPE,
        actor,
        payload,
        request_info,
        f"Created leave type: {payload.name}",
        f"Failed to create leave type: {payload.name}",
    )

    async def _create(session: AsyncSession) -> LeaveType:
        name = payload.name.strip()
        await _ensure_name_available(session, name)
        leave_type = LeaveType(
            name=name,
            code=payload.code,
            description=payload.description,
            is_paid=payload.is_paid,
        )
        return await _leave_types.create(leave_type, session)

    return _build_leave_type_response(await run_logged(tx, _activity, options, _create))


async def update_leave_type(
    tx: TransactionManager,
    actor: Actor,
    leave_type_id: uuid.UUID,
    payload: UpdateLeaveTypeRequest,
    request_info: RequestInfo | None = None,
) -> LeaveTypeResponse:
    """Apply a partial update. Renaming keeps names unique."""
    options = _activity.create_options(
        ActivityAction.UPDATE_LEAVE_TYPE,
        EntityType.LEAVE_TYPE,
        actor,
        payload,
        request_info,
        f"Updated leave type with ID: {leave_type_id}",
        f"Failed to update leave type with ID: {leave_type_id}",
    )

    async def _update(session: AsyncSession) -> LeaveType:
        leave_type = await _get_leave_type_or_404(session, leave_type_id)
        values = payload.model_dump(exclude_unset=True)
        if not values:
            raise BadRequestException("No fields to update")
        if "name" in values:
            values["name"] = values["name"].strip()
            await _ensure_name_available(session, values["name"], exclude_id=leave_type.id)
        return await _leave_types.update(leave_type, values, session)

    return _build_leave_type_response(await run_logged(tx, _activity, options, _update))


async def set_leave_type_active(
    tx: TransactionManager,
    actor: Actor,
    leave_type_id: uuid.UUID,
    is_active: bool,
    request_info: RequestInfo | None = None,
) -> LeaveTypeResponse:
    """Soft delete (or restore) a leave type."""
    options = _activity.create_options(
        ActivityAction.DELETE_LEAVE_TYPE,
        EntityType.LEAVE_TYPE,
        actor,
        {"leave_type_id": str(leave_type_id), "is_active": is_active},
        request_info,
        f"Set leave type {leave_type_id} active={is_active}",
        f"Failed to set leave type {leave_type_id} active={is_active}",
    )

    async def _toggle(session: AsyncSession) -> LeaveType:
        leave_type = await _get_leave_type_or_404(session, leave_type_id)
        return await _leave_types.soft_delete(leave_type, is_active, session)

    return _build_leave_type_response(await run_logged(tx, _activity, options, _toggle))


async def get_leave_type(session: AsyncSession, leave_type_id: uuid.UUID) -> LeaveTypeResponse:
    return _build_leave_type_response(await _get_leave_type_or_404(session, leave_type_id))


async def find_leave_type_by_name(session: AsyncSession, name: str) -> LeaveTypeResponse:
    leave_type = await _leave_types.find_by_name(name, session)
    if leave_type is None:
        raise NotFoundException(f'Leave type "{name}" not found')
    return _build_leave_type_response(leave_type)


async def list_leave_types(session: AsyncSession, include_inactive: bool = False) -> LeaveTypeListResponse:
    leave_types = await _leave_types.find_all(session, include_inactive=include_inactive)
    return LeaveTypeListResponse(items=[_build_leave_type_response(t) for t in leave_types], total=len(leave_types))
