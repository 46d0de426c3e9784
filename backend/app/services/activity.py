"""Activity logging around mutating operations.

Every mutating operation writes exactly one :class:`ActivityLog` row. On
success the row joins the caller's transaction. On failure the pending
mutation is rolled back first and the failure row is committed on its own,
so the record survives while the original exception propagates unchanged.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import to_jsonable_python
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from app.exceptions import AppError
from app.models.activity_log import ActivityLog
from app.repositories.activity_log import ActivityLogRepository
from app.schemas.context import RequestInfo, SystemActor

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession

    from app.models.enums import ActivityAction, EntityType
    from app.schemas.context import Actor
    from app.services.transaction import TransactionManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorHandlerOptions(BaseModel):
    """What to record for one operation."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    action: str
    entity: str
    actor: Any = Field(default_factory=SystemActor)
    operation_data: Any = None
    request_info: RequestInfo = Field(default_factory=RequestInfo)
    success_description: str | None = None
    failure_description: str | None = None
    started_at: float = Field(default_factory=time.perf_counter)


def model_to_audit_dict(model: SQLModel) -> dict[str, Any]:
    """Serialize a SQLModel instance to a JSON-safe dict for activity logging."""
    data: dict[str, Any] = {}
    for key, value in model.model_dump().items():
        if isinstance(value, uuid.UUID):
            data[key] = str(value)
        elif isinstance(value, (datetime, date)):
            data[key] = value.isoformat()
        else:
            data[key] = value
    return data


def to_audit_details(data: Any) -> dict[str, Any] | None:
    """JSON-safe representation of an operation's input or result."""
    if data is None:
        return None
    if isinstance(data, SQLModel):
        return model_to_audit_dict(data)
    serialized = to_jsonable_python(data, fallback=repr)
    if isinstance(serialized, dict):
        return serialized
    return {"value": serialized}


def _error_message(error: BaseException) -> str:
    if isinstance(error, AppError):
        return error.message
    return repr(error)


def _status_code(error: BaseException) -> int:
    if isinstance(error, AppError):
        return error.status_code
    return 500


class ActivityLogger:
    """Wraps operations so each invocation leaves one activity log entry."""

    def __init__(self, repository: ActivityLogRepository | None = None) -> None:
        self._repository = repository or ActivityLogRepository()

    def create_options(
        self,
        action: ActivityAction,
        entity: EntityType,
        actor: Actor | None = None,
        operation_data: Any = None,
        request_info: RequestInfo | None = None,
        success_description: str | None = None,
        failure_description: str | None = None,
    ) -> ErrorHandlerOptions:
        return ErrorHandlerOptions(
            action=action.value,
            entity=entity.value,
            actor=actor or SystemActor(),
            operation_data=operation_data,
            request_info=request_info or RequestInfo(),
            success_description=success_description,
            failure_description=failure_description,
        )

    def _build_entry(self, options: ErrorHandlerOptions, details: dict[str, Any] | None) -> ActivityLog:
        actor_id: str = options.actor.audit_id
        info = options.request_info
        return ActivityLog(
            action=options.action,
            entity=options.entity,
            user_id=actor_id,
            username=info.username or getattr(options.actor, "username", None),
            details=details,
            ip_address=info.ip_address,
            user_agent=info.user_agent,
            session_id=info.session_id,
            duration_ms=int((time.perf_counter() - options.started_at) * 1000),
            created_by=actor_id,
        )

    async def log_success(self, result: Any, options: ErrorHandlerOptions, session: AsyncSession) -> ActivityLog:
        """Record a successful operation inside the caller's transaction."""
        entry = self._build_entry(options, to_audit_details(result))
        entry.description = options.success_description or f"Successfully completed {options.action}"
        entry.is_success = True
        entry.status_code = 200
        return await self._repository.create(entry, session)

    async def handle_error(self, error: BaseException, options: ErrorHandlerOptions, session: AsyncSession) -> None:
        """Discard the failed mutation and persist a failure entry."""
        message = _error_message(error)
        logger.error("Error in %s: %s", options.action, message)

        await session.rollback()
        entry = self._build_entry(options, to_audit_details(options.operation_data))
        entry.description = options.failure_description or f"Failed {options.action}"
        entry.is_success = False
        entry.error_message = message
        entry.status_code = _status_code(error)
        try:
            await self._repository.create(entry, session)
            await session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to write activity log for %s after error: %s", options.action, message)
            await session.rollback()

    async def execute_with_error_handling(
        self,
        operation: Callable[[], Awaitable[T]],
        options: ErrorHandlerOptions,
        session: AsyncSession,
    ) -> T:
        """Run ``operation`` and record its outcome. Errors are re-raised unchanged."""
        try:
            result = await operation()
        except Exception as exc:
            await self.handle_error(exc, options, session)
            raise
        await self.log_success(result, options, session)
        return result


async def run_logged(
    transactions: TransactionManager,
    activity: ActivityLogger,
    options: ErrorHandlerOptions,
    operation: Callable[[AsyncSession], Awaitable[T]],
) -> T:
    """Run ``operation`` in one transaction with activity logging."""

    async def _callback(session: AsyncSession) -> T:
        return await activity.execute_with_error_handling(lambda: operation(session), options, session)

    return await transactions.execute_transaction(options.action, _callback)
