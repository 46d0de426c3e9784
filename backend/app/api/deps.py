# ruff: noqa: B008
from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import Depends, Header, Request

from app.db import get_session_factory
from app.schemas.context import Actor, RequestInfo, SystemActor, UserActor
from app.services.dates import business_today
from app.services.transaction import TransactionManager


async def get_actor(
    x_user_id: str | None = Header(default=None),
    x_username: str | None = Header(default=None),
) -> Actor:
    """Resolve the caller from headers. Anonymous calls act as the system."""
    if x_user_id:
        return UserActor(user_id=x_user_id, username=x_username)
    return SystemActor()


ActorDep = Annotated[Actor, Depends(get_actor)]


async def get_request_info(
    request: Request,
    x_session_id: str | None = Header(default=None),
    x_username: str | None = Header(default=None),
) -> RequestInfo:
    """Client metadata recorded with activity log entries."""
    return RequestInfo(
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
        session_id=x_session_id,
        username=x_username,
    )


RequestInfoDep = Annotated[RequestInfo, Depends(get_request_info)]


def get_transaction_manager() -> TransactionManager:
    """FastAPI dependency for the transaction manager."""
    return TransactionManager(get_session_factory())


TransactionDep = Annotated[TransactionManager, Depends(get_transaction_manager)]


def get_today() -> date:
    """Today's date in the business timezone."""
    return business_today()


TodayDep = Annotated[date, Depends(get_today)]
