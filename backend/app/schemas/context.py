from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

SYSTEM_ACTOR_ID = "system"


class UserActor(BaseModel):
    """A signed-in user performing the operation."""

    kind: Literal["user"] = "user"
    user_id: str
    username: str | None = None

    @property
    def audit_id(self) -> str:
        return self.user_id


class SystemActor(BaseModel):
    """Background or unattended operations."""

    kind: Literal["system"] = "system"

    @property
    def audit_id(self) -> str:
        return SYSTEM_ACTOR_ID


Actor = UserActor | SystemActor


class RequestInfo(BaseModel):
    """Client metadata recorded alongside activity log entries."""

    ip_address: str | None = None
    user_agent: str | None = None
    session_id: str | None = None
    username: str | None = None
