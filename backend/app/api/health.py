import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from app.config import get_settings
from app.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Service and database status."""

    status: Literal["ok", "degraded"]
    database: Literal["up", "down"]
    version: str
    environment: str
    timezone: str


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Ping the database and report service metadata."""
    settings = get_settings()
    database: Literal["up", "down"] = "up"

    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database connectivity failed")
        database = "down"

    return HealthResponse(
        status="ok" if database == "up" else "degraded",
        database=database,
        version=settings.app_version,
        environment=settings.environment,
        timezone=settings.timezone,
    )
