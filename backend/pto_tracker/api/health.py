import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from pto_tracker.config import get_settings
from pto_tracker.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Liveness plus a database probe; a down database degrades, never fails, the check."""

    status: Literal["ok", "degraded"]
    database: Literal["up", "down"]
    app_name: str
    version: str
    environment: str


async def _database_reachable(session: AsyncSession) -> bool:
    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database connectivity failed")
        return False
    return True


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report whether the API is serving and can reach its database."""
    settings = get_settings()
    reachable = await _database_reachable(session)
    return HealthResponse(
        status="ok" if reachable else "degraded",
        database="up" if reachable else "down",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )
