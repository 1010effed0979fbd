import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from event_checker.config.database import get_async_session

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    version: str = "0.1.0"


class DatabaseHealthResponse(BaseModel):
    status: str
    time: datetime | str


@router.get("/", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """
    Health check endpoint to verify the API is running.
    """
    return HealthCheckResponse(status="healthy")


@router.get("/db", response_model=DatabaseHealthResponse)
async def database_health_check(
    session: AsyncSession = Depends(get_async_session),
) -> DatabaseHealthResponse:
    """
    Verify the database answers a trivial query.
    """
    try:
        result = await session.execute(text("SELECT CURRENT_TIMESTAMP"))
    except Exception:
        logger.exception("Database health check failed")
        raise HTTPException(status_code=500, detail="Database connection failed")
    return DatabaseHealthResponse(status="ok", time=result.scalar_one())
