"""
Health check endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from datetime import datetime, timezone
import logging

from app.database import get_db
from app.dependencies.services import get_llm_service, get_search_service
from app.models.schemas import HealthCheckResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=HealthCheckResponse)
async def health_check(
    db: AsyncSession = Depends(get_db),
    llm=Depends(get_llm_service),
    search=Depends(get_search_service),
):
    """
    Health check endpoint to verify system status.

    Returns:
        HealthCheckResponse with status of the database and provider configuration
    """
    # Check database connection
    db_status = "ok"
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        db_status = "error"

    llm_status = "ok" if await llm.check_health() else "unconfigured"
    search_status = "ok" if await search.check_health() else "unconfigured"

    # Overall status
    healthy = db_status == "ok" and llm_status == "ok" and search_status == "ok"
    overall_status = "healthy" if healthy else "degraded"

    return HealthCheckResponse(
        status=overall_status,
        database=db_status,
        llm_provider=llm_status,
        search_provider=search_status,
        timestamp=datetime.now(timezone.utc),
    )
