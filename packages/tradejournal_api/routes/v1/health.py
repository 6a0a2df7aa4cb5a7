"""
Health Check Endpoints
"""
from fastapi import APIRouter
from sqlmodel import text

from tradejournal_api.dependencies import DbSession
from tradejournal_api.schemas.base import HealthResponse, APIResponse
from tradejournal_api.config import settings
from tradejournal_core.utils import get_logger

logger = get_logger("api.health")

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=APIResponse[HealthResponse])
async def health_check(db: DbSession):
    """
    Health check endpoint (no authentication required)
    
    Returns:
        Health status including database connectivity
    """
    db_status = "connected"
    try:
        db.exec(text("SELECT 1"))
    except Exception as e:
        logger.error(f"❌ Database health check failed: {e}")
        db_status = f"error: {str(e)}"
    
    health = HealthResponse(
        status="healthy" if db_status == "connected" else "degraded",
        version="1.0.0",
        environment=settings.ENVIRONMENT,
        database=db_status,
    )
    
    return APIResponse(data=health)
