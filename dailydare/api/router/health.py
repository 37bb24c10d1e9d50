from datetime import datetime
from typing import Dict

from fastapi import APIRouter, status

from dailydare.infra.config.redis import get_redis
from dailydare.infra.config.settings import settings
from dailydare.infra.database import get_database_manager

router = APIRouter()


async def check_redis_health() -> Dict[str, str]:
    """Check Redis connection health."""
    try:
        redis_client = await get_redis()
        await redis_client.ping()
        return {"status": "healthy", "message": "Connected"}
    except Exception as e:
        return {"status": "unhealthy", "message": f"Connection failed: {str(e)}"}


def check_activity_log_health() -> Dict[str, str]:
    if not settings.ACTIVITY_LOG_ENABLED:
        return {"status": "disabled"}
    if get_database_manager().get_session_factory() is None:
        return {"status": "degraded", "message": "Not connected"}
    return {"status": "healthy"}


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Status of Redis and the optional activity ledger"""
    services = {
        "redis": (await check_redis_health())["status"],
        "activity_log": check_activity_log_health()["status"],
        "bonus_dares": "configured" if settings.GEMINI_API_KEY else "not_configured",
    }

    overall_status = "healthy"
    if services["redis"] == "unhealthy":
        overall_status = "unhealthy"
    elif services["activity_log"] == "degraded":
        overall_status = "degraded"

    return {
        "status": overall_status,
        "services": services,
        "version": settings.APP_VERSION,
        "timestamp": datetime.utcnow().isoformat() + "Z"
    }
