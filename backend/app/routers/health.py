"""
Health check router for liveness and readiness probes.
"""
import logging

from fastapi import APIRouter, status

from app.database.connections import get_mongo_client, get_redis_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


async def _check_mongodb() -> str:
    try:
        client = await get_mongo_client()
        await client.admin.command("ping")
        return "healthy"
    except Exception as e:
        logger.warning(f"MongoDB readiness check failed: {e}")
        return f"unhealthy: {e}"


async def _check_redis() -> str:
    try:
        redis = await get_redis_client()
        await redis.ping()
        return "healthy"
    except Exception as e:
        logger.warning(f"Redis readiness check failed: {e}")
        return f"unhealthy: {e}"


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check():
    """Returns 200 if the API is running."""
    return {"status": "healthy"}


@router.get(
    "/health/ready",
    status_code=status.HTTP_200_OK,
    summary="Readiness check with dependencies",
)
async def readiness_check():
    """
    Readiness check that verifies the MongoDB and Redis connections.
    
    Always 200; the body says `degraded` when a dependency is down.
    """
    checks = {
        "api": "healthy",
        "mongodb": await _check_mongodb(),
        "redis": await _check_redis(),
    }
    all_healthy = all(v == "healthy" for v in checks.values())
    
    return {
        "status": "healthy" if all_healthy else "degraded",
        "checks": checks,
    }
