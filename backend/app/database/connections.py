"""
Shared MongoDB and Redis clients.

Both clients are created lazily on first use and reused for the life of
the process; close_connections() runs at shutdown.
"""
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from redis.asyncio import Redis
from typing import Optional

from app.config import get_settings

_mongo_client: Optional[AsyncIOMotorClient] = None
_redis_client: Optional[Redis] = None


async def get_mongo_client() -> AsyncIOMotorClient:
    """Get or create the MongoDB client."""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = AsyncIOMotorClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        )
    return _mongo_client


async def get_redis_client() -> Redis:
    """Get or create the Redis client used by the login rate limiter."""
    global _redis_client
    if _redis_client is None:
        settings = get_settings()
        _redis_client = Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            socket_timeout=settings.redis_timeout_seconds,
            decode_responses=True,
        )
    return _redis_client


async def get_database(db_name: str) -> AsyncIOMotorDatabase:
    """Get a MongoDB database by name (campus_db, auth_db...)."""
    client = await get_mongo_client()
    return client[db_name]


async def close_connections():
    """Close both clients so the next call opens fresh ones."""
    global _mongo_client, _redis_client

    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None
