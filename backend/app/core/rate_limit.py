"""
Redis-backed rate limiting for the console login.

Keys:
- ratelimit:{endpoint}:{ip}  request counter, expires with the window
- failed_login:{uid}         consecutive failed passwords
- lockout:{uid}              present while the account is locked

When Redis is unreachable the limiter fails open and logs a warning, the
login itself still needs a valid password and the admin flag.
"""
import logging
from typing import Optional

from redis.exceptions import RedisError

from app.config import get_settings
from app.database.connections import get_redis_client

logger = logging.getLogger(__name__)


async def check_rate_limit(
    ip: str,
    endpoint: str,
    limit: Optional[int] = None,
    window_seconds: Optional[int] = None,
) -> bool:
    """
    Count a request and tell whether it is still within the limit.
    
    Args:
        ip: Client IP address
        endpoint: Endpoint identifier (e.g., "/auth/login")
        limit: Max requests allowed (defaults to config value)
        window_seconds: Time window in seconds (defaults to config value)
        
    Returns:
        True if request is allowed, False if rate limited
    """
    settings = get_settings()
    limit = limit or settings.login_rate_limit_attempts
    window_seconds = window_seconds or settings.login_rate_limit_window_seconds
    
    try:
        redis = await get_redis_client()
        key = f"ratelimit:{endpoint}:{ip}"
        current = await redis.incr(key)
        if current == 1:
            await redis.expire(key, window_seconds)
        return current <= limit
    except RedisError as e:
        logger.warning(f"Rate limit check skipped for {endpoint}: {e}")
        return True


async def increment_failed_login(uid: str) -> int:
    """Increment the failed login counter and return the new count."""
    settings = get_settings()
    try:
        redis = await get_redis_client()
        key = f"failed_login:{uid}"
        count = await redis.incr(key)
        await redis.expire(key, settings.user_lockout_duration_minutes * 60)
        return count
    except RedisError as e:
        logger.warning(f"Could not record failed login for {uid}: {e}")
        return 0


async def check_user_lockout(uid: str) -> bool:
    """Return True while the account is locked out."""
    try:
        redis = await get_redis_client()
        return bool(await redis.exists(f"lockout:{uid}"))
    except RedisError as e:
        logger.warning(f"Lockout check skipped for {uid}: {e}")
        return False


async def set_user_lockout(uid: str, duration_minutes: int) -> None:
    """Lock out an account for duration_minutes."""
    try:
        redis = await get_redis_client()
        await redis.setex(f"lockout:{uid}", duration_minutes * 60, "1")
        logger.info(f"Account {uid} locked for {duration_minutes} minutes")
    except RedisError as e:
        logger.warning(f"Could not lock out {uid}: {e}")


async def reset_failed_attempts(uid: str) -> None:
    """Reset the failed login counter after a successful login."""
    try:
        redis = await get_redis_client()
        await redis.delete(f"failed_login:{uid}")
    except RedisError as e:
        logger.warning(f"Could not reset failed logins for {uid}: {e}")
