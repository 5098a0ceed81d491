"""Redis connection pool shared by the API process"""
import redis.asyncio as redis
from typing import Optional

from detailing.config.settings import get_settings

settings = get_settings()

_redis_pool: Optional[redis.ConnectionPool] = None


def get_redis_pool() -> redis.ConnectionPool:
    global _redis_pool
    if _redis_pool is None:
        _redis_pool = redis.ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=settings.REDIS_MAX_CONNECTIONS,
            retry_on_timeout=True,
        )
    return _redis_pool


async def get_redis() -> redis.Redis:
    """Client on the shared pool; closing it leaves the pool open."""
    return redis.Redis(connection_pool=get_redis_pool())


async def close_redis() -> None:
    """Disconnect the pool on application shutdown, if it was ever opened."""
    global _redis_pool
    if _redis_pool is not None:
        await _redis_pool.disconnect()
        _redis_pool = None
