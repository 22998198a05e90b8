"""Redis async connection for the shared collection cache.

Only opened when CACHE_BACKEND=redis; the in-process cache needs no
connection. Lifecycle mirrors the database engine: init at startup,
get from request handlers, close at shutdown.
"""

from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from discapi.logging_config import get_logger

logger = get_logger(name=__name__)

_client: Redis | None = None


async def init_redis(url: str, socket_timeout: Optional[float] = None) -> Redis:
    """Create the global async Redis client and verify connectivity.

    Args:
        url: Redis connection URL (e.g., redis://localhost:6379/0)
        socket_timeout: Seconds before a cache command fails; a failed
            command fails the request that issued it.

    Returns:
        The connected client, for building the cache store.
    """
    global _client
    _client = Redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
    )
    await _client.ping()
    logger.info("Redis cache connected: {}", url)
    return _client


def get_redis() -> Redis:
    """Get the global async Redis client. Raises if not initialized."""
    if _client is None:
        raise RuntimeError(
            "Redis client not initialized. Call init_redis() first."
        )
    return _client


async def redis_is_reachable() -> bool:
    """Ping the cache server for the health endpoint."""
    try:
        return bool(await get_redis().ping())
    except (RedisError, RuntimeError, OSError) as e:
        logger.warning("Redis health check failed: {}", e)
        return False


async def close_redis() -> None:
    """Close the Redis client connection."""
    global _client
    if _client is not None:
        await _client.aclose()
        logger.info("Redis cache connection closed")
    _client = None
