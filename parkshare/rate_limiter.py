"""
Hybrid in-memory + Redis rate limiting utilities.

Counters live in process memory and are synced to Redis periodically when
REDIS_URL is configured. Without Redis the limiter still works per process.
"""

import logging
import time
from threading import Lock
from typing import Optional

import redis
from fastapi import HTTPException, Request

from .config import RATE_LIMIT_ENABLED, REDIS_URL

logger = logging.getLogger(__name__)

redis_client: Optional[redis.Redis] = None
_redis_retry_after = 0.0

# Format: {key: {'count': int, 'reset_time': int, 'last_redis_sync': int}}
memory_cache: dict[str, dict] = {}
cache_lock = Lock()

MEMORY_CACHE_SYNC_INTERVAL = 10
MEMORY_CACHE_CLEANUP_INTERVAL = 60
REDIS_RECONNECT_BACKOFF = 60
last_cleanup_time = 0


def get_redis_client() -> Optional[redis.Redis]:
    """
    Get or create the shared Redis client.

    Returns None when Redis is not configured or was unreachable recently.
    """
    global redis_client, _redis_retry_after

    if not REDIS_URL:
        return None
    if redis_client is not None:
        return redis_client
    if time.time() < _redis_retry_after:
        return None

    try:
        client = redis.from_url(
            REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=10,
            retry_on_timeout=True,
            health_check_interval=30,
        )
        client.ping()
        redis_client = client
        logger.info("Redis connected successfully via URL")
    except Exception as e:
        _redis_retry_after = time.time() + REDIS_RECONNECT_BACKOFF
        logger.error(f"❌ Failed to connect to Redis: {e}")
        logger.warning("⚠️ Falling back to in-memory rate limiting")
        return None

    return redis_client


def cleanup_expired_cache():
    """Remove expired entries from memory cache"""
    global last_cleanup_time
    current_time = int(time.time())

    if current_time - last_cleanup_time < MEMORY_CACHE_CLEANUP_INTERVAL:
        return

    with cache_lock:
        expired_keys = [
            k for k, v in memory_cache.items() if current_time >= v.get("reset_time", 0)
        ]
        for k in expired_keys:
            del memory_cache[k]

        if expired_keys:
            logger.debug(f"🧹 Cleaned up {len(expired_keys)} expired rate limit entries")

    last_cleanup_time = current_time


def check_rate_limit(
    key: str, limit: int, window_seconds: int, client: Optional[redis.Redis] = None
) -> tuple[bool, int, int]:
    """Fixed-window check against the in-memory counter.

    Returns:
        Tuple of (is_allowed, current_count, ttl_seconds)
    """
    current_time = int(time.time())
    cleanup_expired_cache()

    with cache_lock:
        if key not in memory_cache:
            count, reset_time = 0, current_time + window_seconds
            if client is not None:
                try:
                    redis_count = client.get(key)
                    redis_ttl = client.ttl(key)
                    if redis_count and redis_ttl > 0:
                        count, reset_time = int(redis_count), current_time + redis_ttl
                except Exception as e:
                    logger.warning(f"⚠️ Failed to load from Redis, using memory only: {e}")
            memory_cache[key] = {
                "count": count,
                "reset_time": reset_time,
                "last_redis_sync": current_time,
            }

        cache_entry = memory_cache[key]

        if current_time >= cache_entry["reset_time"]:
            cache_entry["count"] = 0
            cache_entry["reset_time"] = current_time + window_seconds
            cache_entry["last_redis_sync"] = 0

        is_allowed = cache_entry["count"] < limit
        if is_allowed:
            cache_entry["count"] += 1

        if client is not None:
            time_since_sync = current_time - cache_entry.get("last_redis_sync", 0)
            if time_since_sync >= MEMORY_CACHE_SYNC_INTERVAL:
                try:
                    client.set(key, cache_entry["count"], ex=window_seconds)
                    cache_entry["last_redis_sync"] = current_time
                except Exception as e:
                    logger.warning(f"⚠️ Failed to sync to Redis: {e}")

        ttl = cache_entry["reset_time"] - current_time
        return is_allowed, cache_entry["count"], max(0, ttl)


async def rate_limit_dependency(
    request: Request, limit: int, window_seconds: int, key_prefix: str = "rate_limit"
):
    """FastAPI dependency body: per-IP fixed window"""
    if not RATE_LIMIT_ENABLED:
        return

    client_ip = request.client.host if request.client else "unknown"
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        client_ip = forwarded.split(",")[0].strip()

    key = f"{key_prefix}:{client_ip}"
    is_allowed, current_count, ttl = check_rate_limit(
        key, limit, window_seconds, get_redis_client()
    )

    if not is_allowed:
        logger.warning(f"🚫 Rate limit EXCEEDED for {key} - {current_count}/{limit} requests used")
        raise HTTPException(
            status_code=429,
            detail={
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after": ttl,
            },
            headers={"Retry-After": str(ttl)},
        )


def create_rate_limiter(limit: int, window_seconds: int, key_prefix: str = "rate_limit"):
    """
    Create a rate limiter dependency with specific parameters

    Example usage:
        booking_limit = create_rate_limiter(limit=10, window_seconds=60, key_prefix="booking")

        @router.post("/bookings")
        async def reserve(..., _: None = Depends(booking_limit)):
            ...
    """

    async def rate_limiter(request: Request):
        return await rate_limit_dependency(request, limit, window_seconds, key_prefix)

    return rate_limiter
