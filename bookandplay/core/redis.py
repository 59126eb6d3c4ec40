import json
import time

import redis
from redis.exceptions import RedisError

from bookandplay.core.config import settings
from bookandplay.core.logging_config import get_logger

logger = get_logger()

_redis_client = None
_down_since = None  # monotonic time of the last failed connect or command


def _mark_down(e):
    global _redis_client, _down_since

    if _down_since is None:
        logger.warning(f"Redis unavailable, caching off for {settings.REDIS_RETRY_SECONDS}s: {e}")
    _redis_client = None
    _down_since = time.monotonic()


def get_redis_client():
    global _redis_client, _down_since

    if _redis_client is not None:
        return _redis_client

    redis_url = settings.REDIS_URL

    if not redis_url:
        return None

    # no reconnect attempts while cooling down
    if _down_since is not None and time.monotonic() - _down_since < settings.REDIS_RETRY_SECONDS:
        return None

    try:
        client = redis.Redis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        client.ping()
        logger.info("Redis connected")
        _redis_client = client
        _down_since = None
        return _redis_client
    except RedisError as e:
        _mark_down(e)
        return None


def get_cache_many(keys: list) -> list:
    """Values for keys in order; None for misses. Empty list without Redis."""
    if not keys:
        return []

    client = get_redis_client()
    if not client:
        return []
    try:
        return [json.loads(v) if v else None for v in client.mget(keys)]
    except RedisError as e:
        _mark_down(e)
        return []


def set_cache(key: str, value, ttl: int = 60):
    client = get_redis_client()
    if not client:
        return
    try:
        client.setex(key, ttl, json.dumps(value))
    except RedisError as e:
        _mark_down(e)


def delete_cache_pattern(pattern: str):
    client = get_redis_client()
    if not client:
        return
    try:
        keys = list(client.scan_iter(match=pattern))
        if keys:
            client.delete(*keys)
    except RedisError as e:
        _mark_down(e)


def availability_key(venue_id: int, field_id: int | None, day) -> str:
    return f"availability:{venue_id}:{field_id or 'venue'}:{day.isoformat()}"


def invalidate_venue_availability(venue_id: int):
    delete_cache_pattern(f"availability:{venue_id}:*")
