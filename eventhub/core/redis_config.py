from functools import lru_cache

import redis

from eventhub.core.config import settings


def get_redis_url():
    return settings.redis_url


@lru_cache
def get_redis_client() -> redis.Redis:
    """Shared Redis client used for per-event locking."""
    return redis.from_url(get_redis_url(), decode_responses=True)
