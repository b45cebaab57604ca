from functools import lru_cache

import redis

from app.config import settings

@lru_cache(maxsize=1)
def get_redis() -> redis.Redis:
    # lazy so importing the app never opens a connection
    return redis.Redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=1,
        socket_timeout=1,
    )

# redis connectivity check
def redis_ping() -> bool:
    try:
        return bool(get_redis().ping())
    except redis.RedisError:
        return False
