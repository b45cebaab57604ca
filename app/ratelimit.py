from __future__ import annotations

import hashlib
import logging

import redis
from fastapi import Request

from app.config import settings
from app.errors import RateLimited
from app.redis_client import get_redis

logger = logging.getLogger(__name__)

def _hash(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()[:24]

# fixed-window limiter using redis INCR + EXPIRE, keyed per client ip
def rate_limit(name: str, limit_per_window: int, window_seconds: int = 60):
    def _dep(request: Request) -> None:
        if not settings.rate_limit_enabled:
            return

        ip = (request.client.host if request.client else "unknown").strip()
        key = f"rl:{name}:{_hash(ip)}"

        try:
            pipe = get_redis().pipeline()
            pipe.incr(key)
            pipe.expire(key, window_seconds, nx=True)
            count, _ = pipe.execute()
        except redis.RedisError as exc:
            # fail-open if redis is down
            logger.warning("rate limiter unavailable for %s: %s", name, exc.__class__.__name__)
            return

        if int(count) > int(limit_per_window):
            raise RateLimited(details={"limit": limit_per_window, "window_seconds": window_seconds})

    return _dep
