# app/utils/rate_limit.py
from __future__ import annotations
from typing import Optional
from redis.asyncio import Redis
import logging
import time

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """
    Fixed-window counter per client using INCR + EXPIRE.
    Key: <prefix>:<client>:<window index>. Redis errors let the request through.
    """
    def __init__(self, redis: Redis, *, limit: int, window_s: int, prefix: str = "ratelimit"):
        self.redis = redis
        self.limit = limit
        self.window_s = window_s
        self.prefix = prefix

    def key(self, client: str, now: Optional[float] = None) -> str:
        window = int((time.time() if now is None else now) // self.window_s)
        return f"{self.prefix}:{client}:{window}"

    async def hit(self, client: str, now: Optional[float] = None) -> bool:
        """Count one request; True if it is within the limit."""
        key = self.key(client, now)
        try:
            count = await self.redis.incr(key)
            if count == 1:
                await self.redis.expire(key, self.window_s)
        except Exception as e:
            logger.warning("rate limit redis error key=%s err=%s", key, e)
            return True
        return count <= self.limit
