import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import ConnectionError, TimeoutError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Fixed-window counter in Redis. Fails open when Redis is unavailable."""

    def __init__(
        self,
        client: Optional[redis.Redis],
        prefix: str = "start-call",
        limit: int = 30,
        window_seconds: int = 60,
    ):
        self.client = client
        self.prefix = prefix
        self.limit = limit
        self.window_seconds = window_seconds

    @classmethod
    def from_url(cls, redis_url: str, **kwargs) -> "RateLimiter":
        client = redis.from_url(redis_url, decode_responses=True) if redis_url else None
        return cls(client, **kwargs)

    @property
    def enabled(self) -> bool:
        return self.client is not None and self.limit > 0

    async def hit(self, key: str) -> bool:
        if not self.enabled:
            return True
        redis_key = f"{self.prefix}:{key}"
        try:
            count = await self.client.incr(redis_key)
            if count == 1:
                await self.client.expire(redis_key, self.window_seconds)
            return count <= self.limit
        except (ConnectionError, TimeoutError) as exc:
            logger.warning("Rate limiter unavailable, allowing request: %s", exc)
            return True

    async def ping(self) -> bool:
        if self.client is None:
            return False
        try:
            return bool(await self.client.ping())
        except (ConnectionError, TimeoutError):
            return False

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
