import asyncio

from redis.exceptions import ConnectionError

from blipvoice.services.rate_limit import RateLimiter


class MemoryRedis:
    def __init__(self):
        self.counts = {}
        self.expiry = {}

    async def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key, seconds):
        self.expiry[key] = seconds

    async def ping(self):
        return True


class DownRedis:
    async def incr(self, key):
        raise ConnectionError("connection refused")

    async def ping(self):
        raise ConnectionError("connection refused")


def test_limiter_without_redis_allows_everything():
    limiter = RateLimiter.from_url("")
    assert limiter.enabled is False
    assert all(asyncio.run(limiter.hit("127.0.0.1")) for _ in range(5))


def test_limiter_blocks_after_limit():
    redis_client = MemoryRedis()
    limiter = RateLimiter(redis_client, limit=2, window_seconds=30)

    results = [asyncio.run(limiter.hit("127.0.0.1")) for _ in range(3)]

    assert results == [True, True, False]
    assert redis_client.expiry == {"start-call:127.0.0.1": 30}
    assert asyncio.run(limiter.hit("10.0.0.2")) is True


def test_limiter_fails_open_when_redis_is_down():
    limiter = RateLimiter(DownRedis(), limit=1)
    assert asyncio.run(limiter.hit("127.0.0.1")) is True
    assert asyncio.run(limiter.ping()) is False
