"""Async Redis client wrapper."""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis


class AsyncRedisClient:
    """Async Redis client wrapper with JSON serialization."""

    SCAN_BATCH_SIZE = 500

    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._pool: aioredis.ConnectionPool | None = None
        self._redis: aioredis.Redis | None = None

    async def connect(self) -> None:
        """Connect to Redis."""
        self._pool = aioredis.ConnectionPool.from_url(
            self._redis_url,
            max_connections=20,
            decode_responses=True,
        )
        self._redis = aioredis.Redis(connection_pool=self._pool)

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis:
            await self._redis.aclose()
        if self._pool:
            await self._pool.disconnect()
        self._redis = None
        self._pool = None

    @property
    def connected(self) -> bool:
        return self._redis is not None

    async def ping(self) -> bool:
        """Round-trip a PING."""
        if not self._redis:
            return False
        return bool(await self._redis.ping())

    async def get(self, key: str) -> Any | None:
        """Get a value from cache."""
        if not self._redis:
            return None
        value = await self._redis.get(key)
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int = 3600,
    ) -> None:
        """Set a value in cache with TTL."""
        if not self._redis:
            return
        serialized = json.dumps(value, default=str)
        await self._redis.set(key, serialized, ex=ttl)

    async def delete(self, key: str) -> bool:
        """Delete a key from cache."""
        if not self._redis:
            return False
        result = await self._redis.delete(key)
        return result > 0

    async def delete_many(self, keys: list[str]) -> int:
        """Delete several keys, returning how many existed."""
        if not self._redis or not keys:
            return 0
        return await self._redis.delete(*keys)

    async def exists(self, key: str) -> bool:
        """Check if a key exists."""
        if not self._redis:
            return False
        return await self._redis.exists(key) > 0

    async def add_to_index(self, index_key: str, member: str, ttl: int = 3600) -> None:
        """Add a member to a set and refresh the set's TTL."""
        if not self._redis:
            return
        pipe = self._redis.pipeline()
        pipe.sadd(index_key, member)
        pipe.expire(index_key, ttl)
        await pipe.execute()

    async def members(self, index_key: str) -> set[str]:
        """Members of a set."""
        if not self._redis:
            return set()
        return set(await self._redis.smembers(index_key))

    async def scan_keys(self, pattern: str) -> list[str]:
        """All keys matching a glob pattern, via incremental SCAN."""
        if not self._redis:
            return []
        return [key async for key in self._redis.scan_iter(match=pattern, count=self.SCAN_BATCH_SIZE)]

    async def clear(self) -> None:
        """Remove every key in the current database."""
        if not self._redis:
            return
        await self._redis.flushdb()

    async def __aenter__(self) -> AsyncRedisClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
