"""Two-tier caching: Redis hot tier in front of a PostgreSQL persistent tier."""

from .client import AsyncRedisClient
from .keys import CacheKeys
from .tiered import TieredCache
from .tiers import CacheTier, DatabaseCacheTier, PersistentCacheTier, RedisCacheTier

__all__ = [
    "AsyncRedisClient",
    "CacheKeys",
    "CacheTier",
    "DatabaseCacheTier",
    "PersistentCacheTier",
    "RedisCacheTier",
    "TieredCache",
]
