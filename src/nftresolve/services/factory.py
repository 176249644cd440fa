"""Construction and teardown of the resolution pipeline from settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from nftresolve.cache.client import AsyncRedisClient
from nftresolve.cache.tiered import TieredCache
from nftresolve.cache.tiers import DatabaseCacheTier, RedisCacheTier
from nftresolve.chains.registry import AdapterRegistry
from nftresolve.config import NftResolveSettings
from nftresolve.content.resolver import ContentResolver
from nftresolve.db.session import DatabaseManager
from nftresolve.metadata.normalizer import MetadataNormalizer
from nftresolve.services.resolution import ResolutionService

logger = logging.getLogger(__name__)


@dataclass
class ResolutionStack:
    """Every long-lived resource behind a ResolutionService."""

    service: ResolutionService
    registry: AdapterRegistry
    content: ContentResolver
    redis: AsyncRedisClient | None = None
    database: DatabaseManager | None = None

    async def close(self) -> None:
        """Drain pending writes, then release connections."""
        await self.service.close()
        await self.registry.close_all()
        await self.content.close()
        if self.redis is not None:
            await self.redis.close()
        if self.database is not None:
            await self.database.close()


async def build_resolution_stack(
    settings: NftResolveSettings,
    *,
    use_cache: bool = True,
) -> ResolutionStack:
    """
    Build the pipeline: adapters, content resolver, normalizer and cache tiers.

    Redis is optional; if it cannot be reached the hot tier is disabled and
    the service keeps working against the persistent tier alone.
    """
    redis_client: AsyncRedisClient | None = None
    hot_tier: RedisCacheTier | None = None
    if use_cache and settings.redis_url:
        try:
            logger.info("Initializing Redis cache...")
            redis_client = AsyncRedisClient(str(settings.redis_url))
            await redis_client.connect()
            await redis_client.ping()
            hot_tier = RedisCacheTier(redis_client, ttl=settings.cache_ttl)
            logger.info("Redis cache initialized")
        except Exception as e:
            logger.warning(f"Failed to initialize Redis: {e}")
            if redis_client is not None:
                await redis_client.close()
            redis_client = None

    database: DatabaseManager | None = None
    persistent_tier: DatabaseCacheTier | None = None
    if use_cache and settings.database_enabled:
        logger.info("Initializing database connection...")
        database = DatabaseManager(str(settings.database_url), echo=settings.debug)
        persistent_tier = DatabaseCacheTier(database)

    logger.info("Initializing chain adapters...")
    registry = AdapterRegistry.from_settings(settings)
    content = ContentResolver(settings.ipfs_gateways, settings.content_timeout)
    service = ResolutionService(
        registry,
        MetadataNormalizer(content),
        TieredCache(hot=hot_tier, persistent=persistent_tier),
        resolution_timeout=settings.resolution_timeout,
    )
    return ResolutionStack(
        service=service,
        registry=registry,
        content=content,
        redis=redis_client,
        database=database,
    )
