"""Two-tier cache with promotion from the persistent tier to the hot tier."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, TypeVar

from nftresolve.core.identifiers import CollectionIdentity, TokenIdentity
from nftresolve.core.models import (
    CacheHit,
    CacheStatistics,
    CollectionMetadata,
    CollectionPage,
    NftMetadata,
)
from nftresolve.core.types import CacheSource

if TYPE_CHECKING:
    from nftresolve.cache.tiers import CacheTier, PersistentCacheTier

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TieredCache:
    """
    Hot tier in front of a persistent tier.

    Reads check the hot tier, then the persistent tier; a persistent hit
    is copied into the hot tier before it is returned. Writes go to both
    tiers concurrently and independently.

    A failing tier never fails the caller: errors are logged and the
    operation degrades to a miss (reads) or a no-op (writes). Either tier
    may be None, which disables it.
    """

    def __init__(
        self,
        hot: CacheTier | None = None,
        persistent: PersistentCacheTier | None = None,
    ) -> None:
        self._hot = hot
        self._persistent = persistent

    @property
    def hot(self) -> CacheTier | None:
        return self._hot

    @property
    def persistent(self) -> PersistentCacheTier | None:
        return self._persistent

    async def _safely(self, operation: Awaitable[T], description: str, default: T) -> T:
        """Await a tier operation, logging and swallowing any failure."""
        try:
            return await operation
        except Exception as e:
            logger.warning(f"Cache {description} failed: {e}")
            return default

    async def read_nft(self, identity: TokenIdentity) -> CacheHit[NftMetadata] | None:
        """Look up a token in the hot tier, then the persistent tier."""
        if self._hot is not None:
            record = await self._safely(self._hot.get_nft(identity), "hot read", None)
            if record is not None:
                return CacheHit(record=record, source=CacheSource.REDIS)

        if self._persistent is not None:
            record = await self._safely(
                self._persistent.get_nft(identity), "persistent read", None
            )
            if record is not None:
                if self._hot is not None:
                    await self._safely(self._hot.set_nft(record), "hot promotion", None)
                return CacheHit(record=record, source=CacheSource.DATABASE)

        return None

    async def write_nft(self, record: NftMetadata) -> None:
        """Write to both tiers concurrently; one failing does not affect the other."""
        operations = []
        if self._hot is not None:
            operations.append(self._safely(self._hot.set_nft(record), "hot write", None))
        if self._persistent is not None:
            operations.append(
                self._safely(self._persistent.set_nft(record), "persistent write", None)
            )
        await asyncio.gather(*operations)

    async def invalidate_nft(self, identity: TokenIdentity) -> None:
        operations = []
        if self._hot is not None:
            operations.append(self._safely(self._hot.delete_nft(identity), "hot delete", None))
        if self._persistent is not None:
            operations.append(
                self._safely(self._persistent.delete_nft(identity), "persistent delete", None)
            )
        await asyncio.gather(*operations)

    async def read_collection(
        self, identity: CollectionIdentity
    ) -> CacheHit[CollectionMetadata] | None:
        if self._hot is not None:
            record = await self._safely(self._hot.get_collection(identity), "hot read", None)
            if record is not None:
                return CacheHit(record=record, source=CacheSource.REDIS)

        if self._persistent is not None:
            record = await self._safely(
                self._persistent.get_collection(identity), "persistent read", None
            )
            if record is not None:
                if self._hot is not None:
                    await self._safely(self._hot.set_collection(record), "hot promotion", None)
                return CacheHit(record=record, source=CacheSource.DATABASE)

        return None

    async def write_collection(self, record: CollectionMetadata) -> None:
        operations = []
        if self._hot is not None:
            operations.append(self._safely(self._hot.set_collection(record), "hot write", None))
        if self._persistent is not None:
            operations.append(
                self._safely(self._persistent.set_collection(record), "persistent write", None)
            )
        await asyncio.gather(*operations)

    async def invalidate_collection(self, identity: CollectionIdentity) -> int:
        """
        Drop a collection and all of its tokens from both tiers.

        Returns the number of token rows removed from the persistent tier.
        """
        hot_removed, persistent_removed = await asyncio.gather(
            self._delete_collection(self._hot, identity, "hot"),
            self._delete_collection(self._persistent, identity, "persistent"),
        )
        logger.info(
            f"Invalidated {identity.chain}:{identity.contract_address} "
            f"(hot={hot_removed}, persistent={persistent_removed})"
        )
        return persistent_removed

    async def _delete_collection(
        self,
        tier: CacheTier | None,
        identity: CollectionIdentity,
        name: str,
    ) -> int:
        if tier is None:
            return 0
        return await self._safely(tier.delete_collection(identity), f"{name} collection delete", 0)

    async def list_collection_nfts(
        self,
        identity: CollectionIdentity,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> CollectionPage:
        """Page through cached tokens; empty when the persistent tier is unavailable."""
        empty = CollectionPage(limit=limit, offset=offset)
        if self._persistent is None:
            return empty
        return await self._safely(
            self._persistent.list_collection_nfts(identity, limit=limit, offset=offset),
            "collection listing",
            empty,
        )

    async def hot_tier_healthy(self) -> bool:
        if self._hot is None:
            return False
        return await self._safely(self._hot.ping(), "hot ping", False)

    async def persistent_tier_healthy(self) -> bool:
        if self._persistent is None:
            return False
        return await self._safely(self._persistent.ping(), "persistent ping", False)

    async def statistics(self) -> CacheStatistics:
        counts = {"total_records": 0, "total_collections": 0, "per_chain_counts": {}}
        if self._persistent is not None:
            counts = await self._safely(self._persistent.statistics(), "statistics", counts)
        return CacheStatistics(
            per_chain_counts=counts["per_chain_counts"],
            total_records=counts["total_records"],
            total_collections=counts["total_collections"],
            hot_tier_healthy=await self.hot_tier_healthy(),
        )
