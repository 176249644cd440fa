"""Resolution service orchestrating cache, chain adapters and content fetching."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Coroutine
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from nftresolve.core.exceptions import NotFoundError, UpstreamUnavailableError, ValidationError
from nftresolve.core.identifiers import CollectionIdentity, TokenIdentity
from nftresolve.core.models import (
    CacheStatistics,
    CollectionMetadata,
    CollectionPage,
    HealthReport,
    NftMetadata,
)

if TYPE_CHECKING:
    from nftresolve.cache.tiered import TieredCache
    from nftresolve.chains.registry import AdapterRegistry
    from nftresolve.metadata.normalizer import MetadataNormalizer

logger = logging.getLogger(__name__)


def _token_identity(chain: str, contract_address: str, token_id: str) -> TokenIdentity:
    try:
        return TokenIdentity(chain=chain, contract_address=contract_address, token_id=token_id)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid token identity: {chain}/{contract_address}/{token_id}",
            {"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def _collection_identity(chain: str, contract_address: str) -> CollectionIdentity:
    try:
        return CollectionIdentity(chain=chain, contract_address=contract_address)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid collection identity: {chain}/{contract_address}",
            {"errors": e.errors(include_url=False, include_context=False)},
        ) from e


class ResolutionService:
    """
    Service for resolving NFT and collection metadata.

    Orchestrates the resolution flow:
    1. Check the tiered cache (unless a refresh is forced)
    2. Ask the chain adapter for the token pointer
    3. Fetch and normalize the metadata document
    4. Write the result to both cache tiers in the background

    The chain is validated before any cache or network access. Errors
    from adapters, the content resolver and the normalizer propagate
    unchanged; cache failures never do.
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        normalizer: MetadataNormalizer,
        cache: TieredCache,
        *,
        resolution_timeout: float = 30.0,
    ) -> None:
        self._registry = registry
        self._normalizer = normalizer
        self._cache = cache
        self._resolution_timeout = resolution_timeout
        self._pending_writes: set[asyncio.Task[None]] = set()

    @property
    def registry(self) -> AdapterRegistry:
        return self._registry

    def _schedule_write(self, write: Coroutine[Any, Any, None]) -> None:
        """Run a cache write without making the caller wait for it."""
        task = asyncio.create_task(write)
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def wait_for_pending_writes(self) -> None:
        """Wait until every scheduled cache write has finished."""
        if self._pending_writes:
            await asyncio.gather(*self._pending_writes, return_exceptions=True)

    async def resolve_nft(
        self,
        chain: str,
        contract_address: str,
        token_id: str,
        *,
        force_refresh: bool = False,
    ) -> NftMetadata:
        """
        Resolve metadata for a single token.

        Args:
            chain: Chain identifier (case-insensitive)
            contract_address: Token contract address (case-insensitive)
            token_id: Token id, decimal or 0x-prefixed hex
            force_refresh: Skip the cache read and fetch from the chain

        Returns:
            Normalized metadata; ``from_cache`` tells where it came from

        Raises:
            UnsupportedChainError: chain has no adapter
            ValidationError: malformed contract address or token id
            NotFoundError: contract has no pointer for this token
            ClientError, MalformedDocumentError: bad content source
            UpstreamUnavailableError, ContentUnavailableError: transient
        """
        start = time.monotonic()
        adapter = self._registry.resolve(chain)
        identity = _token_identity(chain, contract_address, token_id)
        label = f"{identity.chain}:{identity.contract_address}:{identity.token_id}"

        if not force_refresh:
            hit = await self._cache.read_nft(identity)
            if hit is not None:
                logger.debug(f"Cache hit ({hit.source}) for {label}")
                return hit.record.model_copy(update={"from_cache": True})

        try:
            async with asyncio.timeout(self._resolution_timeout):
                token_uri = await adapter.get_token_uri(identity.contract_address, identity.token_id)
                if not token_uri or not token_uri.strip():
                    raise NotFoundError(f"No token URI for {label}")
                parsed = await self._normalizer.resolve(token_uri)
        except TimeoutError as e:
            raise UpstreamUnavailableError(
                f"Resolution of {label} timed out after {self._resolution_timeout}s",
                source=identity.chain,
            ) from e

        if not self._normalizer.validate(parsed):
            logger.warning(f"Metadata for {label} has neither name nor image")

        record = NftMetadata.from_parsed(identity, token_uri, parsed)
        self._schedule_write(self._cache.write_nft(record))

        duration = time.monotonic() - start
        logger.info(f"NFT resolution completed in {duration:.2f}s: {label}")
        return record

    async def resolve_collection(
        self,
        chain: str,
        contract_address: str,
        *,
        force_refresh: bool = False,
    ) -> CollectionMetadata:
        """Resolve collection-level metadata with the same cache-then-chain flow."""
        start = time.monotonic()
        adapter = self._registry.resolve(chain)
        identity = _collection_identity(chain, contract_address)
        label = f"{identity.chain}:{identity.contract_address}"

        if not force_refresh:
            hit = await self._cache.read_collection(identity)
            if hit is not None:
                logger.debug(f"Cache hit ({hit.source}) for collection {label}")
                return hit.record.model_copy(update={"from_cache": True})

        try:
            async with asyncio.timeout(self._resolution_timeout):
                info = await adapter.get_contract_metadata(identity.contract_address)
        except TimeoutError as e:
            raise UpstreamUnavailableError(
                f"Collection resolution of {label} timed out after {self._resolution_timeout}s",
                source=identity.chain,
            ) from e

        record = CollectionMetadata.from_contract_info(identity, info)
        self._schedule_write(self._cache.write_collection(record))

        duration = time.monotonic() - start
        logger.info(f"Collection resolution completed in {duration:.2f}s: {label}")
        return record

    async def list_collection_nfts(
        self,
        chain: str,
        contract_address: str,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> CollectionPage:
        """Previously cached tokens of a collection, newest first."""
        self._registry.resolve(chain)
        identity = _collection_identity(chain, contract_address)
        return await self._cache.list_collection_nfts(identity, limit=limit, offset=offset)

    async def invalidate_nft(self, chain: str, contract_address: str, token_id: str) -> None:
        """Drop one token from both cache tiers."""
        identity = _token_identity(chain, contract_address, token_id)
        await self._cache.invalidate_nft(identity)

    async def invalidate_collection(self, chain: str, contract_address: str) -> int:
        """Drop a collection and its tokens from both cache tiers."""
        identity = _collection_identity(chain, contract_address)
        return await self._cache.invalidate_collection(identity)

    async def cache_statistics(self) -> CacheStatistics:
        return await self._cache.statistics()

    async def health_check(self) -> HealthReport:
        """Check both cache tiers and every chain node concurrently."""
        adapters = self._registry.adapters()
        hot, persistent, *chain_results = await asyncio.gather(
            self._cache.hot_tier_healthy(),
            self._cache.persistent_tier_healthy(),
            *(adapter.check_connection() for adapter in adapters.values()),
        )
        return HealthReport(
            hot_tier_healthy=hot,
            persistent_tier_healthy=persistent,
            chains=dict(zip(adapters, chain_results)),
        )

    async def close(self) -> None:
        """Flush pending cache writes."""
        await self.wait_for_pending_writes()
