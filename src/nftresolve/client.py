"""Main library client for standalone usage."""

from __future__ import annotations

import logging

from nftresolve.config import NftResolveSettings
from nftresolve.core.models import CacheStatistics, CollectionMetadata, HealthReport, NftMetadata
from nftresolve.services.factory import ResolutionStack, build_resolution_stack
from nftresolve.services.resolution import ResolutionService

logger = logging.getLogger(__name__)


class NftResolveClient:
    """
    Main client for the nftresolve library.

    Resolves NFT and collection metadata without running the web server.

    Usage:
        async with NftResolveClient() as client:
            nft = await client.resolve_nft("ethereum", "0xbc4c...f13d", "1")
            collection = await client.resolve_collection("polygon", "0x2953...0bd")

    Settings are loaded from environment variables or can be passed explicitly.
    """

    def __init__(
        self,
        settings: NftResolveSettings | None = None,
        *,
        use_cache: bool = True,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Application settings. If not provided, loaded from environment.
            use_cache: Whether to use the Redis and PostgreSQL cache tiers.
        """
        self._settings = settings or NftResolveSettings()
        self._use_cache = use_cache
        self._stack: ResolutionStack | None = None

    async def __aenter__(self) -> NftResolveClient:
        """Initialize resources on context entry."""
        await self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Clean up resources on context exit."""
        await self.close()

    async def _initialize(self) -> None:
        self._stack = await build_resolution_stack(self._settings, use_cache=self._use_cache)

    async def close(self) -> None:
        """Close all resources."""
        if self._stack:
            await self._stack.close()
            self._stack = None

    def _ensure_initialized(self) -> ResolutionService:
        """Ensure client is initialized."""
        if self._stack is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with NftResolveClient() as client:'"
            )
        return self._stack.service

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
            chain: ethereum, polygon or starknet
            contract_address: Token contract address
            token_id: Token id, decimal or 0x-prefixed hex
            force_refresh: Bypass the cache

        Returns:
            Normalized token metadata
        """
        service = self._ensure_initialized()
        return await service.resolve_nft(
            chain, contract_address, token_id, force_refresh=force_refresh
        )

    async def resolve_collection(
        self,
        chain: str,
        contract_address: str,
        *,
        force_refresh: bool = False,
    ) -> CollectionMetadata:
        """Resolve contract-level metadata for a collection."""
        service = self._ensure_initialized()
        return await service.resolve_collection(
            chain, contract_address, force_refresh=force_refresh
        )

    async def cache_statistics(self) -> CacheStatistics:
        return await self._ensure_initialized().cache_statistics()

    async def health_check(self) -> HealthReport:
        return await self._ensure_initialized().health_check()

    def supported_chains(self) -> list[str]:
        """Chains with a configured RPC endpoint."""
        return self._ensure_initialized().registry.list_supported()


async def resolve_nft(
    chain: str,
    contract_address: str,
    token_id: str,
    *,
    settings: NftResolveSettings | None = None,
) -> NftMetadata:
    """
    Resolve a token (convenience function).

    For multiple resolutions, use NftResolveClient for better performance.
    """
    async with NftResolveClient(settings) as client:
        return await client.resolve_nft(chain, contract_address, token_id)
