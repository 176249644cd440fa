"""Adapter registry mapping chain identifiers to adapters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from nftresolve.chains.base import ChainAdapter
from nftresolve.core.exceptions import UnsupportedChainError
from nftresolve.core.types import SupportedChain

if TYPE_CHECKING:
    from nftresolve.config import NftResolveSettings

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    Holds one long-lived adapter per supported chain.

    Lookups are case-insensitive and never perform I/O; unknown chains
    fail closed with UnsupportedChainError.
    """

    def __init__(self) -> None:
        self._adapters: dict[str, ChainAdapter] = {}

    def register(self, adapter: ChainAdapter) -> None:
        """Register an adapter under its chain identifier."""
        self._adapters[str(adapter.chain).lower()] = adapter

    def resolve(self, chain: str) -> ChainAdapter:
        """Get the adapter for a chain."""
        adapter = self._adapters.get(chain.strip().lower())
        if adapter is None:
            raise UnsupportedChainError(chain, self.list_supported())
        return adapter

    def list_supported(self) -> list[str]:
        """Supported chain identifiers, in registration order."""
        return list(self._adapters)

    def adapters(self) -> dict[str, ChainAdapter]:
        return dict(self._adapters)

    def __contains__(self, chain: str) -> bool:
        return chain.strip().lower() in self._adapters

    @classmethod
    def from_settings(cls, settings: NftResolveSettings) -> AdapterRegistry:
        """
        Create a registry with adapters configured from settings.

        Chains without an RPC URL are left out and therefore unsupported.
        """
        from nftresolve.chains.evm import EvmAdapter
        from nftresolve.chains.starknet import StarknetAdapter

        registry = cls()

        if settings.ethereum_rpc_url:
            registry.register(
                EvmAdapter(
                    SupportedChain.ETHEREUM,
                    settings.ethereum_rpc_url,
                    timeout=settings.rpc_timeout,
                )
            )
        if settings.polygon_rpc_url:
            registry.register(
                EvmAdapter(
                    SupportedChain.POLYGON,
                    settings.polygon_rpc_url,
                    timeout=settings.rpc_timeout,
                )
            )
        if settings.starknet_rpc_url:
            registry.register(
                StarknetAdapter(settings.starknet_rpc_url, timeout=settings.rpc_timeout)
            )

        logger.info(f"Registered chain adapters: {', '.join(registry.list_supported())}")
        return registry

    async def close_all(self) -> None:
        """Close all adapters."""
        for adapter in self._adapters.values():
            try:
                await adapter.close()
            except Exception as e:
                logger.warning(f"Failed to close {adapter.chain} adapter: {e}")
