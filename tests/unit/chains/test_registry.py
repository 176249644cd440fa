"""Tests for the adapter registry."""

from __future__ import annotations

import pytest

from nftresolve.chains.base import ChainAdapter
from nftresolve.chains.evm import EvmAdapter
from nftresolve.chains.registry import AdapterRegistry
from nftresolve.chains.starknet import StarknetAdapter
from nftresolve.core.exceptions import UnsupportedChainError, ValidationError
from nftresolve.core.types import SupportedChain


class TestAdapterRegistry:
    """Tests for registration and lookup."""

    def test_resolve_is_case_insensitive(self, registry: AdapterRegistry, ethereum_adapter):
        assert registry.resolve("ethereum") is ethereum_adapter
        assert registry.resolve("ETHEREUM") is ethereum_adapter
        assert registry.resolve(" Ethereum ") is ethereum_adapter

    def test_unknown_chain(self, registry: AdapterRegistry):
        with pytest.raises(UnsupportedChainError) as exc_info:
            registry.resolve("solana")

        error = exc_info.value
        assert isinstance(error, ValidationError)
        assert error.chain == "solana"
        assert error.supported == ["ethereum"]
        assert "ethereum" in error.message

    def test_list_supported(self, registry: AdapterRegistry):
        assert registry.list_supported() == ["ethereum"]

    def test_contains(self, registry: AdapterRegistry):
        assert "Ethereum" in registry
        assert "polygon" not in registry

    def test_fake_adapter_satisfies_protocol(self, ethereum_adapter):
        assert isinstance(ethereum_adapter, ChainAdapter)

    async def test_close_all_continues_after_failure(self, ethereum_adapter):
        class BrokenAdapter:
            chain = SupportedChain.POLYGON

            async def close(self) -> None:
                raise RuntimeError("already closed")

        registry = AdapterRegistry()
        registry.register(BrokenAdapter())
        registry.register(ethereum_adapter)

        await registry.close_all()

        assert ethereum_adapter.closed


class TestFromSettings:
    """Tests for building the registry from settings."""

    async def test_all_chains(self, mock_settings):
        registry = AdapterRegistry.from_settings(mock_settings)
        try:
            assert registry.list_supported() == ["ethereum", "polygon", "starknet"]
            assert isinstance(registry.resolve("ethereum"), EvmAdapter)
            assert isinstance(registry.resolve("polygon"), EvmAdapter)
            assert isinstance(registry.resolve("starknet"), StarknetAdapter)
        finally:
            await registry.close_all()

    async def test_unconfigured_chains_are_unsupported(self, mock_settings_minimal):
        registry = AdapterRegistry.from_settings(mock_settings_minimal)
        try:
            assert registry.list_supported() == ["ethereum"]
            with pytest.raises(UnsupportedChainError):
                registry.resolve("starknet")
        finally:
            await registry.close_all()
