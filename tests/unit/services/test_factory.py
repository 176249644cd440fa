"""Tests for pipeline construction and the standalone client."""

from __future__ import annotations

import pytest

from nftresolve.client import NftResolveClient
from nftresolve.services.factory import build_resolution_stack


class TestBuildResolutionStack:
    """Tests for assembling the pipeline from settings."""

    async def test_without_cache_tiers(self, mock_settings_minimal):
        stack = await build_resolution_stack(mock_settings_minimal)
        try:
            assert stack.redis is None
            assert stack.database is None
            assert stack.registry.list_supported() == ["ethereum"]
            assert stack.service.registry is stack.registry
        finally:
            await stack.close()

    async def test_use_cache_false_skips_tiers(self, mock_settings):
        stack = await build_resolution_stack(mock_settings, use_cache=False)
        try:
            assert stack.redis is None
            assert stack.database is None
            assert stack.registry.list_supported() == ["ethereum", "polygon", "starknet"]
        finally:
            await stack.close()

    async def test_statistics_without_tiers(self, mock_settings_minimal):
        stack = await build_resolution_stack(mock_settings_minimal)
        try:
            stats = await stack.service.cache_statistics()
            assert stats.total_records == 0
            assert stats.hot_tier_healthy is False
        finally:
            await stack.close()


class TestNftResolveClient:
    """Tests for the async context manager client."""

    async def test_requires_initialization(self, mock_settings_minimal):
        client = NftResolveClient(mock_settings_minimal)

        with pytest.raises(RuntimeError, match="not initialized"):
            await client.resolve_nft("ethereum", "0x0", "1")

        with pytest.raises(RuntimeError):
            client.supported_chains()

    async def test_context_manager(self, mock_settings_minimal):
        async with NftResolveClient(mock_settings_minimal, use_cache=False) as client:
            assert client.supported_chains() == ["ethereum"]

        with pytest.raises(RuntimeError):
            client.supported_chains()

    async def test_close_is_idempotent(self, mock_settings_minimal):
        client = NftResolveClient(mock_settings_minimal)
        await client.close()
        await client.close()
