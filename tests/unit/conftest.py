"""Unit test fixtures with HTTP mocking and in-memory collaborators."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
import respx
from httpx import Response

from nftresolve.cache.tiered import TieredCache
from nftresolve.chains.registry import AdapterRegistry
from nftresolve.content.resolver import ContentResolver
from nftresolve.core.exceptions import NotFoundError
from nftresolve.core.identifiers import CollectionIdentity, TokenIdentity
from nftresolve.core.models import (
    CollectionMetadata,
    CollectionPage,
    ContractInfo,
    Gateway,
    NftMetadata,
)
from nftresolve.core.types import ContractType, SupportedChain
from nftresolve.metadata.normalizer import MetadataNormalizer
from nftresolve.services.resolution import ResolutionService


# ============================================================================
# HTTP Mocking Fixtures
# ============================================================================


@pytest.fixture
def respx_mock():
    """Provide a respx mock router for HTTP mocking.

    Use this when you need fine-grained control over mocked responses.
    The mock is automatically started and stopped by respx.
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


def mock_json_response(data: Any, status_code: int = 200) -> Response:
    """Create a mock JSON response."""
    return Response(
        status_code=status_code,
        json=data,
        headers={"Content-Type": "application/json"},
    )


def mock_error_response(status_code: int, message: str = "Error") -> Response:
    """Create a mock error response."""
    return Response(
        status_code=status_code,
        json={"error": message},
        headers={"Content-Type": "application/json"},
    )


@pytest.fixture
def mock_responses():
    """Provide helper functions for creating mock responses."""
    return {
        "json": mock_json_response,
        "error": mock_error_response,
    }


# ============================================================================
# Content Fixtures
# ============================================================================


class RecordingSleep:
    """Stands in for asyncio.sleep and records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
async def content_resolver(gateways: list[Gateway], recording_sleep: RecordingSleep):
    """Content resolver over the test gateways, with backoff sleeps recorded."""
    resolver = ContentResolver(gateways, timeout=1.0, sleep=recording_sleep)
    yield resolver
    await resolver.close()


@pytest.fixture
def normalizer(content_resolver: ContentResolver) -> MetadataNormalizer:
    return MetadataNormalizer(content_resolver)


# ============================================================================
# Fake Chain Adapters
# ============================================================================


class FakeAdapter:
    """Chain adapter serving token pointers from a dict."""

    def __init__(
        self,
        chain: SupportedChain,
        token_uris: dict[tuple[str, str], str] | None = None,
        contract_info: ContractInfo | None = None,
        *,
        connected: bool = True,
    ) -> None:
        self.chain = chain
        self.token_uris = token_uris or {}
        self.contract_info = contract_info or ContractInfo(contract_type=ContractType.ERC721)
        self.connected = connected
        self.token_uri_calls: list[tuple[str, str]] = []
        self.metadata_calls: list[str] = []
        self.error: Exception | None = None
        self.delay: float = 0.0
        self.closed = False

    async def get_token_uri(self, contract_address: str, token_id: str) -> str:
        self.token_uri_calls.append((contract_address, token_id))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        try:
            return self.token_uris[(contract_address, token_id)]
        except KeyError:
            raise NotFoundError(f"No token {token_id} on {contract_address}") from None

    async def get_contract_metadata(self, contract_address: str) -> ContractInfo:
        self.metadata_calls.append(contract_address)
        if self.error is not None:
            raise self.error
        return self.contract_info

    async def is_erc721(self, contract_address: str) -> bool:
        return self.contract_info.contract_type == ContractType.ERC721

    async def is_erc1155(self, contract_address: str) -> bool:
        return self.contract_info.contract_type == ContractType.ERC1155

    async def check_connection(self) -> bool:
        return self.connected

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_adapter() -> type[FakeAdapter]:
    """Factory for fake adapters on further chains."""
    return FakeAdapter


@pytest.fixture
def ethereum_adapter() -> FakeAdapter:
    return FakeAdapter(SupportedChain.ETHEREUM)


@pytest.fixture
def registry(ethereum_adapter: FakeAdapter) -> AdapterRegistry:
    """Registry holding only the fake Ethereum adapter."""
    registry = AdapterRegistry()
    registry.register(ethereum_adapter)
    return registry


# ============================================================================
# Fake Cache Tiers
# ============================================================================


class InMemoryTier:
    """Dict-backed cache tier recording every call."""

    def __init__(self) -> None:
        self.nfts: dict[tuple[str, str, str], NftMetadata] = {}
        self.collections: dict[tuple[str, str], CollectionMetadata] = {}
        self.calls: list[str] = []
        self.healthy = True

    async def get_nft(self, identity: TokenIdentity) -> NftMetadata | None:
        self.calls.append("get_nft")
        return self.nfts.get((identity.chain, identity.contract_address, identity.token_id))

    async def set_nft(self, record: NftMetadata) -> None:
        self.calls.append("set_nft")
        self.nfts[(record.chain, record.contract_address, record.token_id)] = record

    async def delete_nft(self, identity: TokenIdentity) -> None:
        self.calls.append("delete_nft")
        self.nfts.pop((identity.chain, identity.contract_address, identity.token_id), None)

    async def get_collection(self, identity: CollectionIdentity) -> CollectionMetadata | None:
        self.calls.append("get_collection")
        return self.collections.get((identity.chain, identity.contract_address))

    async def set_collection(self, record: CollectionMetadata) -> None:
        self.calls.append("set_collection")
        self.collections[(record.chain, record.contract_address)] = record

    async def delete_collection(self, identity: CollectionIdentity) -> int:
        self.calls.append("delete_collection")
        keys = [
            key
            for key in self.nfts
            if key[:2] == (identity.chain, identity.contract_address)
        ]
        for key in keys:
            del self.nfts[key]
        self.collections.pop((identity.chain, identity.contract_address), None)
        return len(keys)

    async def list_collection_nfts(
        self,
        identity: CollectionIdentity,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> CollectionPage:
        self.calls.append("list_collection_nfts")
        items = [
            record
            for key, record in self.nfts.items()
            if key[:2] == (identity.chain, identity.contract_address)
        ]
        return CollectionPage(
            items=items[offset : offset + limit],
            total=len(items),
            limit=limit,
            offset=offset,
        )

    async def statistics(self) -> dict[str, Any]:
        self.calls.append("statistics")
        per_chain: dict[str, int] = {}
        for chain, _, _ in self.nfts:
            per_chain[chain] = per_chain.get(chain, 0) + 1
        return {
            "total_records": len(self.nfts),
            "total_collections": len(self.collections),
            "per_chain_counts": per_chain,
        }

    async def ping(self) -> bool:
        return self.healthy


class FailingTier(InMemoryTier):
    """Tier whose every operation raises, as an unreachable backend would."""

    async def _fail(self, name: str) -> Any:
        self.calls.append(name)
        raise ConnectionError(f"{name} failed: backend down")

    async def get_nft(self, identity: TokenIdentity) -> NftMetadata | None:
        return await self._fail("get_nft")

    async def set_nft(self, record: NftMetadata) -> None:
        await self._fail("set_nft")

    async def delete_nft(self, identity: TokenIdentity) -> None:
        await self._fail("delete_nft")

    async def get_collection(self, identity: CollectionIdentity) -> CollectionMetadata | None:
        return await self._fail("get_collection")

    async def set_collection(self, record: CollectionMetadata) -> None:
        await self._fail("set_collection")

    async def delete_collection(self, identity: CollectionIdentity) -> int:
        return await self._fail("delete_collection")

    async def list_collection_nfts(self, identity, *, limit=50, offset=0) -> CollectionPage:
        return await self._fail("list_collection_nfts")

    async def statistics(self) -> dict[str, Any]:
        return await self._fail("statistics")

    async def ping(self) -> bool:
        return await self._fail("ping")


@pytest.fixture
def hot_tier() -> InMemoryTier:
    return InMemoryTier()


@pytest.fixture
def persistent_tier() -> InMemoryTier:
    return InMemoryTier()


@pytest.fixture
def failing_tier() -> FailingTier:
    return FailingTier()


@pytest.fixture
def tiered_cache(hot_tier: InMemoryTier, persistent_tier: InMemoryTier) -> TieredCache:
    return TieredCache(hot=hot_tier, persistent=persistent_tier)


@pytest.fixture
async def resolution_service(
    registry: AdapterRegistry,
    normalizer: MetadataNormalizer,
    tiered_cache: TieredCache,
):
    """Service wired to the fake adapter, real normalizer and in-memory tiers."""
    service = ResolutionService(registry, normalizer, tiered_cache, resolution_timeout=2.0)
    yield service
    await service.close()
