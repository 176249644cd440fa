"""Response schemas for API endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from nftresolve.api.schemas.base import APIBaseSchema, PaginatedResponse
from nftresolve.core.models import CollectionMetadata, NftMetadata
from nftresolve.core.types import ContractType


class AttributeResponse(APIBaseSchema):
    """A single NFT trait."""

    trait_type: str
    value: str | int | float
    display_type: str | None = None


class NftResponse(APIBaseSchema):
    """Normalized metadata for one token."""

    chain: str
    contract_address: str
    token_id: str
    name: str | None = None
    description: str | None = None
    image: str | None = None
    image_url: str | None = None
    animation_url: str | None = None
    external_url: str | None = None
    attributes: list[AttributeResponse] | None = None
    token_uri: str | None = None
    raw_metadata: dict[str, Any] | None = None
    cached: bool = False
    last_updated: datetime | None = None

    @classmethod
    def from_record(cls, record: NftMetadata, *, include_raw: bool = False) -> NftResponse:
        return cls(
            chain=record.chain,
            contract_address=record.contract_address,
            token_id=record.token_id,
            name=record.name,
            description=record.description,
            image=record.image,
            image_url=record.image_url,
            animation_url=record.animation_url,
            external_url=record.external_url,
            attributes=(
                [
                    AttributeResponse(
                        trait_type=a.trait_type,
                        value=a.value,
                        display_type=a.display_type,
                    )
                    for a in record.attributes
                ]
                if record.attributes is not None
                else None
            ),
            token_uri=record.token_uri,
            raw_metadata=record.raw_metadata if include_raw else None,
            cached=record.from_cache,
            last_updated=record.updated_at,
        )


class CollectionResponse(APIBaseSchema):
    """Collection-level contract facts."""

    chain: str
    contract_address: str
    name: str | None = None
    symbol: str | None = None
    total_supply: str | None = None
    contract_type: ContractType
    cached: bool = False
    last_updated: datetime | None = None

    @classmethod
    def from_record(cls, record: CollectionMetadata) -> CollectionResponse:
        return cls(
            chain=record.chain,
            contract_address=record.contract_address,
            name=record.name,
            symbol=record.symbol,
            total_supply=record.total_supply,
            contract_type=record.contract_type,
            cached=record.from_cache,
            last_updated=record.updated_at,
        )


class CollectionTokensResponse(PaginatedResponse):
    """Page of cached tokens for a collection."""

    items: list[NftResponse] = Field(default_factory=list)


class HealthResponse(APIBaseSchema):
    """Health check response."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    timestamp: datetime
    services: dict[str, Literal["up", "down"]]


class StatsResponse(APIBaseSchema):
    """Cache statistics."""

    total_nfts: int
    total_collections: int
    nfts_by_chain: dict[str, int]
    redis_healthy: bool


class ChainsResponse(APIBaseSchema):
    """Supported chain identifiers."""

    chains: list[str]
