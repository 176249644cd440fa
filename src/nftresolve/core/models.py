"""Domain models for NFT and collection metadata."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, JsonValue

from .identifiers import CollectionIdentity, TokenIdentity
from .types import CacheSource, ContractType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Gateway(BaseModel):
    """An HTTP endpoint serving content-addressed data by hash."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Human readable gateway name")
    base_url: str = Field(..., description="Gateway origin, without trailing slash")
    priority: int = Field(..., description="Lower values are tried first")

    def url_for(self, content_path: str) -> str:
        """Dereferenceable URL for a hash (plus optional sub-path)."""
        return f"{self.base_url.rstrip('/')}/ipfs/{content_path}"


class NftAttribute(BaseModel):
    """A single trait from the metadata document."""

    model_config = ConfigDict(frozen=True)

    trait_type: str = Field(..., description="Trait name")
    value: str | int | float = Field(..., description="Trait value, string or number")
    display_type: str | None = Field(default=None, description="Optional rendering hint")


class ParsedMetadata(BaseModel):
    """Normalized content of a token metadata document."""

    name: str | None = Field(default=None, description="Token name")
    description: str | None = Field(default=None, description="Token description")
    image: str | None = Field(default=None, description="Image URI as found in the document")
    image_url: str | None = Field(default=None, description="Dereferenceable image URL")
    animation_url: str | None = Field(default=None, description="Animation/media URL")
    external_url: str | None = Field(default=None, description="External project URL")
    attributes: list[NftAttribute] | None = Field(default=None, description="Ordered traits")
    raw_metadata: dict[str, JsonValue] = Field(
        default_factory=dict, description="Original document, verbatim"
    )

    @property
    def is_valid(self) -> bool:
        """A record is usable when it has at least a name or an image."""
        return self.name is not None or self.image is not None


class NftMetadata(ParsedMetadata):
    """Normalized metadata record for a single token."""

    chain: str = Field(..., description="Chain identifier, lowercase")
    contract_address: str = Field(..., description="Contract address, lowercase")
    token_id: str = Field(..., description="Token id as a decimal string")
    token_uri: str | None = Field(default=None, description="Pointer returned by the contract")
    from_cache: bool = Field(default=False, description="Served from a cache tier")
    updated_at: datetime | None = Field(default=None, description="When the record was resolved")

    @classmethod
    def from_parsed(
        cls,
        identity: TokenIdentity,
        token_uri: str | None,
        parsed: ParsedMetadata,
        *,
        updated_at: datetime | None = None,
    ) -> NftMetadata:
        """Attach identity fields to a parsed document."""
        return cls(
            **parsed.model_dump(),
            chain=identity.chain,
            contract_address=identity.contract_address,
            token_id=identity.token_id,
            token_uri=token_uri,
            updated_at=updated_at or utcnow(),
        )

    @property
    def identity(self) -> TokenIdentity:
        return TokenIdentity(
            chain=self.chain,
            contract_address=self.contract_address,
            token_id=self.token_id,
        )

    def content_fields(self) -> dict[str, Any]:
        """Fields compared for equality across cache reads."""
        return self.model_dump(exclude={"from_cache"})


class ContractInfo(BaseModel):
    """Contract-level facts read from a chain adapter."""

    name: str | None = None
    symbol: str | None = None
    total_supply: str | None = Field(default=None, description="Decimal string")
    contract_type: ContractType = ContractType.UNKNOWN


class CollectionMetadata(ContractInfo):
    """Collection record as stored in the cache tiers."""

    chain: str = Field(..., description="Chain identifier, lowercase")
    contract_address: str = Field(..., description="Contract address, lowercase")
    from_cache: bool = Field(default=False, description="Served from a cache tier")
    updated_at: datetime | None = Field(default=None, description="When the record was resolved")

    @classmethod
    def from_contract_info(
        cls,
        identity: CollectionIdentity,
        info: ContractInfo,
        *,
        updated_at: datetime | None = None,
    ) -> CollectionMetadata:
        return cls(
            **info.model_dump(),
            chain=identity.chain,
            contract_address=identity.contract_address,
            updated_at=updated_at or utcnow(),
        )

    @property
    def identity(self) -> CollectionIdentity:
        return CollectionIdentity(chain=self.chain, contract_address=self.contract_address)


RecordT = TypeVar("RecordT", NftMetadata, CollectionMetadata)


@dataclass(frozen=True)
class CacheHit(Generic[RecordT]):
    """A cached record together with the tier that produced it."""

    record: RecordT
    source: CacheSource


class CollectionPage(BaseModel):
    """Page of cached NFTs for a collection."""

    items: list[NftMetadata] = Field(default_factory=list)
    total: int = 0
    limit: int = 50
    offset: int = 0


class CacheStatistics(BaseModel):
    """Aggregate counts across the cache tiers."""

    per_chain_counts: dict[str, int] = Field(default_factory=dict)
    total_records: int = 0
    total_collections: int = 0
    hot_tier_healthy: bool = False


class HealthReport(BaseModel):
    """Liveness of the cache tiers and every chain adapter."""

    hot_tier_healthy: bool = False
    persistent_tier_healthy: bool = False
    chains: dict[str, bool] = Field(default_factory=dict)
    checked_at: datetime = Field(default_factory=utcnow)

    @property
    def healthy(self) -> bool:
        return self.persistent_tier_healthy and all(self.chains.values())
