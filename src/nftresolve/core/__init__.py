"""Core types, models, and utilities."""

from .exceptions import (
    ClientError,
    ContentUnavailableError,
    ContractCallError,
    MalformedDocumentError,
    NftResolveError,
    NotFoundError,
    ResolutionError,
    UnsupportedChainError,
    UpstreamUnavailableError,
    ValidationError,
)
from .identifiers import CollectionIdentity, TokenIdentity
from .models import (
    CacheHit,
    CacheStatistics,
    CollectionMetadata,
    CollectionPage,
    ContractInfo,
    Gateway,
    HealthReport,
    NftAttribute,
    NftMetadata,
    ParsedMetadata,
)
from .normalization import coerce_attribute_value, coerce_text, extract_string
from .types import CacheSource, ContentKind, ContractType, SupportedChain

__all__ = [
    # Types
    "CacheSource",
    "ContentKind",
    "ContractType",
    "SupportedChain",
    # Identifiers
    "CollectionIdentity",
    "TokenIdentity",
    # Models
    "CacheHit",
    "CacheStatistics",
    "CollectionMetadata",
    "CollectionPage",
    "ContractInfo",
    "Gateway",
    "HealthReport",
    "NftAttribute",
    "NftMetadata",
    "ParsedMetadata",
    # Normalization
    "coerce_attribute_value",
    "coerce_text",
    "extract_string",
    # Exceptions
    "ClientError",
    "ContentUnavailableError",
    "ContractCallError",
    "MalformedDocumentError",
    "NftResolveError",
    "NotFoundError",
    "ResolutionError",
    "UnsupportedChainError",
    "UpstreamUnavailableError",
    "ValidationError",
]
