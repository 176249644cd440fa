"""nftresolve - NFT metadata resolution across Ethereum, Polygon and Starknet."""

from nftresolve.client import NftResolveClient, resolve_nft
from nftresolve.core.exceptions import (
    ClientError,
    ContentUnavailableError,
    MalformedDocumentError,
    NftResolveError,
    NotFoundError,
    UnsupportedChainError,
    UpstreamUnavailableError,
    ValidationError,
)
from nftresolve.core.identifiers import CollectionIdentity, TokenIdentity
from nftresolve.core.models import (
    CacheStatistics,
    CollectionMetadata,
    HealthReport,
    NftAttribute,
    NftMetadata,
)
from nftresolve.core.types import ContractType, SupportedChain

__version__ = "0.1.0"
__all__ = [
    # Client
    "NftResolveClient",
    "resolve_nft",
    # Types
    "ContractType",
    "SupportedChain",
    # Identifiers
    "CollectionIdentity",
    "TokenIdentity",
    # Models
    "CacheStatistics",
    "CollectionMetadata",
    "HealthReport",
    "NftAttribute",
    "NftMetadata",
    # Errors
    "ClientError",
    "ContentUnavailableError",
    "MalformedDocumentError",
    "NftResolveError",
    "NotFoundError",
    "UnsupportedChainError",
    "UpstreamUnavailableError",
    "ValidationError",
    # Version
    "__version__",
]
