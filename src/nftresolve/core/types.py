"""Core enums and type definitions."""

from enum import StrEnum


class SupportedChain(StrEnum):
    """Blockchain networks with a registered adapter."""

    ETHEREUM = "ethereum"
    POLYGON = "polygon"
    STARKNET = "starknet"


class ContractType(StrEnum):
    """Token standard implemented by a collection contract."""

    ERC721 = "ERC721"
    ERC1155 = "ERC1155"
    UNKNOWN = "UNKNOWN"


class ContentKind(StrEnum):
    """Classification of a token metadata pointer."""

    CONTENT_ADDRESSED = "content_addressed"
    HTTP = "http"
    INLINE = "inline"
    UNRECOGNIZED = "unrecognized"


class CacheSource(StrEnum):
    """Tier a cached record was served from."""

    REDIS = "redis"
    DATABASE = "database"
    NONE = "none"
