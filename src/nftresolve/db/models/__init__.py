"""Database models."""

from .collection import NftCollectionModel
from .nft import NftMetadataModel

__all__ = [
    "NftCollectionModel",
    "NftMetadataModel",
]
