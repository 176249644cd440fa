"""Database repositories."""

from .base import BaseRepository
from .collection import CollectionRepository
from .nft import NftMetadataRepository

__all__ = [
    "BaseRepository",
    "CollectionRepository",
    "NftMetadataRepository",
]
