"""Database layer."""

from .base import (
    Base,
    ChainContractMixin,
    TimestampMixin,
    UUIDPrimaryKeyMixin,
    create_engine,
    create_session_factory,
)
from .models import NftCollectionModel, NftMetadataModel
from .repositories import BaseRepository, CollectionRepository, NftMetadataRepository
from .session import DatabaseManager

__all__ = [
    # Base
    "Base",
    "ChainContractMixin",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "create_engine",
    "create_session_factory",
    # Models
    "NftCollectionModel",
    "NftMetadataModel",
    # Repositories
    "BaseRepository",
    "CollectionRepository",
    "NftMetadataRepository",
    # Session
    "DatabaseManager",
]
