"""Hot (Redis) and persistent (PostgreSQL) cache tiers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from nftresolve.cache.keys import CacheKeys
from nftresolve.core.identifiers import CollectionIdentity, TokenIdentity
from nftresolve.core.models import CollectionMetadata, CollectionPage, NftMetadata
from nftresolve.db.repositories.collection import CollectionRepository
from nftresolve.db.repositories.nft import NftMetadataRepository

if TYPE_CHECKING:
    from nftresolve.cache.client import AsyncRedisClient
    from nftresolve.db.models.collection import NftCollectionModel
    from nftresolve.db.models.nft import NftMetadataModel
    from nftresolve.db.session import DatabaseManager

logger = logging.getLogger(__name__)


class CacheTier(Protocol):
    """Storage operations every cache tier provides."""

    async def get_nft(self, identity: TokenIdentity) -> NftMetadata | None: ...

    async def set_nft(self, record: NftMetadata) -> None: ...

    async def delete_nft(self, identity: TokenIdentity) -> None: ...

    async def get_collection(self, identity: CollectionIdentity) -> CollectionMetadata | None: ...

    async def set_collection(self, record: CollectionMetadata) -> None: ...

    async def delete_collection(self, identity: CollectionIdentity) -> int: ...

    async def ping(self) -> bool: ...


class PersistentCacheTier(CacheTier, Protocol):
    """A durable tier that can also page through and count its contents."""

    async def list_collection_nfts(
        self,
        identity: CollectionIdentity,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> CollectionPage: ...

    async def statistics(self) -> dict[str, Any]: ...


class RedisCacheTier:
    """
    Hot tier backed by Redis.

    Every entry expires after the same TTL. NFT keys are also recorded in a
    per-collection index set so a whole collection can be invalidated
    without knowing its token ids.
    """

    def __init__(self, client: AsyncRedisClient, ttl: int = 3600) -> None:
        self._client = client
        self._ttl = ttl

    @property
    def ttl(self) -> int:
        return self._ttl

    async def get_nft(self, identity: TokenIdentity) -> NftMetadata | None:
        data = await self._client.get(
            CacheKeys.nft(identity.chain, identity.contract_address, identity.token_id)
        )
        if not isinstance(data, dict):
            return None
        return NftMetadata.model_validate(data)

    async def set_nft(self, record: NftMetadata) -> None:
        key = CacheKeys.nft(record.chain, record.contract_address, record.token_id)
        payload = record.model_dump(mode="json", exclude={"from_cache"})
        await self._client.set(key, payload, ttl=self._ttl)
        await self._client.add_to_index(
            CacheKeys.collection_index(record.chain, record.contract_address),
            key,
            ttl=self._ttl,
        )

    async def delete_nft(self, identity: TokenIdentity) -> None:
        await self._client.delete(
            CacheKeys.nft(identity.chain, identity.contract_address, identity.token_id)
        )

    async def get_collection(self, identity: CollectionIdentity) -> CollectionMetadata | None:
        data = await self._client.get(CacheKeys.collection(identity.chain, identity.contract_address))
        if not isinstance(data, dict):
            return None
        return CollectionMetadata.model_validate(data)

    async def set_collection(self, record: CollectionMetadata) -> None:
        payload = record.model_dump(mode="json", exclude={"from_cache"})
        await self._client.set(
            CacheKeys.collection(record.chain, record.contract_address),
            payload,
            ttl=self._ttl,
        )

    async def delete_collection(self, identity: CollectionIdentity) -> int:
        """
        Delete the collection entry and every NFT entry of the collection.

        Keys come from the index set plus a SCAN over the key pattern, so
        entries whose index already expired are still removed.
        """
        index_key = CacheKeys.collection_index(identity.chain, identity.contract_address)
        keys = await self._client.members(index_key)
        keys.update(
            await self._client.scan_keys(
                CacheKeys.nft_pattern(identity.chain, identity.contract_address)
            )
        )
        removed = await self._client.delete_many(sorted(keys))
        await self._client.delete_many(
            [index_key, CacheKeys.collection(identity.chain, identity.contract_address)]
        )
        return removed

    async def ping(self) -> bool:
        return await self._client.ping()


def _nft_values(record: NftMetadata) -> dict[str, Any]:
    return {
        "chain": record.chain,
        "contract_address": record.contract_address,
        "token_id": record.token_id,
        "name": record.name,
        "description": record.description,
        "image": record.image,
        "image_url": record.image_url,
        "animation_url": record.animation_url,
        "external_url": record.external_url,
        "attributes": (
            [attribute.model_dump(mode="json") for attribute in record.attributes]
            if record.attributes is not None
            else None
        ),
        "token_uri": record.token_uri,
        "raw_metadata": record.raw_metadata,
    }


def _nft_from_model(row: NftMetadataModel) -> NftMetadata:
    return NftMetadata(
        chain=row.chain,
        contract_address=row.contract_address,
        token_id=row.token_id,
        name=row.name,
        description=row.description,
        image=row.image,
        image_url=row.image_url,
        animation_url=row.animation_url,
        external_url=row.external_url,
        attributes=row.attributes,
        token_uri=row.token_uri,
        raw_metadata=row.raw_metadata or {},
        updated_at=row.updated_at,
    )


def _collection_from_model(row: NftCollectionModel) -> CollectionMetadata:
    return CollectionMetadata(
        chain=row.chain,
        contract_address=row.contract_address,
        name=row.name,
        symbol=row.symbol,
        total_supply=row.total_supply,
        contract_type=row.contract_type,
        updated_at=row.updated_at,
    )


class DatabaseCacheTier:
    """Persistent tier backed by PostgreSQL through the repositories."""

    def __init__(self, database: DatabaseManager) -> None:
        self._db = database

    async def get_nft(self, identity: TokenIdentity) -> NftMetadata | None:
        async with self._db.session() as session:
            row = await NftMetadataRepository(session).get_by_identity(
                identity.chain, identity.contract_address, identity.token_id
            )
            return _nft_from_model(row) if row else None

    async def set_nft(self, record: NftMetadata) -> None:
        async with self._db.session() as session:
            await NftMetadataRepository(session).upsert(_nft_values(record))

    async def delete_nft(self, identity: TokenIdentity) -> None:
        async with self._db.session() as session:
            await NftMetadataRepository(session).delete_by_identity(
                identity.chain, identity.contract_address, identity.token_id
            )

    async def get_collection(self, identity: CollectionIdentity) -> CollectionMetadata | None:
        async with self._db.session() as session:
            row = await CollectionRepository(session).get_by_identity(
                identity.chain, identity.contract_address
            )
            return _collection_from_model(row) if row else None

    async def set_collection(self, record: CollectionMetadata) -> None:
        async with self._db.session() as session:
            await CollectionRepository(session).upsert(
                {
                    "chain": record.chain,
                    "contract_address": record.contract_address,
                    "name": record.name,
                    "symbol": record.symbol,
                    "total_supply": record.total_supply,
                    "contract_type": record.contract_type,
                }
            )

    async def delete_collection(self, identity: CollectionIdentity) -> int:
        """Delete every token row and the collection row; returns token rows removed."""
        async with self._db.session() as session:
            removed = await NftMetadataRepository(session).delete_by_collection(
                identity.chain, identity.contract_address
            )
            await CollectionRepository(session).delete_by_identity(
                identity.chain, identity.contract_address
            )
        logger.info(
            f"Deleted {removed} cached NFTs for {identity.chain}:{identity.contract_address}"
        )
        return removed

    async def list_collection_nfts(
        self,
        identity: CollectionIdentity,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> CollectionPage:
        async with self._db.session() as session:
            repo = NftMetadataRepository(session)
            rows = await repo.list_by_collection(
                identity.chain, identity.contract_address, limit=limit, offset=offset
            )
            total = await repo.count_by_collection(identity.chain, identity.contract_address)
        return CollectionPage(
            items=[_nft_from_model(row) for row in rows],
            total=total,
            limit=limit,
            offset=offset,
        )

    async def statistics(self) -> dict[str, Any]:
        """Totals for NFTs and collections plus NFT counts per chain."""
        async with self._db.session() as session:
            nft_repo = NftMetadataRepository(session)
            total_nfts = await nft_repo.count()
            per_chain = await nft_repo.count_by_chain()
            total_collections = await CollectionRepository(session).count()
        return {
            "total_records": total_nfts,
            "total_collections": total_collections,
            "per_chain_counts": per_chain,
        }

    async def ping(self) -> bool:
        return await self._db.ping()
