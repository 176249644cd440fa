"""NFT collection repository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from nftresolve.db.models.collection import NftCollectionModel
from nftresolve.db.repositories.base import BaseRepository


class CollectionRepository(BaseRepository[NftCollectionModel]):
    """Repository for collection-level rows."""

    model = NftCollectionModel

    async def get_by_identity(self, chain: str, contract_address: str) -> NftCollectionModel | None:
        stmt = select(NftCollectionModel).where(
            NftCollectionModel.chain == chain,
            NftCollectionModel.contract_address == contract_address,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, values: dict[str, Any]) -> NftCollectionModel:
        """Insert or overwrite a collection row."""
        stmt = pg_insert(NftCollectionModel).values(**values)
        update_columns = {
            key: stmt.excluded[key]
            for key in values
            if key not in ("chain", "contract_address")
        }
        update_columns["updated_at"] = func.now()
        stmt = (
            stmt.on_conflict_do_update(
                index_elements=["chain", "contract_address"],
                set_=update_columns,
            )
            .returning(NftCollectionModel)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete_by_identity(self, chain: str, contract_address: str) -> bool:
        stmt = delete(NftCollectionModel).where(
            NftCollectionModel.chain == chain,
            NftCollectionModel.contract_address == contract_address,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0
