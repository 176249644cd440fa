"""NFT metadata repository."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from nftresolve.db.models.nft import NftMetadataModel
from nftresolve.db.repositories.base import BaseRepository

IDENTITY_COLUMNS = ("chain", "contract_address", "token_id")


class NftMetadataRepository(BaseRepository[NftMetadataModel]):
    """Repository for per-token metadata rows."""

    model = NftMetadataModel

    async def get_by_identity(
        self,
        chain: str,
        contract_address: str,
        token_id: str,
    ) -> NftMetadataModel | None:
        """Get a row by its (chain, contract_address, token_id) key."""
        stmt = select(NftMetadataModel).where(
            NftMetadataModel.chain == chain,
            NftMetadataModel.contract_address == contract_address,
            NftMetadataModel.token_id == token_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(self, values: dict[str, Any]) -> NftMetadataModel:
        """
        Insert a row or overwrite every column of the existing one.

        ``values`` must contain the identity columns.
        """
        stmt = pg_insert(NftMetadataModel).values(**values)
        update_columns = {
            key: stmt.excluded[key] for key in values if key not in IDENTITY_COLUMNS
        }
        update_columns["updated_at"] = func.now()
        stmt = (
            stmt.on_conflict_do_update(
                index_elements=list(IDENTITY_COLUMNS),
                set_=update_columns,
            )
            .returning(NftMetadataModel)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete_by_identity(
        self,
        chain: str,
        contract_address: str,
        token_id: str,
    ) -> bool:
        """Delete a row by identity."""
        stmt = delete(NftMetadataModel).where(
            NftMetadataModel.chain == chain,
            NftMetadataModel.contract_address == contract_address,
            NftMetadataModel.token_id == token_id,
        )
        result = await self._session.execute(stmt)
        return result.rowcount > 0

    async def list_by_collection(
        self,
        chain: str,
        contract_address: str,
        *,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[NftMetadataModel]:
        """Cached tokens of a collection, newest first."""
        stmt = (
            select(NftMetadataModel)
            .where(
                NftMetadataModel.chain == chain,
                NftMetadataModel.contract_address == contract_address,
            )
            .order_by(NftMetadataModel.created_at.desc(), NftMetadataModel.token_id)
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return result.scalars().all()

    async def count_by_collection(self, chain: str, contract_address: str) -> int:
        stmt = (
            select(func.count())
            .select_from(NftMetadataModel)
            .where(
                NftMetadataModel.chain == chain,
                NftMetadataModel.contract_address == contract_address,
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def delete_by_collection(self, chain: str, contract_address: str) -> int:
        """Delete every token of a collection, returning the row count."""
        stmt = delete(NftMetadataModel).where(
            NftMetadataModel.chain == chain,
            NftMetadataModel.contract_address == contract_address,
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def count_by_chain(self) -> dict[str, int]:
        """Row counts grouped by chain."""
        stmt = select(NftMetadataModel.chain, func.count()).group_by(NftMetadataModel.chain)
        result = await self._session.execute(stmt)
        return {chain: count for chain, count in result.all()}
