"""NFT collection database model."""

from __future__ import annotations

from sqlalchemy import Enum, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from nftresolve.core.types import ContractType
from nftresolve.db.base import Base, ChainContractMixin, TimestampMixin, UUIDPrimaryKeyMixin


class NftCollectionModel(Base, UUIDPrimaryKeyMixin, ChainContractMixin, TimestampMixin):
    """Persistent cache entry for collection-level contract facts."""

    __tablename__ = "nft_collection"
    __table_args__ = (
        UniqueConstraint("chain", "contract_address", name="uq_nft_collection_identity"),
    )

    name: Mapped[str | None] = mapped_column(String(500), nullable=True)
    symbol: Mapped[str | None] = mapped_column(String(100), nullable=True)
    # Decimal string: supply may exceed 64-bit integers
    total_supply: Mapped[str | None] = mapped_column(String(80), nullable=True)
    contract_type: Mapped[ContractType] = mapped_column(
        Enum(ContractType, name="contract_type", create_constraint=True),
        nullable=False,
        default=ContractType.UNKNOWN,
    )

    def __repr__(self) -> str:
        return f"<NftCollection {self.chain}:{self.contract_address}>"
