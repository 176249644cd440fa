"""NFT metadata database model."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from nftresolve.db.base import Base, ChainContractMixin, TimestampMixin, UUIDPrimaryKeyMixin


class NftMetadataModel(Base, UUIDPrimaryKeyMixin, ChainContractMixin, TimestampMixin):
    """
    Persistent cache entry for one token.

    Rows are overwritten wholesale on refresh; the full source document
    is kept in raw_metadata next to the normalized columns.
    """

    __tablename__ = "nft_metadata"
    __table_args__ = (
        UniqueConstraint("chain", "contract_address", "token_id", name="uq_nft_metadata_identity"),
        Index("ix_nft_metadata_collection", "chain", "contract_address"),
        Index("ix_nft_metadata_chain", "chain"),
    )

    # uint256 has up to 78 decimal digits
    token_id: Mapped[str] = mapped_column(String(80), nullable=False)

    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    animation_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    external_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    attributes: Mapped[list[dict[str, Any]] | None] = mapped_column(JSONB, nullable=True)
    token_uri: Mapped[str | None] = mapped_column(Text, nullable=True)
    raw_metadata: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        default=dict,
        server_default="{}",
    )

    def __repr__(self) -> str:
        return f"<NftMetadata {self.chain}:{self.contract_address}:{self.token_id}>"
