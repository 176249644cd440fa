"""Initial schema for nftresolve.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _identity_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            primary_key=True,
        ),
        sa.Column("chain", sa.String(32), nullable=False),
        sa.Column("contract_address", sa.String(128), nullable=False),
    ]


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # Create enums
    op.execute("""
        CREATE TYPE contract_type AS ENUM ('ERC721', 'ERC1155', 'UNKNOWN');
    """)

    # Create nft_metadata table
    op.create_table(
        "nft_metadata",
        *_identity_columns(),
        sa.Column("token_id", sa.String(80), nullable=False),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image", sa.Text, nullable=True),
        sa.Column("image_url", sa.Text, nullable=True),
        sa.Column("animation_url", sa.Text, nullable=True),
        sa.Column("external_url", sa.Text, nullable=True),
        sa.Column("attributes", postgresql.JSONB, nullable=True),
        sa.Column("token_uri", sa.Text, nullable=True),
        sa.Column(
            "raw_metadata",
            postgresql.JSONB,
            server_default="{}",
            nullable=False,
        ),
        *_timestamp_columns(),
        sa.UniqueConstraint(
            "chain", "contract_address", "token_id", name="uq_nft_metadata_identity"
        ),
    )
    op.create_index(
        "ix_nft_metadata_collection", "nft_metadata", ["chain", "contract_address"]
    )
    op.create_index("ix_nft_metadata_chain", "nft_metadata", ["chain"])

    # Create nft_collection table
    op.create_table(
        "nft_collection",
        *_identity_columns(),
        sa.Column("name", sa.String(500), nullable=True),
        sa.Column("symbol", sa.String(100), nullable=True),
        sa.Column("total_supply", sa.String(80), nullable=True),
        sa.Column(
            "contract_type",
            postgresql.ENUM(name="contract_type", create_type=False),
            server_default="UNKNOWN",
            nullable=False,
        ),
        *_timestamp_columns(),
        sa.UniqueConstraint("chain", "contract_address", name="uq_nft_collection_identity"),
    )


def downgrade() -> None:
    op.drop_table("nft_collection")
    op.drop_index("ix_nft_metadata_chain", table_name="nft_metadata")
    op.drop_index("ix_nft_metadata_collection", table_name="nft_metadata")
    op.drop_table("nft_metadata")
    op.execute("DROP TYPE contract_type")
