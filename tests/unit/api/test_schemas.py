"""Tests for API response schemas."""

from __future__ import annotations

from nftresolve.api.schemas import (
    APIError,
    CollectionResponse,
    CollectionTokensResponse,
    ErrorDetail,
    NftResponse,
)
from nftresolve.core.types import ContractType

# ============================================================================
# Base Schema Tests
# ============================================================================


class TestWireFormat:
    """Tests for camelCase serialization."""

    def test_to_wire_uses_aliases(self):
        error = APIError(error=ErrorDetail(code="not_found", message="missing"))
        assert error.to_wire() == {
            "error": {"code": "not_found", "message": "missing", "details": None}
        }

    def test_accepts_aliases_and_field_names(self):
        page = CollectionTokensResponse.model_validate(
            {"total": 0, "limit": 10, "offset": 0, "hasMore": False}
        )
        assert page == CollectionTokensResponse(total=0, limit=10, offset=0, has_more=False)


# ============================================================================
# NFT Response Tests
# ============================================================================


class TestNftResponse:
    """Tests for NftResponse."""

    def test_from_record(self, sample_nft):
        """Record fields should map one to one, raw metadata hidden by default."""
        response = NftResponse.from_record(sample_nft)

        assert response.chain == "ethereum"
        assert response.token_id == "1"
        assert response.image_url == sample_nft.image_url
        assert [a.trait_type for a in response.attributes] == ["Background", "Level"]
        assert response.raw_metadata is None
        assert response.cached is False
        assert response.last_updated == sample_nft.updated_at

    def test_include_raw(self, sample_nft, sample_document):
        response = NftResponse.from_record(sample_nft, include_raw=True)
        assert response.raw_metadata == sample_document

    def test_cached_flag(self, sample_nft):
        response = NftResponse.from_record(sample_nft.model_copy(update={"from_cache": True}))
        assert response.cached is True

    def test_serializes_camel_case(self, sample_nft):
        data = NftResponse.from_record(sample_nft).model_dump(by_alias=True)

        assert data["contractAddress"] == sample_nft.contract_address
        assert data["tokenId"] == "1"
        assert data["imageUrl"] == sample_nft.image_url
        assert data["attributes"][1] == {"traitType": "Level", "value": 5, "displayType": "number"}
        assert "contract_address" not in data

    def test_no_attributes(self, sample_nft):
        response = NftResponse.from_record(sample_nft.model_copy(update={"attributes": None}))
        assert response.attributes is None


# ============================================================================
# Collection Response Tests
# ============================================================================


class TestCollectionResponse:
    """Tests for collection schemas."""

    def test_from_record(self, sample_collection):
        response = CollectionResponse.from_record(sample_collection)

        assert response.name == "BoredApeYachtClub"
        assert response.total_supply == "10000"
        assert response.contract_type == ContractType.ERC721
        assert response.model_dump(by_alias=True)["contractType"] == "ERC721"

    def test_tokens_page(self, sample_nft):
        page = CollectionTokensResponse(
            items=[NftResponse.from_record(sample_nft)],
            total=3,
            limit=1,
            offset=0,
            has_more=True,
        )
        data = page.model_dump(by_alias=True)

        assert data["hasMore"] is True
        assert data["items"][0]["tokenId"] == "1"


# ============================================================================
# Error Schema Tests
# ============================================================================


class TestAPIError:
    """Tests for the error envelope."""

    def test_envelope(self):
        error = APIError(error=ErrorDetail(code="not_found", message="missing"))
        assert error.model_dump() == {
            "error": {"code": "not_found", "message": "missing", "details": None}
        }
