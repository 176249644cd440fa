"""NFT metadata endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from nftresolve.api.dependencies import ResolveService
from nftresolve.api.schemas import APIError, NftResponse

router = APIRouter(prefix="/nft", tags=["nft"])


@router.get(
    "/{chain}/{contract_address}/{token_id}",
    response_model=NftResponse,
    operation_id="getNftMetadata",
    summary="Get NFT metadata",
    description="Resolve normalized metadata for a token, served from cache when available.",
    responses={
        400: {"model": APIError, "description": "Unsupported chain or malformed identity"},
        404: {"model": APIError, "description": "Token or token URI not found"},
        502: {"model": APIError, "description": "Metadata source returned unusable content"},
        503: {"model": APIError, "description": "Chain node or gateways unavailable"},
    },
)
async def get_nft(
    chain: str,
    contract_address: str,
    token_id: str,
    service: ResolveService,
    refresh: bool = Query(default=False, description="Bypass the cache"),
    include_raw: bool = Query(default=False, alias="includeRaw", description="Include the raw document"),
) -> NftResponse:
    """Resolve metadata for a single token."""
    record = await service.resolve_nft(
        chain,
        contract_address,
        token_id,
        force_refresh=refresh,
    )
    return NftResponse.from_record(record, include_raw=include_raw)
