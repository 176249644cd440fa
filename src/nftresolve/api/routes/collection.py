"""Collection endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from nftresolve.api.dependencies import ResolveService
from nftresolve.api.schemas import (
    APIError,
    CollectionResponse,
    CollectionTokensResponse,
    NftResponse,
)

router = APIRouter(prefix="/collection", tags=["collection"])


@router.get(
    "/{chain}/{contract_address}",
    response_model=CollectionResponse,
    operation_id="getCollection",
    summary="Get collection metadata",
    description="Resolve name, symbol, supply and token standard of a contract.",
    responses={
        400: {"model": APIError, "description": "Unsupported chain"},
        503: {"model": APIError, "description": "Chain node unavailable"},
    },
)
async def get_collection(
    chain: str,
    contract_address: str,
    service: ResolveService,
    refresh: bool = Query(default=False, description="Bypass the cache"),
) -> CollectionResponse:
    """Resolve collection-level metadata."""
    record = await service.resolve_collection(chain, contract_address, force_refresh=refresh)
    return CollectionResponse.from_record(record)


@router.get(
    "/{chain}/{contract_address}/tokens",
    response_model=CollectionTokensResponse,
    operation_id="listCollectionTokens",
    summary="List cached tokens",
    description="Page through tokens of a collection that were already resolved and cached.",
    responses={400: {"model": APIError, "description": "Unsupported chain"}},
)
async def list_collection_tokens(
    chain: str,
    contract_address: str,
    service: ResolveService,
    limit: int = Query(default=50, ge=1, le=100, description="Page size"),
    offset: int = Query(default=0, ge=0, description="Items to skip"),
) -> CollectionTokensResponse:
    """List previously cached tokens of a collection."""
    page = await service.list_collection_nfts(
        chain,
        contract_address,
        limit=limit,
        offset=offset,
    )
    return CollectionTokensResponse(
        items=[NftResponse.from_record(item) for item in page.items],
        total=page.total,
        limit=page.limit,
        offset=page.offset,
        has_more=page.offset + len(page.items) < page.total,
    )
