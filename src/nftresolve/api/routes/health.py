"""Health, statistics and discovery endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter

from nftresolve import __version__
from nftresolve.api.dependencies import ResolveService
from nftresolve.api.schemas import ChainsResponse, HealthResponse, StatsResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    operation_id="getHealth",
    summary="Health check",
    description="Check the cache tiers and every chain node.",
)
async def health_check(service: ResolveService) -> HealthResponse:
    """Check API health status."""
    report = await service.health_check()

    services: dict[str, Literal["up", "down"]] = {
        "redis": "up" if report.hot_tier_healthy else "down",
        "database": "up" if report.persistent_tier_healthy else "down",
    }
    for chain, connected in report.chains.items():
        services[chain] = "up" if connected else "down"

    overall_status: Literal["healthy", "degraded", "unhealthy"]
    if not report.persistent_tier_healthy or not any(report.chains.values()):
        overall_status = "unhealthy"
    elif not report.hot_tier_healthy or not all(report.chains.values()):
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        timestamp=report.checked_at,
        services=services,
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    operation_id="getStats",
    summary="Cache statistics",
    description="Counts of cached NFTs and collections.",
)
async def cache_stats(service: ResolveService) -> StatsResponse:
    """Return cache statistics."""
    stats = await service.cache_statistics()
    return StatsResponse(
        total_nfts=stats.total_records,
        total_collections=stats.total_collections,
        nfts_by_chain=stats.per_chain_counts,
        redis_healthy=stats.hot_tier_healthy,
    )


@router.get(
    "/chains",
    response_model=ChainsResponse,
    operation_id="getChains",
    summary="Supported chains",
)
async def supported_chains(service: ResolveService) -> ChainsResponse:
    """List chain identifiers with a configured adapter."""
    return ChainsResponse(chains=service.registry.list_supported())
