"""FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Request

if TYPE_CHECKING:
    from nftresolve.services.resolution import ResolutionService


async def get_resolution_service(request: Request) -> ResolutionService:
    """Get the long-lived resolution service from app state."""
    return request.app.state.resolution_service


# Type aliases for cleaner dependency injection
ResolveService = Annotated["ResolutionService", Depends(get_resolution_service)]
