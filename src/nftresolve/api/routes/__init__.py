"""API route modules."""

from nftresolve.api.routes.collection import router as collection_router
from nftresolve.api.routes.health import router as health_router
from nftresolve.api.routes.nft import router as nft_router

__all__ = [
    "collection_router",
    "health_router",
    "nft_router",
]
