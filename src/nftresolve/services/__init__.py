"""Service layer for orchestrating resolution."""

from nftresolve.services.factory import ResolutionStack, build_resolution_stack
from nftresolve.services.resolution import ResolutionService

__all__ = [
    "ResolutionService",
    "ResolutionStack",
    "build_resolution_stack",
]
