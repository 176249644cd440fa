"""API schema definitions."""

from nftresolve.api.schemas.base import (
    APIBaseSchema,
    APIError,
    ErrorDetail,
    PaginatedResponse,
)
from nftresolve.api.schemas.responses import (
    AttributeResponse,
    ChainsResponse,
    CollectionResponse,
    CollectionTokensResponse,
    HealthResponse,
    NftResponse,
    StatsResponse,
)

__all__ = [
    # Base
    "APIBaseSchema",
    "APIError",
    "ErrorDetail",
    "PaginatedResponse",
    # Responses
    "AttributeResponse",
    "ChainsResponse",
    "CollectionResponse",
    "CollectionTokensResponse",
    "HealthResponse",
    "NftResponse",
    "StatsResponse",
]
