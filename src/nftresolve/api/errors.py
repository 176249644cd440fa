"""Mapping of domain errors to HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from nftresolve.api.schemas import APIError, ErrorDetail
from nftresolve.core.exceptions import (
    ClientError,
    ContentUnavailableError,
    MalformedDocumentError,
    NftResolveError,
    NotFoundError,
    UnsupportedChainError,
    UpstreamUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific classes first
ERROR_STATUS: list[tuple[type[NftResolveError], int, str]] = [
    (UnsupportedChainError, status.HTTP_400_BAD_REQUEST, "unsupported_chain"),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "invalid_request"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (ClientError, status.HTTP_502_BAD_GATEWAY, "content_rejected"),
    (MalformedDocumentError, status.HTTP_502_BAD_GATEWAY, "malformed_metadata"),
    (ContentUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "content_unavailable"),
    (UpstreamUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE, "upstream_unavailable"),
]


def status_for(error: NftResolveError) -> tuple[int, str]:
    """HTTP status code and error code for a domain error."""
    for error_type, status_code, code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code, code
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"


async def handle_nftresolve_error(request: Request, exc: NftResolveError) -> JSONResponse:
    status_code, code = status_for(exc)
    if status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")

    body = APIError(error=ErrorDetail(code=code, message=exc.message, details=exc.details or None))
    headers = {"Retry-After": "30"} if status_code == status.HTTP_503_SERVICE_UNAVAILABLE else None
    return JSONResponse(
        status_code=status_code,
        content=body.to_wire(),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NftResolveError, handle_nftresolve_error)
