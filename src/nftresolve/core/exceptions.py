"""Custom exception hierarchy for nftresolve."""

from typing import Any


class NftResolveError(Exception):
    """Base exception for all nftresolve errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(NftResolveError):
    """Input validation failed."""

    pass


class UnsupportedChainError(ValidationError):
    """Requested chain has no registered adapter."""

    def __init__(
        self,
        chain: str,
        supported: list[str],
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Unsupported chain: {chain}. Supported chains: {', '.join(supported)}"
        super().__init__(message, {"chain": chain, "supported": supported, **(details or {})})
        self.chain = chain
        self.supported = supported


class NotFoundError(NftResolveError):
    """Resource not found."""

    pass


class ResolutionError(NftResolveError):
    """Failed to resolve metadata from an upstream source."""

    pass


class ClientError(ResolutionError):
    """Content source answered with a 4xx status. Never retried."""

    def __init__(
        self,
        message: str,
        source: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.source = source
        self.status_code = status_code


class UpstreamUnavailableError(ResolutionError):
    """Blockchain node or content source is unreachable."""

    def __init__(
        self,
        message: str,
        source: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.source = source
        self.status_code = status_code


class ContentUnavailableError(ResolutionError):
    """Every gateway failed for a content-addressed fetch."""

    def __init__(
        self,
        message: str,
        source: str,
        tried: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, {"tried": tried or [], **(details or {})})
        self.source = source
        self.tried = tried or []


class MalformedDocumentError(ResolutionError):
    """Fetched metadata is not a parseable JSON object."""

    pass


class ContractCallError(ResolutionError):
    """A contract call reverted or the entry point does not exist."""

    pass
