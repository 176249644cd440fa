"""Content resolver: pointer normalization and fetch with gateway fallback."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import ClassVar

import httpx

from nftresolve.content.retry import Sleep, fetch_with_retry
from nftresolve.content.uri import (
    IPFS_PATH_MARKER,
    IPFS_SCHEME,
    extract_content_path,
    is_http,
)
from nftresolve.core.exceptions import (
    ClientError,
    ContentUnavailableError,
    UpstreamUnavailableError,
    ValidationError,
)
from nftresolve.core.models import Gateway

logger = logging.getLogger(__name__)


class ContentResolver:
    """
    Fetches metadata documents from IPFS gateways and plain HTTP.

    Gateways are tried one at a time in priority order, each with a small
    retry budget, so a single dead gateway costs at most two attempts
    before the next one is tried.
    """

    MAX_RETRIES: ClassVar[int] = 3
    GATEWAY_RETRIES: ClassVar[int] = 2
    DEFAULT_TIMEOUT: ClassVar[float] = 5.0

    def __init__(
        self,
        gateways: Sequence[Gateway],
        timeout: float = DEFAULT_TIMEOUT,
        *,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if not gateways:
            raise ValueError("At least one gateway is required")
        self._gateways = tuple(sorted(gateways, key=lambda g: g.priority))
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep

    @property
    def gateways(self) -> tuple[Gateway, ...]:
        return self._gateways

    @property
    def primary_gateway(self) -> Gateway:
        return self._gateways[0]

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=True,
                headers={"Accept": "application/json, */*"},
            )
        return self._client

    def normalize(self, uri: str) -> str:
        """
        Rewrite a pointer to a dereferenceable URL on the primary gateway.

        HTTP(S) URLs pass through unchanged.
        """
        value = uri.strip() if uri else ""
        if not value:
            raise ValidationError("Cannot normalize an empty URI")
        if is_http(value):
            return value

        base_url = self.primary_gateway.base_url.rstrip("/")
        if value.lower().startswith(IPFS_SCHEME):
            path = value[len(IPFS_SCHEME) :]
            # ipfs://ipfs/<hash> is a common malformed variant
            if path.startswith("ipfs/"):
                path = path[len("ipfs/") :]
            return f"{base_url}/ipfs/{path}"
        if value.startswith(IPFS_PATH_MARKER):
            return f"{base_url}{value}"

        content_path = extract_content_path(value)
        return f"{base_url}/ipfs/{content_path or value}"

    async def _fetch_once(self, url: str) -> bytes:
        """Single GET. 4xx is terminal, everything else may be retried."""
        response = await self._get_client().get(url)
        if 400 <= response.status_code < 500:
            raise ClientError(
                f"Content source returned HTTP {response.status_code} for {url}",
                source=url,
                status_code=response.status_code,
            )
        if response.status_code >= 500:
            raise UpstreamUnavailableError(
                f"Content source returned HTTP {response.status_code} for {url}",
                source=url,
                status_code=response.status_code,
            )
        return response.content

    async def fetch(self, uri: str) -> bytes:
        """
        Fetch the document behind a pointer.

        Raises:
            ClientError: a direct HTTP source answered 4xx
            UpstreamUnavailableError: a direct HTTP source kept failing
            ContentUnavailableError: every gateway failed for a hash
        """
        content_path = extract_content_path(uri)
        if content_path is None:
            return await fetch_with_retry(
                self._fetch_once, uri.strip(), self.MAX_RETRIES, sleep=self._sleep
            )

        tried: list[str] = []
        for gateway in self._gateways:
            url = gateway.url_for(content_path)
            tried.append(gateway.name)
            try:
                body = await fetch_with_retry(
                    self._fetch_once, url, self.GATEWAY_RETRIES, sleep=self._sleep
                )
            except (ClientError, UpstreamUnavailableError) as e:
                logger.warning(f"Gateway {gateway.name} failed for {content_path}: {e.message}")
                continue
            logger.debug(f"Fetched {content_path} from {gateway.name}")
            return body

        raise ContentUnavailableError(
            f"All gateways failed for {content_path}",
            source=uri,
            tried=tried,
        )

    async def close(self) -> None:
        """Close the HTTP client if this resolver created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> ContentResolver:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
