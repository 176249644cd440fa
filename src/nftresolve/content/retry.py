"""Retry with exponential backoff over an abstract fetch primitive."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from nftresolve.core.exceptions import ClientError, UpstreamUnavailableError

logger = logging.getLogger(__name__)

FetchOnce = Callable[[str], Awaitable[bytes]]
Sleep = Callable[[float], Awaitable[None]]

BASE_DELAY_MS = 1000
MAX_DELAY_MS = 5000


def backoff_delay(attempt: int) -> float:
    """Delay in seconds after a failed attempt (0-based)."""
    return min(BASE_DELAY_MS * 2**attempt, MAX_DELAY_MS) / 1000


async def fetch_with_retry(
    fetch_once: FetchOnce,
    url: str,
    attempts: int,
    *,
    sleep: Sleep = asyncio.sleep,
) -> bytes:
    """
    Fetch a URL, retrying transient failures.

    ``fetch_once`` raises ClientError for responses that must not be
    retried (4xx); any other exception counts as a transient failure.
    There is no delay after the final attempt.

    Raises:
        ClientError: the source rejected the request
        UpstreamUnavailableError: every attempt failed
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    last_error: Exception | None = None
    for attempt in range(attempts):
        try:
            return await fetch_once(url)
        except ClientError:
            raise
        except Exception as e:
            last_error = e
            logger.debug(f"Attempt {attempt + 1}/{attempts} for {url} failed: {e}")
            if attempt < attempts - 1:
                await sleep(backoff_delay(attempt))

    raise UpstreamUnavailableError(
        f"Failed to fetch {url} after {attempts} attempts: {last_error}",
        source=url,
        status_code=getattr(last_error, "status_code", None),
    ) from last_error
