"""Tests for retry with exponential backoff."""

from __future__ import annotations

import pytest

from nftresolve.content.retry import backoff_delay, fetch_with_retry
from nftresolve.core.exceptions import ClientError, UpstreamUnavailableError


class FlakyFetch:
    """Fetch primitive failing a fixed number of times before succeeding."""

    def __init__(self, failures: list[Exception], body: bytes = b"{}") -> None:
        self.failures = list(failures)
        self.body = body
        self.calls: list[str] = []

    async def __call__(self, url: str) -> bytes:
        self.calls.append(url)
        if self.failures:
            raise self.failures.pop(0)
        return self.body


class TestBackoffDelay:
    """Tests for backoff_delay."""

    @pytest.mark.parametrize(
        "attempt,expected",
        [(0, 1.0), (1, 2.0), (2, 4.0), (3, 5.0), (10, 5.0)],
    )
    def test_doubles_and_caps(self, attempt, expected):
        assert backoff_delay(attempt) == expected


class TestFetchWithRetry:
    """Tests for fetch_with_retry."""

    async def test_first_attempt_succeeds(self, recording_sleep):
        fetch = FlakyFetch([], body=b"ok")
        result = await fetch_with_retry(fetch, "https://x.test", 3, sleep=recording_sleep)

        assert result == b"ok"
        assert len(fetch.calls) == 1
        assert recording_sleep.delays == []

    async def test_retries_transient_failure(self, recording_sleep):
        fetch = FlakyFetch([ConnectionError("reset")], body=b"ok")
        result = await fetch_with_retry(fetch, "https://x.test", 3, sleep=recording_sleep)

        assert result == b"ok"
        assert len(fetch.calls) == 2
        assert recording_sleep.delays == [1.0]

    async def test_client_error_not_retried(self, recording_sleep):
        fetch = FlakyFetch([ClientError("404", source="https://x.test", status_code=404)])

        with pytest.raises(ClientError):
            await fetch_with_retry(fetch, "https://x.test", 3, sleep=recording_sleep)

        assert len(fetch.calls) == 1
        assert recording_sleep.delays == []

    async def test_exhausted_raises_upstream_unavailable(self, recording_sleep):
        """No sleep should follow the final attempt."""
        last = UpstreamUnavailableError("503", source="https://x.test", status_code=503)
        fetch = FlakyFetch([ConnectionError("a"), TimeoutError("b"), last])

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await fetch_with_retry(fetch, "https://x.test", 3, sleep=recording_sleep)

        assert len(fetch.calls) == 3
        assert recording_sleep.delays == [1.0, 2.0]
        assert exc_info.value.status_code == 503
        assert exc_info.value.__cause__ is last

    async def test_attempts_must_be_positive(self, recording_sleep):
        with pytest.raises(ValueError):
            await fetch_with_retry(FlakyFetch([]), "https://x.test", 0, sleep=recording_sleep)
