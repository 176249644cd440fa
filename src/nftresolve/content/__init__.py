"""Content-addressed and HTTP document fetching."""

from .resolver import ContentResolver
from .retry import backoff_delay, fetch_with_retry
from .uri import classify, extract_content_path

__all__ = [
    "ContentResolver",
    "backoff_delay",
    "classify",
    "extract_content_path",
    "fetch_with_retry",
]
