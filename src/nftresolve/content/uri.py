"""Classification of token metadata pointers."""

import re

from nftresolve.core.types import ContentKind

IPFS_SCHEME = "ipfs://"
IPFS_PATH_MARKER = "/ipfs/"

# CIDv0 (base58btc, "Qm" prefix) or CIDv1 (base32, "baf" prefix)
IPFS_HASH_PATTERN = re.compile(r"(Qm[1-9A-HJ-NP-Za-km-z]{44,}|baf[0-9A-Za-z]{50,})")


def is_inline(uri: str) -> bool:
    return uri.strip().lower().startswith("data:")


def is_http(uri: str) -> bool:
    return uri.strip().lower().startswith(("http://", "https://"))


def is_content_addressed(uri: str) -> bool:
    """Scheme prefix, gateway path marker, or a bare hash anywhere in the string."""
    value = uri.strip()
    return (
        value.lower().startswith(IPFS_SCHEME)
        or IPFS_PATH_MARKER in value
        or IPFS_HASH_PATTERN.search(value) is not None
    )


def classify(uri: str) -> ContentKind:
    """
    Classify a pointer.

    Inline documents are checked first so base64 payloads are never
    mistaken for content hashes.
    """
    if not uri or not uri.strip():
        return ContentKind.UNRECOGNIZED
    if is_inline(uri):
        return ContentKind.INLINE
    if is_content_addressed(uri):
        return ContentKind.CONTENT_ADDRESSED
    if is_http(uri):
        return ContentKind.HTTP
    return ContentKind.UNRECOGNIZED


def extract_content_path(uri: str) -> str | None:
    """
    Hash plus any sub-path after it, e.g. ``QmX/1.json``.

    Directory-style collections put one file per token under a single
    hash, so the sub-path must survive the rewrite onto a gateway.
    """
    if is_inline(uri):
        return None
    match = IPFS_HASH_PATTERN.search(uri)
    if match is None:
        return None
    rest = uri[match.end() :].split("?", 1)[0].split("#", 1)[0]
    return match.group(1) + rest.rstrip()
