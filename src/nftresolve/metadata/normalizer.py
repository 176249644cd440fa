"""Parsing and normalization of token metadata documents."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote_to_bytes

from nftresolve.content.uri import classify, is_content_addressed
from nftresolve.core.exceptions import MalformedDocumentError
from nftresolve.core.models import NftAttribute, ParsedMetadata
from nftresolve.core.normalization import coerce_attribute_value, extract_string
from nftresolve.core.types import ContentKind

if TYPE_CHECKING:
    from nftresolve.content.resolver import ContentResolver

logger = logging.getLogger(__name__)


class MetadataNormalizer:
    """
    Turns raw metadata documents into ParsedMetadata records.

    Each field is extracted independently: a bad attribute entry or an
    odd scalar type never fails the whole document. Only input that is
    not a JSON object is rejected.
    """

    def __init__(self, content_resolver: ContentResolver) -> None:
        self._content = content_resolver

    @staticmethod
    def decode_inline(uri: str) -> bytes:
        """
        Decode a ``data:`` URI payload without any network access.

        Supports base64 (``data:application/json;base64,...``) and
        percent-encoded (``data:application/json,...``) payloads.
        """
        value = uri.strip()
        if not value.lower().startswith("data:") or "," not in value:
            raise MalformedDocumentError(f"Not a data URI: {value[:64]}")

        header, payload = value[len("data:") :].split(",", 1)
        if header.lower().endswith(";base64"):
            try:
                return base64.b64decode(payload, validate=False)
            except (binascii.Error, ValueError) as e:
                raise MalformedDocumentError(f"Invalid base64 data URI: {e}") from e
        return unquote_to_bytes(payload)

    async def fetch_document(self, pointer: str) -> bytes:
        """Raw bytes behind a token pointer, dispatched on its kind."""
        kind = classify(pointer)
        if kind == ContentKind.INLINE:
            return self.decode_inline(pointer)
        if kind in (ContentKind.CONTENT_ADDRESSED, ContentKind.HTTP):
            return await self._content.fetch(pointer)
        raise MalformedDocumentError(
            f"Unsupported token URI format: {pointer[:128]}",
            {"token_uri": pointer},
        )

    async def resolve(self, pointer: str) -> ParsedMetadata:
        """Fetch and parse the document behind a pointer."""
        return self.parse(await self.fetch_document(pointer))

    def parse(self, raw: bytes | str) -> ParsedMetadata:
        """
        Parse a raw metadata document.

        Raises:
            MalformedDocumentError: input is not a JSON object
        """
        try:
            text = raw.decode("utf-8-sig") if isinstance(raw, bytes) else raw
            document = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedDocumentError(f"Metadata is not valid JSON: {e}") from e

        if not isinstance(document, dict):
            raise MalformedDocumentError(
                f"Metadata must be a JSON object, got {type(document).__name__}"
            )

        image = extract_string(document.get("image"))
        return ParsedMetadata(
            name=extract_string(document.get("name")),
            description=extract_string(document.get("description")),
            image=image,
            image_url=self._resolve_image_url(image),
            animation_url=extract_string(document.get("animation_url")),
            external_url=extract_string(document.get("external_url")),
            attributes=self._parse_attributes(document.get("attributes")),
            raw_metadata=document,
        )

    def _resolve_image_url(self, image: str | None) -> str | None:
        if image is None:
            return None
        if is_content_addressed(image) and not image.lower().startswith("data:"):
            return self._content.normalize(image)
        return image

    @staticmethod
    def _parse_attributes(value: Any) -> list[NftAttribute] | None:
        """Keep well-formed entries in order; silently drop the rest."""
        if not isinstance(value, list):
            return None

        attributes: list[NftAttribute] = []
        for entry in value:
            if not isinstance(entry, dict):
                continue
            trait_type = extract_string(entry.get("trait_type", entry.get("traitType")))
            trait_value = entry.get("value")
            if trait_type is None or trait_value is None:
                continue
            display_type = extract_string(entry.get("display_type", entry.get("displayType")))
            attributes.append(
                NftAttribute(
                    trait_type=trait_type,
                    value=coerce_attribute_value(trait_value),
                    display_type=display_type,
                )
            )

        return attributes or None

    @staticmethod
    def validate(record: ParsedMetadata) -> bool:
        """True iff the record has a name or an image."""
        return record.is_valid
