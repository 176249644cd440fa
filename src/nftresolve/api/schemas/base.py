"""Base schema configuration for API models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIBaseSchema(BaseModel):
    """
    Base schema for all API models.

    Fields are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict using the camelCase aliases."""
        return self.model_dump(mode="json", by_alias=True)


class PaginatedResponse(APIBaseSchema):
    """Offset/limit page over cached rows."""

    total: int
    limit: int
    offset: int
    has_more: bool


class ErrorDetail(APIBaseSchema):
    """Machine-readable code plus a message and optional context."""

    code: str
    message: str
    details: dict[str, Any] | None = None


class APIError(APIBaseSchema):
    """Standard API error response."""

    error: ErrorDetail
