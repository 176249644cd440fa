"""Identity value objects with validation and case folding."""

from __future__ import annotations

import re
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CollectionIdentity(BaseModel):
    """A contract on a chain. Chain and address are always lowercase."""

    model_config = ConfigDict(frozen=True)

    chain: str = Field(..., min_length=1, description="Chain identifier, lowercase")
    contract_address: str = Field(..., min_length=1, description="Contract address, lowercase")

    @field_validator("chain", "contract_address", mode="before")
    @classmethod
    def fold_case(cls, v: str) -> str:
        """Strip whitespace and lowercase."""
        return str(v).strip().lower()


class TokenIdentity(CollectionIdentity):
    """A single token: (chain, contract_address, token_id)."""

    token_id: str = Field(..., min_length=1, description="Token id as a decimal string")

    TOKEN_ID_PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"^(0[xX][0-9a-fA-F]+|[0-9]+)$")

    @field_validator("token_id", mode="before")
    @classmethod
    def normalize_token_id(cls, v: str | int) -> str:
        """Accept decimal or 0x-prefixed hex ids; store the decimal form."""
        value = str(v).strip()
        if not cls.TOKEN_ID_PATTERN.match(value):
            raise ValueError(f"Invalid token id: {value!r}")
        if value.lower().startswith("0x"):
            return str(int(value, 16))
        return str(int(value))

    @property
    def collection(self) -> CollectionIdentity:
        return CollectionIdentity(chain=self.chain, contract_address=self.contract_address)

    @property
    def numeric_token_id(self) -> int:
        return int(self.token_id)
