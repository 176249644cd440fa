"""Chain adapter interface shared by every supported network."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from nftresolve.core.models import ContractInfo
from nftresolve.core.types import SupportedChain


@runtime_checkable
class ChainAdapter(Protocol):
    """
    Read-only access to token and contract facts on one chain.

    Implementations own a single long-lived node connection and are safe
    to share across concurrent resolutions.

    Error contract:
    - get_token_uri raises NotFoundError when the contract implements
      neither supported token standard or has no pointer for the token
    - node transport failures raise UpstreamUnavailableError
    - get_contract_metadata never fails on a single missing field
    """

    chain: SupportedChain

    async def get_token_uri(self, contract_address: str, token_id: str) -> str:
        """Metadata pointer for a token."""
        ...

    async def get_contract_metadata(self, contract_address: str) -> ContractInfo:
        """Best-effort collection facts (name, symbol, supply, standard)."""
        ...

    async def is_erc721(self, contract_address: str) -> bool:
        """Capability probe for single-owner collectibles."""
        ...

    async def is_erc1155(self, contract_address: str) -> bool:
        """Capability probe for multi-supply collectibles."""
        ...

    async def check_connection(self) -> bool:
        """True iff the node answers a chain-height call in time."""
        ...

    async def close(self) -> None:
        """Release the node connection."""
        ...
