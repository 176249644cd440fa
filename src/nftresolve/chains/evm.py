"""EVM chain adapter (Ethereum, Polygon) built on web3.py."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from aiohttp import ClientError as AiohttpClientError
from aiohttp import ClientTimeout
from web3 import AsyncWeb3
from web3.exceptions import (
    ProviderConnectionError,
    RequestTimedOut,
    TooManyRequests,
    Web3Exception,
)

from nftresolve.chains.abis import (
    ERC165_ABI,
    ERC721_ABI,
    ERC721_INTERFACE_ID,
    ERC1155_ABI,
    ERC1155_INTERFACE_ID,
)
from nftresolve.core.exceptions import (
    ContractCallError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from nftresolve.core.models import ContractInfo
from nftresolve.core.types import ContractType, SupportedChain

logger = logging.getLogger(__name__)

# Errors meaning the node could not be reached, as opposed to the contract
# rejecting the call.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    AiohttpClientError,
    TimeoutError,
    OSError,
    ProviderConnectionError,
    RequestTimedOut,
    TooManyRequests,
)


def expand_erc1155_uri(uri: str, token_id: int) -> str:
    """Substitute the EIP-1155 ``{id}`` placeholder with the padded hex id."""
    return uri.replace("{id}", f"{token_id:064x}")


class EvmAdapter:
    """
    Chain adapter for EVM networks.

    One instance per chain; Ethereum and Polygon share this implementation
    and differ only by RPC endpoint. Standards are detected with ERC165
    ``supportsInterface`` probes before the matching accessor is called.
    """

    HEALTH_CHECK_TIMEOUT = 5.0

    def __init__(
        self,
        chain: SupportedChain,
        rpc_url: str | None = None,
        *,
        timeout: float = 10.0,
        w3: AsyncWeb3 | None = None,
    ) -> None:
        if w3 is None:
            if not rpc_url:
                raise ValueError(f"RPC URL is required for {chain}")
            w3 = AsyncWeb3(
                AsyncWeb3.AsyncHTTPProvider(
                    rpc_url,
                    request_kwargs={"timeout": ClientTimeout(total=timeout)},
                )
            )
        self.chain = chain
        self._w3 = w3

    def _checksum(self, contract_address: str) -> str:
        try:
            return AsyncWeb3.to_checksum_address(contract_address)
        except ValueError as e:
            raise ValidationError(
                f"Invalid {self.chain} contract address: {contract_address}",
                {"contract_address": contract_address},
            ) from e

    async def _call(
        self,
        contract_address: str,
        abi: list[dict[str, Any]],
        function_name: str,
        *args: Any,
    ) -> Any:
        """Execute a view function, mapping web3 failures to our taxonomy."""
        contract = self._w3.eth.contract(address=self._checksum(contract_address), abi=abi)
        try:
            return await contract.functions[function_name](*args).call()
        except TRANSPORT_ERRORS as e:
            raise UpstreamUnavailableError(
                f"{self.chain} node unreachable during {function_name}(): {e}",
                source=str(self.chain),
            ) from e
        except (Web3Exception, ValueError) as e:
            raise ContractCallError(
                f"{function_name}() failed on {contract_address}: {e}",
                {"chain": str(self.chain), "function": function_name},
            ) from e

    async def _supports_interface(self, contract_address: str, interface_id: bytes) -> bool:
        try:
            result = await self._call(
                contract_address, ERC165_ABI, "supportsInterface", interface_id
            )
        except ContractCallError as e:
            logger.debug(f"Interface probe failed for {contract_address}: {e}")
            return False
        return bool(result)

    async def is_erc721(self, contract_address: str) -> bool:
        return await self._supports_interface(contract_address, ERC721_INTERFACE_ID)

    async def is_erc1155(self, contract_address: str) -> bool:
        return await self._supports_interface(contract_address, ERC1155_INTERFACE_ID)

    async def get_token_uri(self, contract_address: str, token_id: str) -> str:
        try:
            token = int(token_id)
        except ValueError as e:
            raise ValidationError(f"Invalid token id: {token_id}") from e

        if await self.is_erc721(contract_address):
            uri = await self._read_pointer(contract_address, ERC721_ABI, "tokenURI", token)
        elif await self.is_erc1155(contract_address):
            uri = await self._read_pointer(contract_address, ERC1155_ABI, "uri", token)
            uri = expand_erc1155_uri(uri, token)
        else:
            raise NotFoundError(
                f"Contract {contract_address} on {self.chain} is neither ERC721 nor ERC1155",
                {"chain": str(self.chain), "contract_address": contract_address},
            )
        return uri

    async def _read_pointer(
        self,
        contract_address: str,
        abi: list[dict[str, Any]],
        function_name: str,
        token: int,
    ) -> str:
        try:
            uri = await self._call(contract_address, abi, function_name, token)
        except ContractCallError as e:
            raise NotFoundError(
                f"No token URI for token {token} on {contract_address}",
                {"chain": str(self.chain), "reason": e.message},
            ) from e
        if not uri or not str(uri).strip():
            raise NotFoundError(f"Empty token URI for token {token} on {contract_address}")
        return str(uri).strip()

    async def _optional_call(
        self,
        contract_address: str,
        abi: list[dict[str, Any]],
        function_name: str,
    ) -> Any | None:
        try:
            return await self._call(contract_address, abi, function_name)
        except (ContractCallError, UpstreamUnavailableError) as e:
            logger.debug(f"{function_name}() unavailable on {contract_address}: {e}")
            return None

    async def get_contract_metadata(self, contract_address: str) -> ContractInfo:
        is_721, is_1155 = await asyncio.gather(
            self.is_erc721(contract_address),
            self.is_erc1155(contract_address),
        )

        if is_721:
            name, symbol, supply = await asyncio.gather(
                self._optional_call(contract_address, ERC721_ABI, "name"),
                self._optional_call(contract_address, ERC721_ABI, "symbol"),
                self._optional_call(contract_address, ERC721_ABI, "totalSupply"),
            )
            contract_type = ContractType.ERC721
        elif is_1155:
            name, symbol = await asyncio.gather(
                self._optional_call(contract_address, ERC1155_ABI, "name"),
                self._optional_call(contract_address, ERC1155_ABI, "symbol"),
            )
            supply = None
            contract_type = ContractType.ERC1155
        else:
            return ContractInfo(contract_type=ContractType.UNKNOWN)

        return ContractInfo(
            name=name or None,
            symbol=symbol or None,
            total_supply=str(supply) if supply is not None else None,
            contract_type=contract_type,
        )

    async def check_connection(self) -> bool:
        try:
            await asyncio.wait_for(
                self._w3.eth.get_block_number(),
                timeout=self.HEALTH_CHECK_TIMEOUT,
            )
        except Exception as e:
            logger.warning(f"{self.chain} connection check failed: {e}")
            return False
        return True

    async def close(self) -> None:
        await self._w3.provider.disconnect()
