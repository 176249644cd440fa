"""Starknet chain adapter speaking JSON-RPC over httpx."""

from __future__ import annotations

import asyncio
import itertools
import logging
import re
from typing import Any, Sequence

import httpx
from eth_utils import keccak

from nftresolve.core.exceptions import (
    ContractCallError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from nftresolve.core.models import ContractInfo
from nftresolve.core.types import ContractType, SupportedChain

logger = logging.getLogger(__name__)

MASK_250 = 2**250 - 1
UINT128_MASK = 2**128 - 1
BYTE_ARRAY_WORD_SIZE = 31

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


def get_selector_from_name(name: str) -> str:
    """Entry point selector: starknet_keccak of the function name."""
    return hex(int.from_bytes(keccak(text=name), "big") & MASK_250)


def to_uint256(value: int) -> list[str]:
    """Split an integer into the (low, high) felts of a Cairo Uint256."""
    return [hex(value & UINT128_MASK), hex(value >> 128)]


def from_uint256(felts: Sequence[int]) -> int:
    low, high = felts[0], felts[1]
    return low + (high << 128)


def felt_to_str(felt: int) -> str:
    """Decode a short-string felt: big-endian bytes interpreted as UTF-8."""
    if felt == 0:
        return ""
    raw = felt.to_bytes((felt.bit_length() + 7) // 8, "big")
    return raw.decode("utf-8", errors="replace")


def decode_felt_string(felts: Sequence[str | int]) -> str:
    """
    Decode a string returned by a Cairo contract.

    Handles the encodings seen in the wild:
    - a single short-string felt
    - a length-prefixed felt array (Cairo 0 ``felt*``)
    - a Cairo 1 ``ByteArray``: [n, word_1..word_n, pending_word, pending_len]
    - any other array, decoded felt by felt and concatenated
    """
    values = [int(f, 16) if isinstance(f, str) else int(f) for f in felts]
    if not values:
        return ""
    if len(values) == 1:
        return felt_to_str(values[0])

    count = values[0]
    if len(values) == count + 1:
        return "".join(felt_to_str(v) for v in values[1:])

    if len(values) == count + 3 and values[-1] < BYTE_ARRAY_WORD_SIZE:
        words = values[1 : 1 + count]
        pending, pending_len = values[-2], values[-1]
        data = b"".join(w.to_bytes(BYTE_ARRAY_WORD_SIZE, "big") for w in words)
        if pending_len:
            data += pending.to_bytes(pending_len, "big")
        return data.decode("utf-8", errors="replace")

    return "".join(felt_to_str(v) for v in values)


class StarknetAdapter:
    """
    Chain adapter for Starknet.

    Contracts expose Cairo entry points addressed by selector, return felts
    instead of ABI-encoded bytes, and historically use either camelCase or
    snake_case accessor names, so both are attempted.
    """

    HEALTH_CHECK_TIMEOUT = 5.0
    TOKEN_URI_ENTRY_POINTS = ("tokenURI", "token_uri")
    TOTAL_SUPPLY_ENTRY_POINTS = ("totalSupply", "total_supply")

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.chain = SupportedChain.STARKNET
        self._rpc_url = rpc_url
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        self._ids = itertools.count(1)

    async def _rpc(self, method: str, params: dict[str, Any] | list[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        try:
            response = await self._client.post(self._rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(
                f"starknet node unreachable during {method}: {e}",
                source=str(self.chain),
            ) from e

        if response.status_code >= 400:
            raise UpstreamUnavailableError(
                f"starknet node returned HTTP {response.status_code} for {method}",
                source=str(self.chain),
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamUnavailableError(
                f"starknet node sent a non-JSON reply to {method}",
                source=str(self.chain),
                status_code=response.status_code,
            ) from e
        if not isinstance(body, dict):
            raise UpstreamUnavailableError(
                f"starknet node sent a malformed reply to {method}",
                source=str(self.chain),
            )

        if body.get("error"):
            error = body["error"]
            raise ContractCallError(
                f"{method} failed: {error.get('message', error)}",
                {"chain": str(self.chain), "error": error},
            )
        return body.get("result")

    def _validate_address(self, contract_address: str) -> str:
        if not ADDRESS_PATTERN.match(contract_address):
            raise ValidationError(
                f"Invalid starknet contract address: {contract_address}",
                {"contract_address": contract_address},
            )
        return contract_address

    async def call(
        self,
        contract_address: str,
        entry_point: str,
        calldata: list[str] | None = None,
    ) -> list[int]:
        """Invoke a view entry point and return the result felts as ints."""
        result = await self._rpc(
            "starknet_call",
            {
                "request": {
                    "contract_address": self._validate_address(contract_address),
                    "entry_point_selector": get_selector_from_name(entry_point),
                    "calldata": calldata or [],
                },
                "block_id": "latest",
            },
        )
        try:
            return [int(felt, 16) for felt in result or []]
        except (TypeError, ValueError) as e:
            raise UpstreamUnavailableError(
                f"starknet node returned non-felt values for {entry_point}: {result!r}",
                source=str(self.chain),
            ) from e

    async def is_erc721(self, contract_address: str) -> bool:
        try:
            await self.call(contract_address, "name")
        except ContractCallError as e:
            logger.debug(f"name() probe failed for {contract_address}: {e}")
            return False
        return True

    async def is_erc1155(self, contract_address: str) -> bool:
        return False

    async def get_token_uri(self, contract_address: str, token_id: str) -> str:
        if not await self.is_erc721(contract_address):
            raise NotFoundError(
                f"Contract {contract_address} on starknet is not a recognised NFT contract",
                {"chain": str(self.chain), "contract_address": contract_address},
            )

        try:
            calldata = to_uint256(int(token_id))
        except ValueError as e:
            raise ValidationError(f"Invalid token id: {token_id}") from e

        for entry_point in self.TOKEN_URI_ENTRY_POINTS:
            try:
                felts = await self.call(contract_address, entry_point, calldata)
            except ContractCallError as e:
                logger.debug(f"{entry_point} failed on {contract_address}: {e}")
                continue
            uri = decode_felt_string(felts).strip()
            if uri:
                return uri

        raise NotFoundError(
            f"No token URI for token {token_id} on {contract_address}",
            {"chain": str(self.chain), "entry_points": list(self.TOKEN_URI_ENTRY_POINTS)},
        )

    async def _optional_string(self, contract_address: str, entry_point: str) -> str | None:
        try:
            felts = await self.call(contract_address, entry_point)
        except (ContractCallError, UpstreamUnavailableError) as e:
            logger.debug(f"{entry_point} unavailable on {contract_address}: {e}")
            return None
        return decode_felt_string(felts).strip() or None

    async def _optional_supply(self, contract_address: str) -> str | None:
        for entry_point in self.TOTAL_SUPPLY_ENTRY_POINTS:
            try:
                felts = await self.call(contract_address, entry_point)
            except (ContractCallError, UpstreamUnavailableError) as e:
                logger.debug(f"{entry_point} unavailable on {contract_address}: {e}")
                continue
            if len(felts) >= 2:
                return str(from_uint256(felts))
            if felts:
                return str(felts[0])
        return None

    async def get_contract_metadata(self, contract_address: str) -> ContractInfo:
        if not await self.is_erc721(contract_address):
            return ContractInfo(contract_type=ContractType.UNKNOWN)

        name, symbol, supply = await asyncio.gather(
            self._optional_string(contract_address, "name"),
            self._optional_string(contract_address, "symbol"),
            self._optional_supply(contract_address),
        )
        return ContractInfo(
            name=name,
            symbol=symbol,
            total_supply=supply,
            contract_type=ContractType.ERC721,
        )

    async def check_connection(self) -> bool:
        try:
            await asyncio.wait_for(
                self._rpc("starknet_blockNumber", []),
                timeout=self.HEALTH_CHECK_TIMEOUT,
            )
        except Exception as e:
            logger.warning(f"starknet connection check failed: {e}")
            return False
        return True

    async def close(self) -> None:
        await self._client.aclose()
