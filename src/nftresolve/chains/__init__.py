"""Chain adapters and the adapter registry."""

from .base import ChainAdapter
from .evm import EvmAdapter
from .registry import AdapterRegistry
from .starknet import StarknetAdapter, decode_felt_string

__all__ = [
    "AdapterRegistry",
    "ChainAdapter",
    "EvmAdapter",
    "StarknetAdapter",
    "decode_felt_string",
]
