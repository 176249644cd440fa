"""Cache key builders for consistent key formatting."""

from nftresolve.core.normalization import normalize_address


class CacheKeys:
    """Cache key builders. Chain and address are always lowercased."""

    PREFIX = "nftresolve"

    @classmethod
    def nft(cls, chain: str, contract_address: str, token_id: str) -> str:
        """Key for a single token's metadata."""
        return f"{cls.PREFIX}:nft:{chain.lower()}:{normalize_address(contract_address)}:{token_id}"

    @classmethod
    def collection(cls, chain: str, contract_address: str) -> str:
        """Key for collection-level metadata."""
        return f"{cls.PREFIX}:collection:{chain.lower()}:{normalize_address(contract_address)}"

    @classmethod
    def collection_index(cls, chain: str, contract_address: str) -> str:
        """Key of the set holding every cached NFT key of a collection."""
        return f"{cls.PREFIX}:index:{chain.lower()}:{normalize_address(contract_address)}"

    @classmethod
    def nft_pattern(cls, chain: str, contract_address: str) -> str:
        """Glob pattern matching every NFT key of a collection."""
        return f"{cls.PREFIX}:nft:{chain.lower()}:{normalize_address(contract_address)}:*"
