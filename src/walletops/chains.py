"""
Static chain table.

Maps an EVM chain ID to the Bebop network name, the block explorer
transaction URL prefix and (where known) a public JSON-RPC endpoint.
Adding a chain means adding a row here.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from .errors import UnsupportedChainError

DEFAULT_EXPLORER_TX_URL = "https://etherscan.io/tx/"


@dataclass(frozen=True)
class ChainInfo:
    chain_id: int
    venue_name: str
    explorer_tx_url: str
    rpc_url: Optional[str] = None

    @property
    def caip2(self) -> str:
        return to_caip2(self.chain_id)


CHAINS: Mapping[int, ChainInfo] = MappingProxyType(
    {
        1: ChainInfo(1, "ethereum", "https://etherscan.io/tx/", "https://eth.llamarpc.com"),
        8453: ChainInfo(8453, "base", "https://basescan.org/tx/", "https://mainnet.base.org"),
        137: ChainInfo(137, "polygon", "https://polygonscan.com/tx/"),
        42161: ChainInfo(42161, "arbitrum", "https://arbiscan.io/tx/"),
        10: ChainInfo(10, "optimism", "https://optimistic.etherscan.io/tx/"),
        11155111: ChainInfo(
            11155111, "sepolia", "https://sepolia.etherscan.io/tx/", "https://rpc.sepolia.org"
        ),
    }
)

SEPOLIA_CHAIN_ID = 11155111


def supported_chain_ids() -> list[int]:
    return list(CHAINS)


def get_chain(chain_id: int) -> ChainInfo:
    """
    Look up a supported chain.

    Raises:
        UnsupportedChainError: If the chain ID is not in the table
    """
    try:
        return CHAINS[chain_id]
    except (KeyError, TypeError):
        raise UnsupportedChainError(chain_id, supported_chain_ids()) from None


def venue_network_name(chain_id: int) -> str:
    """Bebop network name for a chain ID (e.g. 8453 -> "base")."""
    return get_chain(chain_id).venue_name


def to_caip2(chain_id: int) -> str:
    """Namespaced chain reference, e.g. 8453 -> "eip155:8453"."""
    return f"eip155:{chain_id}"


def from_caip2(caip2: str) -> int:
    namespace, _, reference = caip2.partition(":")
    if namespace != "eip155" or not reference.isdigit():
        raise ValueError(f"Not an eip155 CAIP-2 identifier: {caip2}")
    return int(reference)


def explorer_url(chain_id: int, tx_hash: str) -> str:
    """Explorer link for a transaction; unknown chains fall back to Etherscan."""
    info = CHAINS.get(chain_id)
    prefix = info.explorer_tx_url if info else DEFAULT_EXPLORER_TX_URL
    return prefix + tx_hash
