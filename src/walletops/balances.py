"""
Wallet balance queries through the custody service.

Single queries return the raw Balance rows; ``holdings_by_asset`` sums one
asset across every chain it is known to live on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional, Union

from .custody.models import Balance
from .custody.privy import PrivyClient

SUPPORTED_ASSETS = ("eth", "usdc", "usdt", "pol", "sol")

DEFAULT_CHAINS = ("ethereum", "base", "polygon", "arbitrum", "optimism")

CHAINS_BY_ASSET: dict[str, tuple[str, ...]] = {
    "eth": ("ethereum", "base", "arbitrum", "optimism", "linea", "zksync_era", "polygon", "sepolia"),
    "usdc": ("ethereum", "base", "arbitrum", "optimism", "linea", "polygon", "sepolia"),
    "usdt": ("ethereum", "polygon", "arbitrum", "optimism", "sepolia"),
    "pol": ("polygon",),
    "sol": ("solana", "sepolia"),
}

FALLBACK_CHAINS = ("ethereum", "base", "polygon")


def get_wallet_balance(
    client: PrivyClient,
    wallet_id: str,
    asset: Union[str, Iterable[str]] = "eth",
    chain: Union[str, Iterable[str]] = "base",
    include_currency: bool = True,
) -> list[Balance]:
    return client.get_balances(wallet_id, asset, chain, include_currency=include_currency)


def get_eth_balance(client: PrivyClient, wallet_id: str, chain: str = "base") -> list[Balance]:
    return get_wallet_balance(client, wallet_id, "eth", chain)


def get_usdc_balance(client: PrivyClient, wallet_id: str, chain: str = "base") -> list[Balance]:
    return get_wallet_balance(client, wallet_id, "usdc", chain)


def get_all_balances(
    client: PrivyClient, wallet_id: str, chains: Optional[Iterable[str]] = None
) -> list[Balance]:
    """ETH, USDC and USDT across the given chains (default: the main EVM chains)."""
    return get_wallet_balance(
        client, wallet_id, ["eth", "usdc", "usdt"], list(chains or DEFAULT_CHAINS)
    )


@dataclass(frozen=True)
class ChainHolding:
    raw: str
    decimals: int
    amount: Decimal
    usd: Decimal


@dataclass(frozen=True)
class AssetHoldings:
    asset: str
    balances: list[Balance]
    by_chain: dict[str, ChainHolding] = field(default_factory=dict)

    @property
    def total_amount(self) -> Decimal:
        return sum((h.amount for h in self.by_chain.values()), Decimal("0"))

    @property
    def total_usd(self) -> Decimal:
        return sum((h.usd for h in self.by_chain.values()), Decimal("0"))

    @property
    def chain_count(self) -> int:
        return len(self.by_chain)


def holdings_by_asset(client: PrivyClient, wallet_id: str, asset: str) -> AssetHoldings:
    """Balance of one asset on every chain it is listed for, with totals."""
    asset = asset.lower()
    chains = CHAINS_BY_ASSET.get(asset, FALLBACK_CHAINS)
    balances = client.get_balances(wallet_id, asset, list(chains), include_currency=True)

    by_chain: dict[str, ChainHolding] = {}
    for balance in balances:
        by_chain[balance.chain] = ChainHolding(
            raw=balance.raw_value,
            decimals=balance.raw_value_decimals,
            amount=balance.amount,
            usd=balance.usd or Decimal("0"),
        )
    return AssetHoldings(asset=asset, balances=balances, by_chain=by_chain)
