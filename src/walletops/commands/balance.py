"""
Balance - Query wallet balances from the custody service.

Commands:
- balance eth [CHAIN]          ETH balance on one chain
- balance usdc [CHAIN]         USDC balance on one chain
- balance all [CHAINS...]      ETH/USDC/USDT across chains
- balance custom ASSET CHAIN   Any supported asset on any chain
- holdings [ASSET]             One asset summed across all its chains
"""

from __future__ import annotations

from typing import Optional

import click

from ..balances import (
    SUPPORTED_ASSETS,
    get_all_balances,
    get_eth_balance,
    get_usdc_balance,
    get_wallet_balance,
    holdings_by_asset,
)
from ..custody.models import Balance
from ..errors import WalletOpsError
from .common import AppContext, fail, fail_with, pass_app


def _print_balances(balances: list[Balance]) -> None:
    if not balances:
        click.echo("No balances returned.")
        return

    click.echo("Balances:")
    for index, balance in enumerate(balances, start=1):
        symbol = balance.asset.upper()
        click.echo()
        click.echo(f"  {index}. {symbol} on {balance.chain}")
        click.echo(
            click.style("     Raw:     ", dim=True)
            + f"{balance.raw_value} ({balance.raw_value_decimals} decimals)"
        )
        click.echo(click.style("     Display: ", dim=True) + f"{balance.display_amount} {symbol}")
        if balance.usd is not None:
            click.echo(click.style("     USD:     ", dim=True) + f"${balance.display_values['usd']}")


@click.group()
@click.option("--wallet-id", envvar="WALLET_ID", default=None, help="Privy wallet ID")
@click.pass_context
def balance(ctx: click.Context, wallet_id: Optional[str]) -> None:
    """Wallet balances reported by the custody service.

    \b
    Examples:
      walletops balance eth base
      walletops balance usdc ethereum
      walletops balance all base ethereum polygon
      walletops balance custom usdt polygon
    """
    app = ctx.find_object(AppContext)
    try:
        ctx.meta["wallet_id"] = app.wallet_id(wallet_id)
    except WalletOpsError as exc:
        fail_with(exc)


def _run(query) -> None:
    ctx = click.get_current_context()
    app = ctx.find_object(AppContext)
    wallet_id = ctx.meta["wallet_id"]
    try:
        with app.custody() as client:
            balances = query(client, wallet_id)
    except WalletOpsError as exc:
        fail_with(exc)
    _print_balances(balances)


@balance.command("eth")
@click.argument("chain", default="base")
def balance_eth(chain: str) -> None:
    """ETH balance on CHAIN (default: base)."""
    _run(lambda client, wallet_id: get_eth_balance(client, wallet_id, chain))


@balance.command("usdc")
@click.argument("chain", default="base")
def balance_usdc(chain: str) -> None:
    """USDC balance on CHAIN (default: base)."""
    _run(lambda client, wallet_id: get_usdc_balance(client, wallet_id, chain))


@balance.command("all")
@click.argument("chains", nargs=-1)
def balance_all(chains: tuple[str, ...]) -> None:
    """ETH, USDC and USDT across CHAINS (default: main EVM chains)."""
    _run(lambda client, wallet_id: get_all_balances(client, wallet_id, chains or None))


@balance.command("custom")
@click.argument("asset", default="eth")
@click.argument("chain", default="base")
def balance_custom(asset: str, chain: str) -> None:
    """Balance of ASSET on CHAIN."""
    _run(lambda client, wallet_id: get_wallet_balance(client, wallet_id, asset, chain))


@click.command()
@click.argument("asset", default="eth")
@click.option("--wallet-id", envvar="WALLET_ID", default=None, help="Privy wallet ID")
@pass_app
def holdings(app: AppContext, asset: str, wallet_id: Optional[str]) -> None:
    """Total ASSET holdings across every chain it lives on."""
    try:
        wallet = app.wallet_id(wallet_id)
    except WalletOpsError as exc:
        fail_with(exc)

    asset = asset.lower()
    if asset not in SUPPORTED_ASSETS:
        click.echo(f"Valid assets: {', '.join(SUPPORTED_ASSETS)}", err=True)
        fail(f"Invalid asset: {asset}")

    try:
        with app.custody() as client:
            result = holdings_by_asset(client, wallet, asset)
    except WalletOpsError as exc:
        fail_with(exc)

    symbol = asset.upper()
    rule = "═" * 60
    click.echo(rule)
    click.secho(f"  {symbol} Holdings", bold=True)
    click.echo(rule)
    for chain, holding in result.by_chain.items():
        click.echo(f"\n  {chain:<20} {holding.amount:.6f} {symbol}")
        click.echo(f"  {' ' * 20} ${holding.usd:.2f}")
    click.echo()
    click.echo(rule)
    click.echo(f"  Total {symbol}: {result.total_amount:.6f}")
    click.echo(f"  Total USD: ${result.total_usd:.2f}")
    click.echo(rule)
    click.echo(f"\n  Found {result.chain_count} chain(s) with {symbol}")
