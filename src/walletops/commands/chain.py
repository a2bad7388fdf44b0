"""
Chain - Read-only queries against public JSON-RPC nodes.
"""

from __future__ import annotations

import click

from ..errors import WalletOpsError
from ..evm import rpc
from ..evm.address import is_valid_address
from ..evm.units import from_smallest_unit
from .common import AppContext, fail, fail_with, pass_app


@click.command("chain-balance")
@click.argument("address")
@click.option("--chain-id", default=8453, type=int, show_default=True, help="EVM chain ID")
@click.option("--rpc-url", default=None, help="Override the JSON-RPC endpoint")
@pass_app
def chain_balance(app: AppContext, address: str, chain_id: int, rpc_url: str) -> None:
    """Native coin balance of ADDRESS read from a public node."""
    if not is_valid_address(address):
        fail(f"Invalid address: {address}")

    url = rpc_url or app.rpc_url_for(chain_id)
    if not url:
        fail(f"No RPC URL configured for chain eip155:{chain_id} (set RPC_URL_{chain_id})")

    try:
        wei = rpc.get_balance(
            address,
            rpc_url=url,
            timeout=app.settings.http_timeout,
            http_client=app.http_client,
        )
    except WalletOpsError as exc:
        fail_with(exc)

    click.echo(click.style("  Address:       ", dim=True) + address)
    click.echo(click.style("  Chain:         ", dim=True) + f"eip155:{chain_id}")
    click.echo(click.style("  Balance:       ", dim=True) + f"{format(from_smallest_unit(wei).normalize(), 'f')} ETH")
    click.echo(click.style("  Balance (wei): ", dim=True) + str(wei))
