"""
Transfer - Move funds out of the custody wallet.

Commands:
- withdraw: Send native coin (Sepolia ETH by default) to a recipient
- send:     Submit an arbitrary transaction (raw value / call data)
"""

from __future__ import annotations

import os
from typing import Optional

import click

from ..chains import SEPOLIA_CHAIN_ID, explorer_url
from ..errors import WalletOpsError
from ..evm.units import to_smallest_unit
from ..transfers import send_custom_transaction, withdraw_native
from .common import AppContext, fail, fail_with, pass_app


@click.command()
@click.argument("amount", required=False)
@click.argument("recipient", required=False)
@click.option("--sponsor", is_flag=True, help="Request gas sponsorship")
@click.option("--chain-id", default=SEPOLIA_CHAIN_ID, type=int, show_default=True, help="EVM chain ID")
@click.option("--wallet-id", envvar="WALLET_ID", default=None, help="Privy wallet ID")
@pass_app
def withdraw(
    app: AppContext,
    amount: Optional[str],
    recipient: Optional[str],
    sponsor: bool,
    chain_id: int,
    wallet_id: Optional[str],
) -> None:
    """Withdraw AMOUNT of native coin (in ETH units) to RECIPIENT.

    RECIPIENT defaults to WITHDRAW_RECIPIENT from the environment.

    \b
    Examples:
      walletops withdraw 0.01 0xRecipient
      walletops withdraw 0.05 --sponsor
    """
    try:
        wallet = app.wallet_id(wallet_id)
    except WalletOpsError as exc:
        fail_with(exc)

    if not amount:
        fail("Please provide amount in ETH. Example: walletops withdraw 0.01 0xRecipient")
    recipient = recipient or os.environ.get("WITHDRAW_RECIPIENT")
    if not recipient:
        fail("Please provide recipient address as arg or WITHDRAW_RECIPIENT in .env")

    click.echo("=== Withdraw ===")
    click.echo()
    click.echo(click.style("  Wallet ID:       ", dim=True) + wallet)
    click.echo(click.style("  Recipient:       ", dim=True) + recipient)
    click.echo(click.style("  Amount (ETH):    ", dim=True) + amount)
    click.echo(click.style("  Chain:           ", dim=True) + f"eip155:{chain_id}")
    click.echo(
        click.style("  Gas sponsorship: ", dim=True) + ("ENABLED" if sponsor else "disabled")
    )

    try:
        click.echo(click.style("  Amount (wei):    ", dim=True) + str(to_smallest_unit(amount)))
        with app.custody() as client:
            result = withdraw_native(
                client, wallet, recipient, amount, chain_id=chain_id, sponsor=sponsor
            )
    except WalletOpsError as exc:
        fail_with(exc)

    click.echo()
    click.secho("  Withdrawal sent!", fg="green", bold=True)
    click.echo(click.style("  TX:       ", dim=True) + result.hash)
    click.echo(click.style("  Chain:    ", dim=True) + result.caip2)
    click.echo(click.style("  Explorer: ", dim=True) + explorer_url(result.chain_id, result.hash))


@click.command()
@click.option("--to", "to_address", required=True, help="Destination address (0x...)")
@click.option("--value", default="0x0", show_default=True, help="Value in wei, hex (0x...) or decimal")
@click.option("--data", default=None, help="0x-prefixed call data")
@click.option("--chain-id", required=True, type=int, envvar="CHAIN_ID", help="EVM chain ID")
@click.option("--sponsor", is_flag=True, help="Request gas sponsorship")
@click.option("--wallet-id", envvar="WALLET_ID", default=None, help="Privy wallet ID")
@pass_app
def send(
    app: AppContext,
    to_address: str,
    value: str,
    data: Optional[str],
    chain_id: int,
    sponsor: bool,
    wallet_id: Optional[str],
) -> None:
    """Submit an arbitrary transaction through the custody wallet."""
    try:
        wallet = app.wallet_id(wallet_id)
    except WalletOpsError as exc:
        fail_with(exc)

    if not value.startswith("0x"):
        if not value.isdigit():
            fail(f"Invalid value: {value}")
        value = hex(int(value))

    click.echo("=== Send Transaction ===")
    click.echo()
    click.echo(click.style("  To:      ", dim=True) + to_address)
    click.echo(click.style("  Value:   ", dim=True) + value)
    if data:
        click.echo(click.style("  Data:    ", dim=True) + data)
    click.echo(click.style("  Chain:   ", dim=True) + f"eip155:{chain_id}")
    click.echo(click.style("  Sponsor: ", dim=True) + str(sponsor))

    try:
        with app.custody() as client:
            result = send_custom_transaction(
                client, wallet, chain_id, to_address, value=value, data=data, sponsor=sponsor
            )
    except WalletOpsError as exc:
        fail_with(exc)

    click.echo()
    click.secho("  Transaction sent!", fg="green", bold=True)
    click.echo(click.style("  TX:       ", dim=True) + result.hash)
    click.echo(click.style("  Explorer: ", dim=True) + explorer_url(result.chain_id, result.hash))
