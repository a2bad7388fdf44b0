"""
Swap - Sell one token for another on the same chain via Bebop.

Flow:
1. Resolve the wallet address from the custody service
2. Approve the Bebop settlement contract (unless --skip-approval)
3. Request a quote from Bebop
4. Submit the quote's settlement transaction through the custody service
"""

from __future__ import annotations

import json
from typing import Optional

import click

from ..errors import WalletOpsError
from ..swap import ApprovalManager, SwapOrchestrator, SwapRequest, SwapStage
from .common import AppContext, fail, fail_with, pass_app, parse_chain_id

DEFAULT_CHAIN_ID = 8453

USAGE_EXAMPLES = """\
Usage: walletops swap <fromToken> <toToken> <amount> [chainId] [--gasless] [--skip-approval]

Examples:
  # Swap 1 WETH to USDC on Base
  walletops swap 0x4200000000000000000000000000000000000006 0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913 1 8453

Common tokens on Base:
  WETH: 0x4200000000000000000000000000000000000006
  USDC: 0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913

Chain IDs:
  Ethereum: 1, Base: 8453, Polygon: 137, Arbitrum: 42161, Optimism: 10"""


@click.command()
@click.argument("from_token", required=False)
@click.argument("to_token", required=False)
@click.argument("amount", required=False)
@click.argument("chain_id", required=False)
@click.option("--gasless", is_flag=True, help="Let Bebop sponsor network fees")
@click.option("--skip-approval", is_flag=True, help="Skip the token approval step")
@click.option(
    "--wait-receipt",
    is_flag=True,
    help="Poll for the approval receipt instead of a fixed pause",
)
@click.option("--wallet-id", envvar="WALLET_ID", default=None, help="Privy wallet ID")
@pass_app
def swap(
    app: AppContext,
    from_token: Optional[str],
    to_token: Optional[str],
    amount: Optional[str],
    chain_id: Optional[str],
    gasless: bool,
    skip_approval: bool,
    wait_receipt: bool,
    wallet_id: Optional[str],
) -> None:
    """Swap tokens through Bebop using the custody wallet."""
    try:
        wallet = app.wallet_id(wallet_id)
    except WalletOpsError as exc:
        fail_with(exc)

    if not from_token or not to_token or not amount:
        click.echo(USAGE_EXAMPLES, err=True)
        fail("fromToken, toToken and amount are required")

    chain = parse_chain_id(chain_id, DEFAULT_CHAIN_ID)
    request = SwapRequest(
        wallet_id=wallet,
        from_token=from_token,
        to_token=to_token,
        amount=amount,
        from_chain=chain,
        to_chain=chain,
        gasless=gasless,
        skip_approval=skip_approval,
    )

    click.echo("=== Bebop Swap ===")
    click.echo()
    click.echo(click.style("  From Token: ", dim=True) + from_token)
    click.echo(click.style("  To Token:   ", dim=True) + to_token)
    click.echo(click.style("  Amount:     ", dim=True) + amount)
    click.echo(click.style("  Chain ID:   ", dim=True) + str(chain))
    click.echo(click.style("  Gasless:    ", dim=True) + str(gasless))

    def on_stage(stage: SwapStage) -> None:
        if stage is SwapStage.RESOLVING:
            click.echo("\n  Step 1: Getting wallet address...")
        elif stage is SwapStage.APPROVING:
            click.echo("  Step 2: Checking token approval...")
        elif stage is SwapStage.QUOTING:
            if skip_approval:
                click.echo("  Step 2: Skipping approval (--skip-approval)")
            click.echo("  Step 3: Requesting quote from Bebop...")
        elif stage is SwapStage.EXECUTING:
            click.echo("  Step 4: Executing swap...")

    try:
        with app.custody() as custody, app.venue() as venue:
            approvals = ApprovalManager(
                custody,
                delay=app.settings.approval_delay,
                rpc_url_for=app.rpc_url_for,
                wait_for_receipt=wait_receipt,
                sleep=app.sleep,
                rpc_timeout=app.settings.http_timeout,
                http_client=app.http_client,
            )
            orchestrator = SwapOrchestrator(custody, venue, approvals=approvals, on_stage=on_stage)
            result = orchestrator.swap(request)
    except WalletOpsError as exc:
        click.secho("\n  Swap failed", fg="red", err=True)
        fail_with(exc)

    click.echo()
    click.secho("  Swap completed!", fg="green", bold=True)
    click.echo(click.style("  TX:       ", dim=True) + result.transaction_hash)
    click.echo(click.style("  Explorer: ", dim=True) + result.explorer_url)
    click.echo()
    click.echo(json.dumps(result.to_dict(), indent=2))
