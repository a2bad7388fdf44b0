"""
walletops CLI

Command-line interface for custody-wallet operations.

Keys never touch this machine: the Privy custody service signs and
broadcasts every transaction, Bebop prices swaps, and public JSON-RPC
nodes answer read-only queries.

Commands:
  swap           - Swap tokens through Bebop
  balance        - Wallet balances (eth / usdc / all / custom)
  holdings       - One asset summed across chains
  withdraw       - Withdraw native coin
  send           - Submit an arbitrary transaction
  chain-balance  - Native balance from a public node
  info           - Show configuration and supported chains
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from .chains import CHAINS
from .config import Settings
from .errors import ConfigError
from .commands.common import AppContext, fail_with, pass_app


# ============ Constants ============

VERSION = "1.0.0"


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("        W A L L E T O P S", fg="bright_white", bold=True)
        + click.style(f"      v{VERSION}", dim=True)
    )
    click.secho("        ─── Custody Wallet Toolkit ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=VERSION, prog_name="walletops")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Load environment from this .env file (default: search from cwd)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, env_file: Optional[Path], verbose: bool) -> None:
    """walletops: custody wallet toolkit."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if ctx.obj is None:
        try:
            ctx.obj = AppContext(settings=Settings.from_env(env_file))
        except ConfigError as exc:
            fail_with(exc)

    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .commands.swap import swap
from .commands.balance import balance, holdings
from .commands.transfer import send, withdraw
from .commands.chain import chain_balance

cli.add_command(swap)
cli.add_command(balance)
cli.add_command(holdings)
cli.add_command(withdraw)
cli.add_command(send)
cli.add_command(chain_balance)


# ============ Info ============


def _status(label: str, ok: bool, detail: str = "") -> None:
    value = click.style("set", fg="green") if ok else click.style("missing", fg="yellow")
    click.echo(click.style(f"  {label:<18}", dim=True) + value + click.style(detail, dim=True))


@cli.command()
@pass_app
def info(app: AppContext) -> None:
    """Show configuration status and supported chains."""
    _print_banner()
    settings = app.settings

    click.secho("  Configuration ──────────────────────────", fg="cyan")
    click.echo()
    _status("PRIVY_APP_ID", bool(settings.privy_app_id))
    _status("PRIVY_APP_SECRET", bool(settings.privy_app_secret))
    _status("WALLET_ID", bool(settings.wallet_id))
    _status("BEBOP_AUTH_KEY", bool(settings.bebop_auth_key), "  (optional)")
    click.echo(click.style("  HTTP timeout:     ", dim=True) + f"{settings.http_timeout:g}s")
    click.echo(click.style("  Approval delay:   ", dim=True) + f"{settings.approval_delay:g}s")
    click.echo()

    click.secho("  Chains ─────────────────────────────────", fg="cyan")
    click.echo()
    for chain_id, chain in CHAINS.items():
        rpc_url = app.rpc_url_for(chain_id)
        click.echo(
            click.style(f"  {chain_id:<10}", fg="bright_white", bold=True)
            + click.style("  ◇  ", fg="cyan")
            + click.style(f"{chain.venue_name:<10}", fg="bright_white")
            + click.style(f" rpc: {rpc_url or '-'}", dim=True)
        )
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """walletops CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()
