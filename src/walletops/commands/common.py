"""
Shared CLI plumbing: the click context object and error reporting.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import Callable, NoReturn, Optional

import click
import httpx

from ..config import Settings
from ..custody.privy import PrivyClient
from ..errors import ConfigError, WalletOpsError
from ..evm import rpc
from ..venue.bebop import BebopClient


@dataclass
class AppContext:
    """Objects shared by all commands; tests replace the HTTP layer here."""

    settings: Settings
    http_client: Optional[httpx.Client] = None
    sleep: Callable[[float], None] = time.sleep
    rpc_url_for: Callable[[int], Optional[str]] = field(default=rpc.get_rpc_url)

    def custody(self) -> PrivyClient:
        return PrivyClient.from_settings(self.settings, http_client=self.http_client)

    def venue(self) -> BebopClient:
        return BebopClient.from_settings(self.settings, http_client=self.http_client)

    def wallet_id(self, explicit: Optional[str] = None) -> str:
        if explicit:
            return explicit
        return self.settings.require_wallet_id()


pass_app = click.make_pass_decorator(AppContext)


def fail(message: str, exit_code: int = 1) -> NoReturn:
    click.secho(f"ERROR: {message}", fg="red", err=True)
    sys.exit(exit_code)


def fail_with(exc: WalletOpsError) -> NoReturn:
    if isinstance(exc, ConfigError):
        fail(str(exc), exc.exit_code)
    fail(f"{type(exc).__name__}: {exc}", exc.exit_code)


def parse_chain_id(raw: Optional[str], default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        fail(f"Invalid chain ID: {raw}")
