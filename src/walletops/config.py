"""
Configuration for walletops.

Credentials and endpoints come from the process environment, optionally
seeded from a ``.env`` file (current working directory by default).
Variables already set in the environment win over the file.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

DEFAULT_PRIVY_API_URL = "https://api.privy.io"
DEFAULT_BEBOP_API_URL = "https://api.bebop.xyz"
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_APPROVAL_DELAY = 3.0


def load_env(env_path: Optional[Path] = None) -> Optional[Path]:
    """
    Load a ``.env`` file into ``os.environ``.

    Args:
        env_path: Explicit file to load. If None, searches upward from the
                  current working directory.

    Returns:
        The path that was loaded, or None if no file was found.
    """
    if env_path is None:
        found = find_dotenv(usecwd=True)
        if not found:
            return None
        env_path = Path(found)

    if not env_path.exists():
        return None

    load_dotenv(env_path, override=False)
    return env_path


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class Settings:
    privy_app_id: Optional[str] = None
    privy_app_secret: Optional[str] = None
    wallet_id: Optional[str] = None
    bebop_auth_key: Optional[str] = None
    bebop_source_id: Optional[str] = None
    privy_api_url: str = DEFAULT_PRIVY_API_URL
    bebop_api_url: str = DEFAULT_BEBOP_API_URL
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    approval_delay: float = DEFAULT_APPROVAL_DELAY

    @classmethod
    def from_env(cls, env_path: Optional[Path] = None) -> "Settings":
        """Build settings from the environment after loading ``.env``."""
        load_env(env_path)
        return cls(
            privy_app_id=os.environ.get("PRIVY_APP_ID") or None,
            privy_app_secret=os.environ.get("PRIVY_APP_SECRET") or None,
            wallet_id=os.environ.get("WALLET_ID") or None,
            bebop_auth_key=os.environ.get("BEBOP_AUTH_KEY") or None,
            bebop_source_id=os.environ.get("BEBOP_SOURCE_ID") or None,
            privy_api_url=os.environ.get("PRIVY_API_URL") or DEFAULT_PRIVY_API_URL,
            bebop_api_url=os.environ.get("BEBOP_API_URL") or DEFAULT_BEBOP_API_URL,
            http_timeout=_float_env("WALLETOPS_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
            approval_delay=_float_env("WALLETOPS_APPROVAL_DELAY", DEFAULT_APPROVAL_DELAY),
        )

    def require_privy_credentials(self) -> tuple[str, str]:
        missing = [
            name
            for name, value in (
                ("PRIVY_APP_ID", self.privy_app_id),
                ("PRIVY_APP_SECRET", self.privy_app_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        return self.privy_app_id, self.privy_app_secret  # type: ignore[return-value]

    def require_wallet_id(self) -> str:
        if not self.wallet_id:
            raise ConfigError("WALLET_ID must be set in .env")
        return self.wallet_id
