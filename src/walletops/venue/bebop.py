"""
Bebop PMM quote API.

GET {api}/pmm/{network}/v3/quote returns either ``{"error": ...}`` or a
priced quote with an unsigned settlement transaction under ``tx``.
API docs: https://docs.bebop.xyz
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from ..chains import venue_network_name
from ..config import DEFAULT_BEBOP_API_URL, DEFAULT_HTTP_TIMEOUT, Settings
from ..custody.models import TransactionRequest
from ..errors import QuoteError
from ..evm.units import to_smallest_unit

logger = logging.getLogger(__name__)

# Bebop settlement contract (same address on every supported chain)
BEBOP_SETTLEMENT_ADDRESS = "0xbbbbbBB520d69a9775E85b458C58c648259FAD5F"

APPROVAL_TYPE = "Standard"


@dataclass(frozen=True)
class Quote:
    """A priced Bebop quote. Amounts are integer strings in smallest units."""

    sell_amount: str
    buy_amount: Optional[str]
    tx: TransactionRequest


def _extract_buy_amount(data: dict[str, Any], buy_token: str) -> Optional[str]:
    amount = data.get("buyAmount")
    if amount is None and isinstance(data.get("tx"), dict):
        amount = data["tx"].get("buyAmount")
    if amount is None:
        for address, entry in (data.get("buyTokens") or {}).items():
            if address.lower() == buy_token.lower() and isinstance(entry, dict):
                amount = entry.get("amount")
                break
    return str(amount) if amount is not None else None


class BebopClient:
    """
    Bebop quote client.

    Args:
        base_url: API root (default: https://api.bebop.xyz)
        auth_key: Optional ``source-auth`` key
        source_id: Optional integration source identifier
        timeout: Per-request timeout in seconds
        http_client: Pre-configured httpx client
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BEBOP_API_URL,
        auth_key: Optional[str] = None,
        source_id: Optional[str] = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.auth_key = auth_key
        self.source_id = source_id
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: Optional[httpx.Client] = None
    ) -> "BebopClient":
        return cls(
            base_url=settings.bebop_api_url,
            auth_key=settings.bebop_auth_key,
            source_id=settings.bebop_source_id,
            timeout=settings.http_timeout,
            http_client=http_client,
        )

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "BebopClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def quote_url(self, chain_id: int) -> str:
        return f"{self.base_url}/pmm/{venue_network_name(chain_id)}/v3/quote"

    def get_quote(
        self,
        taker_address: str,
        sell_token: str,
        buy_token: str,
        amount: str,
        chain_id: int,
        gasless: bool = False,
    ) -> Quote:
        """
        Request a quote for selling ``amount`` of ``sell_token``.

        ``amount`` is in human units and converted with 18 fractional
        digits whatever the sell token's real decimals are.

        Raises:
            UnsupportedChainError: Chain has no Bebop network (no request made)
            QuoteError: Error payload, non-success status or transport failure
        """
        url = self.quote_url(chain_id)
        sell_amount = str(to_smallest_unit(amount))

        params = {
            "buy_tokens": buy_token,
            "sell_tokens": sell_token,
            "sell_amounts": sell_amount,
            "taker_address": taker_address,
            "gasless": "true" if gasless else "false",
            "approval_type": APPROVAL_TYPE,
        }
        if self.source_id:
            params["source"] = self.source_id
        headers = {"source-auth": self.auth_key} if self.auth_key else None

        logger.debug("quote request %s %s", url, params)
        try:
            response = self._http.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise QuoteError(f"Bebop quote request failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("error"):
            raise QuoteError(f"Bebop quote error: {data['error']}")
        if not response.is_success:
            raise QuoteError(
                f"Bebop quote error: HTTP {response.status_code} - {response.text}"
            )
        if not isinstance(data, dict) or not isinstance(data.get("tx"), dict):
            raise QuoteError("Bebop quote error: response has no transaction")

        try:
            tx = TransactionRequest.from_dict(data["tx"])
        except KeyError as exc:
            raise QuoteError(f"Bebop quote error: transaction missing {exc}") from exc

        return Quote(
            sell_amount=sell_amount,
            buy_amount=_extract_buy_amount(data, buy_token),
            tx=tx,
        )
