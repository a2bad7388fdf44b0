"""
Privy wallet API client.

REST endpoints used:
- GET  /v1/wallets/{id}          wallet lookup (address resolution)
- POST /v1/wallets/{id}/rpc      eth_sendTransaction (sign + broadcast)
- GET  /v1/wallets/{id}/balance  balances per (asset, chain)

Requests authenticate with HTTP Basic (app id / app secret) plus the
``privy-app-id`` header.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

import httpx

from ..chains import to_caip2
from ..config import DEFAULT_HTTP_TIMEOUT, DEFAULT_PRIVY_API_URL, Settings
from ..errors import BalanceError, ResolutionError, SubmissionError
from .models import Balance, TransactionRequest, TransactionResult

logger = logging.getLogger(__name__)

SEND_TRANSACTION_METHOD = "eth_sendTransaction"


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text


def _json_body(response: httpx.Response, error: type, context: str) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as exc:
        raise error(f"{context}: response is not JSON: {response.text[:200]}") from exc
    if not isinstance(body, dict):
        raise error(f"{context}: unexpected response: {response.text[:200]}")
    return body


class PrivyClient:
    """
    Client for the Privy server wallet API.

    Args:
        app_id: Privy application ID
        app_secret: Privy application secret
        base_url: API root (default: https://api.privy.io)
        timeout: Per-request timeout in seconds
        http_client: Pre-configured httpx client (tests inject a
                     MockTransport-backed client here)
    """

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        base_url: str = DEFAULT_PRIVY_API_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.app_id = app_id
        self.base_url = base_url.rstrip("/")
        self._auth = httpx.BasicAuth(app_id, app_secret)
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: Optional[httpx.Client] = None
    ) -> "PrivyClient":
        app_id, app_secret = settings.require_privy_credentials()
        return cls(
            app_id,
            app_secret,
            base_url=settings.privy_api_url,
            timeout=settings.http_timeout,
            http_client=http_client,
        )

    # ============ HTTP plumbing ============

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Any = None,
        json: Optional[dict] = None,
    ) -> httpx.Response:
        return self._http.request(
            method,
            f"{self.base_url}{path}",
            params=params,
            json=json,
            auth=self._auth,
            headers={"privy-app-id": self.app_id},
        )

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "PrivyClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ============ Wallets ============

    def get_wallet(self, wallet_id: str) -> dict[str, Any]:
        """
        Fetch wallet metadata.

        Raises:
            ResolutionError: If the wallet is unknown or the lookup fails
        """
        try:
            response = self._request("GET", f"/v1/wallets/{wallet_id}")
        except httpx.HTTPError as exc:
            raise ResolutionError(f"Wallet lookup failed for {wallet_id}: {exc}") from exc

        if response.status_code == 404:
            raise ResolutionError(f"Unknown wallet: {wallet_id}")
        if response.status_code != 200:
            raise ResolutionError(
                f"Wallet lookup failed: {response.status_code} - {_error_detail(response)}"
            )
        return _json_body(response, ResolutionError, "Wallet lookup failed")

    def get_wallet_address(self, wallet_id: str, chain_id: int) -> str:
        """
        Resolve the on-chain address of a wallet for an EVM chain.

        EVM wallets share one address across chains; ``chain_id`` is used
        only to reject non-EVM wallets.
        """
        wallet = self.get_wallet(wallet_id)
        chain_type = wallet.get("chain_type")
        if chain_type and chain_type != "ethereum":
            raise ResolutionError(
                f"Wallet {wallet_id} is a {chain_type} wallet, "
                f"cannot use it on {to_caip2(chain_id)}"
            )
        address = wallet.get("address")
        if not address:
            raise ResolutionError(f"Wallet {wallet_id} has no address")
        logger.debug("resolved wallet %s -> %s", wallet_id, address)
        return address

    # ============ Transactions ============

    def send_transaction(
        self,
        wallet_id: str,
        chain_id: int,
        transaction: TransactionRequest,
        sponsor: bool = False,
    ) -> TransactionResult:
        """
        Have the custody service sign and broadcast a transaction.

        Used for every kind of transaction (approvals, swap settlement,
        transfers); no retries.

        Raises:
            SubmissionError: On any custody-service failure
        """
        caip2 = to_caip2(chain_id)
        body: dict[str, Any] = {
            "method": SEND_TRANSACTION_METHOD,
            "caip2": caip2,
            "params": {"transaction": transaction.to_payload()},
        }
        if sponsor:
            body["sponsor"] = True

        logger.debug("submitting transaction to %s on %s", transaction.to, caip2)
        try:
            response = self._request("POST", f"/v1/wallets/{wallet_id}/rpc", json=body)
        except httpx.HTTPError as exc:
            raise SubmissionError(f"Transaction submission failed: {exc}") from exc

        if response.status_code != 200:
            raise SubmissionError(
                f"Transaction submission failed: {response.status_code} - "
                f"{_error_detail(response)}"
            )

        body = _json_body(response, SubmissionError, "Transaction submission failed")
        data = body.get("data")
        tx_hash = data.get("hash") if isinstance(data, dict) else None
        if not tx_hash:
            raise SubmissionError("Custody service returned no transaction hash")
        return TransactionResult(hash=tx_hash, caip2=data.get("caip2") or caip2)

    # ============ Balances ============

    def get_balances(
        self,
        wallet_id: str,
        assets: Union[str, Iterable[str]],
        chains: Union[str, Iterable[str]],
        include_currency: bool = True,
    ) -> list[Balance]:
        """
        Query balances for every (asset, chain) combination.

        Args:
            wallet_id: Wallet ID
            assets: Asset name(s): eth, usdc, usdt, pol, sol
            chains: Chain name(s): ethereum, base, polygon, sepolia, ...
            include_currency: Ask for a USD conversion

        Raises:
            BalanceError: If the query fails
        """
        if isinstance(assets, str):
            assets = [assets]
        if isinstance(chains, str):
            chains = [chains]

        params: list[tuple[str, str]] = [("asset", a) for a in assets]
        params.extend(("chain", c) for c in chains)
        if include_currency:
            params.append(("include_currency", "usd"))

        try:
            response = self._request("GET", f"/v1/wallets/{wallet_id}/balance", params=params)
        except httpx.HTTPError as exc:
            raise BalanceError(f"Balance query failed: {exc}") from exc

        if response.status_code != 200:
            raise BalanceError(f"API Error: {response.status_code} - {response.text}")

        body = _json_body(response, BalanceError, "Balance query failed")
        return [Balance.from_dict(item) for item in body.get("balances") or []]
