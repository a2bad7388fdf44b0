"""Shared fixtures: an in-process fake for the Privy and Bebop HTTP APIs."""

from __future__ import annotations

import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from walletops.custody.privy import PrivyClient
from walletops.venue.bebop import BebopClient

WALLET_ID = "w1"
WALLET_ADDRESS = "0x0a1f55b674F8eB4f6988BD2725A10b30a7451783".lower()
WETH_BASE = "0x4200000000000000000000000000000000000006"
USDC_BASE = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"

Responder = Union[dict, Callable[[httpx.Request], httpx.Response]]


class FakeHttp:
    """Routes requests by (method, path) and records every request.

    Unrouted requests raise AssertionError so unexpected network calls fail
    the test.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Responder]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        status: int = 200,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> None:
        responder: Responder = handler or {"status": status, "body": body}
        self.routes.setdefault((method, path), []).append(responder)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        queue = self.routes[key]
        responder = queue.pop(0) if len(queue) > 1 else queue[0]
        if callable(responder):
            return responder(request)
        return httpx.Response(responder["status"], json=responder["body"])

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def json_body(self, request: httpx.Request) -> Any:
        return json.loads(request.content)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    # ============ Canned responses ============

    def wallet(self, wallet_id: str = WALLET_ID, address: str = WALLET_ADDRESS) -> None:
        self.add(
            "GET",
            f"/v1/wallets/{wallet_id}",
            {"id": wallet_id, "address": address, "chain_type": "ethereum"},
        )

    def send_ok(self, tx_hash: str = "0xabc", caip2: str = "eip155:8453", wallet_id: str = WALLET_ID) -> None:
        self.add(
            "POST",
            f"/v1/wallets/{wallet_id}/rpc",
            {"method": "eth_sendTransaction", "data": {"hash": tx_hash, "caip2": caip2}},
        )

    def quote_ok(
        self,
        network: str = "base",
        sell_amount: str = "1000000000000000000",
        buy_amount: Optional[str] = "2500000000",
    ) -> None:
        body: dict[str, Any] = {
            "sellAmount": sell_amount,
            "tx": {
                "to": "0xbbbbbBB520d69a9775E85b458C58c648259FAD5F",
                "data": "0xdeadbeef",
                "value": "0x0",
            },
        }
        if buy_amount is not None:
            body["buyAmount"] = buy_amount
        self.add("GET", f"/pmm/{network}/v3/quote", body)


@pytest.fixture()
def fake_http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture()
def privy(fake_http: FakeHttp) -> PrivyClient:
    return PrivyClient("app-id", "app-secret", http_client=fake_http.client())


@pytest.fixture()
def bebop(fake_http: FakeHttp) -> BebopClient:
    return BebopClient(http_client=fake_http.client())

