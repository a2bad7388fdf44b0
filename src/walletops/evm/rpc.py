"""
JSON-RPC client for public EVM nodes.

Read-only: native balances, contract reads (eth_call) and transaction
receipt polling. Transactions are never sent from here; the custody
service broadcasts them.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Callable, Optional

import httpx

from ..chains import CHAINS
from ..config import DEFAULT_HTTP_TIMEOUT
from ..errors import ChainRpcError
from .abi import decode_function_result, encode_function_call

logger = logging.getLogger(__name__)


def get_rpc_url(chain_id: int) -> Optional[str]:
    """
    RPC URL for a chain.

    ``RPC_URL_<chain_id>`` in the environment overrides the built-in
    public endpoint. Returns None when neither is available.
    """
    override = os.environ.get(f"RPC_URL_{chain_id}")
    if override:
        return override
    info = CHAINS.get(chain_id)
    return info.rpc_url if info else None


def _rpc_call(
    method: str,
    params: list,
    rpc_url: str,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    http_client: Optional[httpx.Client] = None,
) -> Any:
    """
    Make a JSON-RPC call.

    Args:
        method: RPC method name (e.g., "eth_call")
        params: RPC parameters
        rpc_url: RPC endpoint URL
        timeout: Request timeout in seconds
        http_client: Shared httpx client; a short-lived one is opened if omitted

    Returns:
        Result field from the RPC response

    Raises:
        ChainRpcError: If the request fails or the node returns an error
    """
    payload = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
        "id": 1,
    }

    logger.debug("rpc %s -> %s", method, rpc_url)
    try:
        if http_client is None:
            with httpx.Client(timeout=timeout) as client:
                response = client.post(rpc_url, json=payload)
        else:
            response = http_client.post(rpc_url, json=payload, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        raise ChainRpcError(f"RPC request {method} failed: {exc}") from exc

    if not isinstance(data, dict):
        raise ChainRpcError(f"RPC request {method} failed: unexpected response {data!r}")
    if "error" in data:
        raise ChainRpcError(f"RPC error: {data['error']}")

    return data.get("result")


def read_contract(
    contract_address: str,
    function_name: str,
    args: list,
    abi: list,
    rpc_url: str,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    http_client: Optional[httpx.Client] = None,
) -> Any:
    """
    Read from a smart contract (eth_call).

    Returns:
        Decoded return value(s), or None for an empty result
    """
    calldata = encode_function_call(abi, function_name, args)
    result = _rpc_call(
        "eth_call",
        [{"to": contract_address, "data": calldata}, "latest"],
        rpc_url=rpc_url,
        timeout=timeout,
        http_client=http_client,
    )

    if result is None or result == "0x":
        return None

    return decode_function_result(abi, function_name, result)


def get_balance(
    address: str,
    rpc_url: str,
    timeout: float = DEFAULT_HTTP_TIMEOUT,
    http_client: Optional[httpx.Client] = None,
) -> int:
    """
    Get native coin balance for an address.

    Returns:
        Balance in wei
    """
    result = _rpc_call(
        "eth_getBalance",
        [address, "latest"],
        rpc_url=rpc_url,
        timeout=timeout,
        http_client=http_client,
    )
    try:
        return int(result, 16)
    except (TypeError, ValueError) as exc:
        raise ChainRpcError(f"Invalid balance from node: {result!r}") from exc


def wait_for_receipt(
    tx_hash: str,
    rpc_url: str,
    timeout: float = 120,
    poll_interval: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
    request_timeout: float = DEFAULT_HTTP_TIMEOUT,
    http_client: Optional[httpx.Client] = None,
) -> dict:
    """
    Wait for a transaction receipt.

    Args:
        tx_hash: Transaction hash
        rpc_url: RPC endpoint URL
        timeout: Maximum wait time in seconds
        poll_interval: Polling interval in seconds
        sleep: Pause function, replaceable in tests
        request_timeout: Timeout of each individual RPC request
        http_client: Shared httpx client

    Returns:
        Transaction receipt dict

    Raises:
        ChainRpcError: If the receipt is not found within timeout
    """
    start = time.monotonic()
    while time.monotonic() - start < timeout:
        receipt = _rpc_call(
            "eth_getTransactionReceipt",
            [tx_hash],
            rpc_url=rpc_url,
            timeout=request_timeout,
            http_client=http_client,
        )
        if receipt is not None:
            return receipt
        sleep(poll_interval)

    raise ChainRpcError(f"Transaction {tx_hash} not confirmed within {timeout}s")
