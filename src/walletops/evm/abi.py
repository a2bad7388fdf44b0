"""
Minimal ABI handling for ERC-20 calls.

Only the functions walletops needs are declared; encoding follows the
Solidity ABI (4-byte keccak selector + eth-abi encoded arguments).
"""

from __future__ import annotations

from typing import Any

from eth_abi import decode, encode
from eth_utils import keccak

MAX_UINT256 = 2**256 - 1

ERC20_ABI: list[dict] = [
    {
        "type": "function",
        "name": "approve",
        "inputs": [
            {"name": "spender", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "allowance",
        "inputs": [
            {"name": "owner", "type": "address"},
            {"name": "spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "decimals",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
    },
]


def _find_function(abi: list, function_name: str) -> dict:
    for entry in abi:
        if entry.get("type") == "function" and entry.get("name") == function_name:
            return entry
    raise ValueError(f"Function {function_name} not found in ABI")


def function_selector(signature: str) -> bytes:
    """First 4 bytes of keccak256 of a canonical signature like "approve(address,uint256)"."""
    return keccak(text=signature)[:4]


def encode_function_call(abi: list, function_name: str, args: list) -> str:
    """
    ABI-encode a function call.

    Args:
        abi: Contract ABI
        function_name: Function name to call
        args: Function arguments

    Returns:
        0x-prefixed hex encoded calldata
    """
    func = _find_function(abi, function_name)
    input_types = [inp["type"] for inp in func.get("inputs", [])]
    selector = function_selector(f"{function_name}({','.join(input_types)})")
    if len(args) != len(input_types):
        raise ValueError(
            f"{function_name} takes {len(input_types)} arguments, got {len(args)}"
        )
    # addresses are validated upstream; eth-abi only sees lowercase hex
    args = [
        arg.lower() if kind == "address" and isinstance(arg, str) else arg
        for kind, arg in zip(input_types, args)
    ]
    encoded_args = encode(input_types, args) if args else b""
    return "0x" + selector.hex() + encoded_args.hex()


def decode_function_result(abi: list, function_name: str, data: str) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        Decoded result (single value or tuple), None for functions without outputs
    """
    func = _find_function(abi, function_name)
    output_types = [out["type"] for out in func.get("outputs", [])]
    if not output_types:
        return None

    raw = bytes.fromhex(data[2:]) if data.startswith("0x") else bytes.fromhex(data)
    decoded = decode(output_types, raw)

    if len(decoded) == 1:
        return decoded[0]
    return decoded


def encode_approve(spender: str, amount: int = MAX_UINT256) -> str:
    """Calldata for ERC-20 ``approve(spender, amount)``; unlimited by default."""
    return encode_function_call(ERC20_ABI, "approve", [spender, amount])
