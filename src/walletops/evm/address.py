from __future__ import annotations

from eth_utils import is_address, to_checksum_address

ZERO_ADDRESS = "0x" + "0" * 40


def is_valid_address(value: object) -> bool:
    """True for a 0x-prefixed 20-byte hex address.

    Mixed-case input must carry a valid EIP-55 checksum; all-lowercase and
    all-uppercase forms are accepted as-is.
    """
    if not isinstance(value, str) or not value.startswith("0x"):
        return False
    return is_address(value)


def checksum(address: str) -> str:
    return to_checksum_address(address)
