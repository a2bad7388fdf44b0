"""
Native-coin withdrawals and arbitrary transaction submission.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .chains import SEPOLIA_CHAIN_ID
from .custody.models import TransactionRequest, TransactionResult
from .custody.privy import PrivyClient
from .errors import ValidationError
from .evm.address import is_valid_address
from .evm.units import to_hex_quantity, to_smallest_unit

logger = logging.getLogger(__name__)

_HEX_QUANTITY_RE = re.compile(r"^0x[0-9a-fA-F]+$")


def withdraw_native(
    client: PrivyClient,
    wallet_id: str,
    recipient: str,
    amount: str,
    chain_id: int = SEPOLIA_CHAIN_ID,
    sponsor: bool = False,
) -> TransactionResult:
    """
    Send ``amount`` of the chain's native coin (in ETH units) to ``recipient``.

    Raises:
        ValidationError: Missing field, bad address or non-positive amount
        SubmissionError: If the custody service rejects the transaction
    """
    if not wallet_id:
        raise ValidationError("wallet_id is required")
    if not recipient:
        raise ValidationError("recipient is required")
    if not amount:
        raise ValidationError("amount is required")
    if not is_valid_address(recipient):
        raise ValidationError(f"Invalid recipient address: {recipient}")

    wei = to_smallest_unit(amount)
    if wei <= 0:
        raise ValidationError(f"amount must be positive, got {amount}")

    logger.info("withdrawing %s wei to %s (sponsor=%s)", wei, recipient, sponsor)
    return client.send_transaction(
        wallet_id,
        chain_id,
        TransactionRequest(to=recipient, value=to_hex_quantity(wei)),
        sponsor=sponsor,
    )


def send_custom_transaction(
    client: PrivyClient,
    wallet_id: str,
    chain_id: int,
    to: str,
    value: str = "0x0",
    data: Optional[str] = None,
    sponsor: bool = False,
) -> TransactionResult:
    """Submit an arbitrary prepared transaction (e.g. encoded contract call)."""
    if not wallet_id:
        raise ValidationError("wallet_id is required")
    if not is_valid_address(to):
        raise ValidationError(f"Invalid destination address: {to}")
    if not isinstance(value, str) or not _HEX_QUANTITY_RE.match(value):
        raise ValidationError(f"Invalid value: {value} (expected a 0x-prefixed hex quantity)")
    if data is not None and not data.startswith("0x"):
        raise ValidationError("data must be 0x-prefixed hex")

    return client.send_transaction(
        wallet_id,
        chain_id,
        TransactionRequest(to=to, data=data, value=value),
        sponsor=sponsor,
    )
