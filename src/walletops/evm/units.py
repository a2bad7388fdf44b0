"""
Amount conversion between human units and smallest (integer) units.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, localcontext

from ..errors import ValidationError

# Every token is treated as 18-decimal unless a caller passes its real
# decimal count. Swaps rely on this default.
DEFAULT_DECIMALS = 18

_AMOUNT_RE = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def to_smallest_unit(amount: str | int | Decimal, decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Convert a human amount (e.g. "1.5") to integer smallest units.

    Args:
        amount: Non-negative decimal amount. Strings must be plain decimal
                notation (no sign, no exponent).
        decimals: Number of fractional digits of the token

    Returns:
        Integer amount, e.g. 1500000000000000000 for "1.5" at 18 decimals

    Raises:
        ValidationError: If the amount is malformed, negative, or has more
                         fractional digits than the token supports
    """
    if isinstance(amount, bool):
        raise ValidationError(f"Invalid amount: {amount!r}")

    if isinstance(amount, int):
        value = Decimal(amount)
    elif isinstance(amount, Decimal):
        value = amount
    else:
        text = str(amount).strip()
        if not _AMOUNT_RE.match(text):
            raise ValidationError(f"Invalid amount: {amount!r}")
        try:
            value = Decimal(text)
        except InvalidOperation as exc:
            raise ValidationError(f"Invalid amount: {amount!r}") from exc

    if not value.is_finite() or value < 0:
        raise ValidationError(f"Invalid amount: {amount!r}")

    with localcontext() as ctx:
        ctx.prec = 100
        scaled = value.scaleb(decimals)
        whole = scaled.to_integral_value()
    if scaled != whole:
        raise ValidationError(
            f"Amount {amount} has more than {decimals} fractional digits"
        )
    return int(whole)


def from_smallest_unit(raw: int | str, decimals: int = DEFAULT_DECIMALS) -> Decimal:
    """Convert integer smallest units back to a human Decimal."""
    with localcontext() as ctx:
        ctx.prec = 100
        return Decimal(int(raw)).scaleb(-decimals)


def to_hex_quantity(value: int) -> str:
    """JSON-RPC quantity encoding: 0 -> "0x0", 255 -> "0xff"."""
    if value < 0:
        raise ValueError("Quantity must be non-negative")
    return hex(value)
