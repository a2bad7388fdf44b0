from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from ..chains import from_caip2
from ..evm.units import to_hex_quantity


def _normalize_value(value: Union[int, str, None]) -> str:
    if value is None or value == "":
        return "0x0"
    if isinstance(value, int):
        return to_hex_quantity(value)
    return value


@dataclass(frozen=True)
class TransactionRequest:
    """A prepared EVM transaction: destination, call data, value.

    ``value`` is a JSON-RPC hex quantity; ints are converted and a missing
    value becomes ``0x0``.
    """

    to: str
    data: Optional[str] = None
    value: str = "0x0"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _normalize_value(self.value))

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TransactionRequest":
        return cls(to=raw["to"], data=raw.get("data"), value=raw.get("value"))

    def to_payload(self) -> dict[str, str]:
        payload = {"to": self.to}
        if self.data:
            payload["data"] = self.data
        payload["value"] = self.value
        return payload


@dataclass(frozen=True)
class TransactionResult:
    hash: str
    caip2: str

    @property
    def chain_id(self) -> int:
        return from_caip2(self.caip2)


def _to_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


@dataclass(frozen=True)
class Balance:
    """One (asset, chain) balance as reported by the custody service."""

    asset: str
    chain: str
    raw_value: str
    raw_value_decimals: int
    display_values: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Balance":
        return cls(
            asset=str(raw.get("asset", "")),
            chain=str(raw.get("chain", "")),
            raw_value=str(raw.get("raw_value", "0")),
            raw_value_decimals=int(raw.get("raw_value_decimals", 0)),
            display_values=dict(raw.get("display_values") or {}),
        )

    @property
    def display_amount(self) -> str:
        values = self.display_values
        return values.get(self.asset) or values.get("eth") or values.get("sol") or "0"

    @property
    def amount(self) -> Decimal:
        return _to_decimal(self.display_amount)

    @property
    def usd(self) -> Optional[Decimal]:
        if "usd" not in self.display_values:
            return None
        return _to_decimal(self.display_values["usd"])
