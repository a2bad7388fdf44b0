"""Tests for amount conversion and address checks."""

from __future__ import annotations

from decimal import Decimal

import pytest

from walletops.errors import ValidationError
from walletops.evm.address import is_valid_address
from walletops.evm.units import from_smallest_unit, to_hex_quantity, to_smallest_unit


class TestToSmallestUnit:
    """Tests for to_smallest_unit (18 decimals by default)."""

    def test_whole_amount(self) -> None:
        assert to_smallest_unit("1") == 10**18

    def test_fractional_amount(self) -> None:
        assert to_smallest_unit("1.5") == 1500000000000000000

    def test_leading_dot(self) -> None:
        assert to_smallest_unit(".5") == 5 * 10**17

    def test_smallest_fraction(self) -> None:
        assert to_smallest_unit("0.000000000000000001") == 1

    def test_decimals_parameter(self) -> None:
        assert to_smallest_unit("1.5", decimals=6) == 1_500_000

    def test_large_amount_keeps_precision(self) -> None:
        amount = "123456789012345.123456789012345678"
        assert to_smallest_unit(amount) == 123456789012345123456789012345678

    def test_int_input(self) -> None:
        assert to_smallest_unit(2) == 2 * 10**18

    def test_zero(self) -> None:
        assert to_smallest_unit("0") == 0

    @pytest.mark.parametrize("bad", ["", "abc", "-1", "1e18", "1.2.3", "0x10", " ", "nan"])
    def test_rejects_malformed(self, bad: str) -> None:
        with pytest.raises(ValidationError):
            to_smallest_unit(bad)

    def test_rejects_too_many_fraction_digits(self) -> None:
        with pytest.raises(ValidationError, match="fractional digits"):
            to_smallest_unit("0.0000000000000000001")

    def test_rejects_bool(self) -> None:
        with pytest.raises(ValidationError):
            to_smallest_unit(True)


class TestFromSmallestUnit:
    def test_wei_to_eth(self) -> None:
        assert from_smallest_unit(1500000000000000000) == Decimal("1.5")

    def test_string_input_with_decimals(self) -> None:
        assert from_smallest_unit("2500000", decimals=6) == Decimal("2.5")


class TestHexQuantity:
    def test_zero(self) -> None:
        assert to_hex_quantity(0) == "0x0"

    def test_value(self) -> None:
        assert to_hex_quantity(10_000_000_000_000_000) == "0x2386f26fc10000"

    def test_negative(self) -> None:
        with pytest.raises(ValueError):
            to_hex_quantity(-1)


class TestIsValidAddress:
    """Tests for is_valid_address."""

    @pytest.mark.parametrize(
        "address",
        [
            "0x4200000000000000000000000000000000000006",
            "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
            "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913",
        ],
    )
    def test_valid(self, address: str) -> None:
        assert is_valid_address(address)

    @pytest.mark.parametrize(
        "address",
        [
            "",
            "0x",
            "0x123",
            "4200000000000000000000000000000000000006",
            "0x42000000000000000000000000000000000000061",
            "0x" + "g" * 40,
            "0x833589FCD6eDb6E08f4c7C32D4f71b54bdA02913",
            None,
            42,
        ],
    )
    def test_invalid(self, address: object) -> None:
        assert not is_valid_address(address)
