"""Coin amount helper tests."""

from __future__ import annotations

from decimal import Decimal

import pytest

from chorecoins.utils.errors import InvalidInputError
from chorecoins.utils.money import format_money, format_signed, money_str, to_money


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, Decimal("0.00")),
        (2, Decimal("2.00")),
        (0.1, Decimal("0.10")),
        ("1.005", Decimal("1.01")),
        (Decimal("-3.5"), Decimal("-3.50")),
    ],
)
def test_to_money_rounds_to_cents(raw: object, expected: Decimal) -> None:
    assert to_money(raw) == expected


@pytest.mark.parametrize("raw", ["abc", True, [1], "NaN", "Infinity"])
def test_to_money_rejects_non_numeric(raw: object) -> None:
    """Non-numeric amounts should fail with a client-safe error."""
    with pytest.raises(InvalidInputError):
        to_money(raw)


def test_formatting() -> None:
    assert money_str(Decimal("12.5")) == "12.50"
    assert format_money(Decimal("12.5")) == "$12.50"
    assert format_money(Decimal("-1")) == "-$1.00"
    assert format_signed(Decimal("2")) == "+$2.00"
    assert format_signed(Decimal("-0.5")) == "-$0.50"
