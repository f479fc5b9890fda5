"""Helpers for coin amounts, kept as two-decimal ``Decimal`` values."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import AfterValidator, Field

from chorecoins.utils.errors import InvalidInputError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Any) -> Decimal:
    """Convert ``value`` to a ``Decimal`` rounded to cents.

    ``None`` is treated as zero so unset balances read as ``0.00``.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise InvalidInputError("Amount must be numeric")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise InvalidInputError(f"Amount must be numeric, got {value!r}") from exc
    else:
        raise InvalidInputError(f"Unsupported amount type: {type(value).__name__}")

    if not result.is_finite():
        raise InvalidInputError("Amount must be a finite number")
    return result.quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(value: Decimal) -> str:
    """Serialize an amount for storage (``"12.50"``)."""
    return str(to_money(value))


def format_money(value: Decimal) -> str:
    """Return ``value`` formatted for messages (``$12.50``, ``-$1.00``)."""
    amount = to_money(value)
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def format_signed(value: Decimal) -> str:
    """Return ``value`` with an explicit sign (``+$2.00``, ``-$1.00``)."""
    amount = to_money(value)
    return f"+{format_money(amount)}" if amount >= 0 else format_money(amount)


def _quantize_money(value: Decimal) -> Decimal:
    if not value.is_finite():
        raise ValueError("Amount must be a finite number")
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


Money = Annotated[Decimal, AfterValidator(_quantize_money)]
NonNegativeMoney = Annotated[Decimal, Field(ge=0), AfterValidator(_quantize_money)]
