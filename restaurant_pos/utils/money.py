"""Decimal helpers for monetary amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from restaurant_pos.core.errors import ValidationError

CENT: Decimal = Decimal("0.01")
ZERO: Decimal = Decimal("0.00")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Return value rounded half-up to cents."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"Not a monetary amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Not a monetary amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal | int | float, currency: str = "") -> str:
    formatted = f"{to_money(value):.2f}"
    return f"{formatted} {currency}".strip()
