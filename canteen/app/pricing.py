"""Helpers for cart totals, tax and loyalty points."""

from __future__ import annotations

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Union

from .schemas import CartItem

WHOLE = Decimal("1")

Line = Union[CartItem, Mapping[str, object]]


def as_number(value: Decimal) -> float | int:
    """Return ``value`` as ``int`` when whole, else ``float``."""

    return int(value) if value == value.to_integral_value() else float(value)


def _line(item: Line) -> tuple[Decimal, Decimal]:
    if isinstance(item, CartItem):
        return Decimal(str(item.price)), Decimal(item.quantity)
    return Decimal(str(item["price"])), Decimal(str(item.get("quantity", 1)))


def subtotal(items: Iterable[Line]) -> Decimal:
    """Return the sum of ``price * quantity`` over ``items``."""

    total = Decimal("0")
    for item in items:
        price, qty = _line(item)
        total += price * qty
    return total


def tax(amount: Decimal, rate: float) -> Decimal:
    """Return tax on ``amount`` rounded half up to whole currency units."""

    return (amount * Decimal(str(rate))).quantize(WHOLE, rounding=ROUND_HALF_UP)


def grand_total(items: Iterable[Line], rate: float) -> Decimal:
    """Return subtotal plus tax for ``items``."""

    sub = subtotal(items)
    return sub + tax(sub, rate)


def points_for(amount: Decimal | float, divisor: int) -> int:
    """Return loyalty points earned for ``amount``: ``floor(amount / divisor)``."""

    if divisor <= 0:
        return 0
    value = Decimal(str(amount)) / Decimal(divisor)
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def quote(items: Iterable[Line], rate: float, divisor: int) -> dict:
    """Return the checkout summary shown before payment."""

    lines = list(items)
    sub = subtotal(lines)
    tx = tax(sub, rate)
    total = sub + tx
    return {
        "subtotal": as_number(sub),
        "tax": as_number(tx),
        "grandTotal": as_number(total),
        "points": points_for(total, divisor),
    }


__all__ = ["subtotal", "tax", "grand_total", "points_for", "quote", "as_number"]
