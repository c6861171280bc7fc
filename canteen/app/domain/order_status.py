"""Order status enumeration and allowed transitions."""

from __future__ import annotations

from enum import Enum


class OrderStatus(str, Enum):
    """Enumerate the lifecycle states for an order."""

    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"


TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.PREPARING],
    OrderStatus.PREPARING: [OrderStatus.READY],
    OrderStatus.READY: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [],
}

LIFECYCLE: list[OrderStatus] = list(OrderStatus)


def can_transition(src: OrderStatus, dst: OrderStatus) -> bool:
    """Return ``True`` if an order can move from ``src`` to ``dst``."""

    return dst in TRANSITIONS.get(src, [])


def next_status(status: OrderStatus) -> OrderStatus | None:
    """Return the forward successor of ``status`` or ``None`` when terminal."""

    nxt = TRANSITIONS.get(status, [])
    return nxt[0] if nxt else None


def step_index(status: OrderStatus) -> int:
    """Return the zero-based position of ``status`` in the lifecycle."""

    return LIFECYCLE.index(status)
