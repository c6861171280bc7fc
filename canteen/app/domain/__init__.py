"""Domain models and helpers."""

from .order_status import (
    LIFECYCLE,
    TRANSITIONS,
    OrderStatus,
    can_transition,
    next_status,
    step_index,
)

__all__ = [
    "OrderStatus",
    "TRANSITIONS",
    "LIFECYCLE",
    "can_transition",
    "next_status",
    "step_index",
]
