"""Order lifecycle: creation from a cart snapshot, status changes and queries.

Status changes are unconditional overwrites unless the book is built with
``strict=True``, in which case only the forward edge from
:data:`~canteen.app.domain.TRANSITIONS` is accepted. Every query is a linear
scan over the full ``orders`` record.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..domain import OrderStatus, can_transition, step_index
from ..errors import IllegalTransition, InvalidStatus, OrderNotFound
from ..events import ORDER_PLACED, ORDER_STATUS_CHANGED, EventBus
from ..schemas import CartItem, Order, PaymentMethod, TrackingResult
from ..storage import ORDERS, KeyValueStore
from .tokens import generate_token

logger = logging.getLogger("canteen.orders")


def now_ms() -> int:
    return int(time.time() * 1000)


def parse_status(value: str | OrderStatus) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise InvalidStatus(f"Unknown order status: {value}") from None


class OrderBook:
    """Create, advance and look up orders."""

    def __init__(
        self,
        store: KeyValueStore,
        bus: EventBus,
        *,
        strict: bool = False,
        token_length: int = 4,
        token_max_attempts: int = 20,
    ) -> None:
        self.store = store
        self.bus = bus
        self.strict = strict
        self.token_length = token_length
        self.token_max_attempts = token_max_attempts
        self._reserved: set[str] = set()

    def _load(self) -> list[Order]:
        return [Order.model_validate(raw) for raw in self.store.get(ORDERS, [])]

    def _save(self, orders: list[Order]) -> None:
        self.store.set(ORDERS, [o.to_store() for o in orders])

    def _new_id(self, orders: list[Order], ts: int) -> str:
        taken = {o.id for o in orders} | self._reserved
        seq = ts
        while f"CF{seq}" in taken:
            seq += 1
        return f"CF{seq}"

    def new_order_id(self, timestamp: int | None = None) -> str:
        """Reserve and return an unused ``CF<epoch-ms>`` order id.

        The id stays reserved until an order is created with it or it is
        handed back through :meth:`release_order_id`.
        """
        order_id = self._new_id(self._load(), timestamp or now_ms())
        self._reserved.add(order_id)
        return order_id

    def release_order_id(self, order_id: str) -> None:
        self._reserved.discard(order_id)

    @staticmethod
    def _open_tokens(orders: list[Order]) -> set[str]:
        return {o.token for o in orders if o.status is not OrderStatus.DELIVERED}

    def create(
        self,
        student_id: str,
        items: Iterable[CartItem],
        total: float,
        payment_method: PaymentMethod,
        *,
        cashfree_order_id: str | None = None,
        cf_order_id: str | None = None,
        order_id: str | None = None,
        timestamp: int | None = None,
    ) -> Order:
        """Persist a new ``pending`` order holding a deep copy of ``items``."""

        orders = self._load()
        ts = timestamp or now_ms()
        order_id = order_id or self._new_id(orders, ts)
        token = generate_token(
            self._open_tokens(orders),
            self.token_length,
            self.token_max_attempts,
        )
        order = Order(
            id=order_id,
            student_id=student_id,
            items=[item.model_copy(deep=True) for item in items],
            total=total,
            payment_method=payment_method,
            status=OrderStatus.PENDING,
            token=token,
            timestamp=ts,
            cashfree_order_id=cashfree_order_id,
            cf_order_id=cf_order_id,
        )
        orders.append(order)
        self._save(orders)
        self._reserved.discard(order.id)
        logger.info("order %s placed token=%s total=%s", order.id, token, total)
        self.bus.emit(ORDER_PLACED, {"orderId": order.id, "token": token})
        return order.model_copy(deep=True)

    def advance(self, order_id: str, status: str | OrderStatus) -> Order:
        """Write ``status`` onto ``order_id``.

        Without ``strict`` any of the four statuses may be written at any
        time, including backwards moves and rewrites of ``delivered``.
        """

        target = parse_status(status)
        orders = self._load()
        for order in orders:
            if order.id == order_id:
                if self.strict and not can_transition(order.status, target):
                    raise IllegalTransition(
                        f"Cannot move order from {order.status.value} to {target.value}"
                    )
                previous = order.status
                order.status = target
                self._save(orders)
                logger.info("order %s %s -> %s", order_id, previous.value, target.value)
                self.bus.emit(
                    ORDER_STATUS_CHANGED,
                    {"orderId": order_id, "from": previous.value, "to": target.value},
                )
                return order
        raise OrderNotFound(f"Order {order_id} not found")

    def list_all(self) -> list[Order]:
        return self._load()

    def for_student(self, student_id: str) -> list[Order]:
        return [o for o in self._load() if o.student_id == student_id]

    def by_status(self, status: str | OrderStatus) -> list[Order]:
        target = parse_status(status)
        return [o for o in self._load() if o.status is target]

    def find(self, order_id: str) -> Order | None:
        return next((o for o in self._load() if o.id == order_id), None)

    def get(self, order_id: str) -> Order:
        order = self.find(order_id)
        if order is None:
            raise OrderNotFound(f"Order {order_id} not found")
        return order

    def track(self, order_id: str) -> TrackingResult:
        """Return the tracking view for ``order_id``; misses are not errors."""

        order = self.find(order_id)
        if order is None:
            return TrackingResult(order_id=order_id, found=False)
        return TrackingResult(
            order_id=order_id, found=True, order=order, step=step_index(order.status)
        )

    def search(self, query: str, orders: list[Order] | None = None) -> list[Order]:
        """Match token, order id or any item name against ``query``."""

        orders = self._load() if orders is None else orders
        if not query:
            return orders
        needle = query.lower()
        return [
            o
            for o in orders
            if query in o.token
            or needle in o.id.lower()
            or any(needle in item.name.lower() for item in o.items)
        ]

    def board(self, query: str = "") -> dict[str, list[Order]]:
        """Group orders matching ``query`` by status, in lifecycle order."""

        matches = self.search(query)
        return {s.value: [o for o in matches if o.status is s] for s in OrderStatus}

    def today_summary(self, now: datetime | None = None) -> dict:
        """Return today's order count, revenue and rounded average order value."""

        now = now or datetime.now()
        today = now.date()
        orders = self._load()
        todays = [
            o for o in orders
            if datetime.fromtimestamp(o.timestamp / 1000).date() == today
        ]
        revenue = sum(o.total for o in todays)
        avg = 0
        if todays:
            avg = int(
                (Decimal(str(revenue)) / len(todays)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            )
        counts = {s.value: 0 for s in OrderStatus}
        for order in orders:
            counts[order.status.value] += 1
        return {
            "ordersToday": len(todays),
            "revenueToday": revenue,
            "averageOrderValue": avg,
            "byStatus": counts,
        }


__all__ = ["OrderBook", "parse_status", "now_ms"]
