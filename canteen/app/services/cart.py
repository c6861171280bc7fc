"""Cart aggregate over the ``cart`` storage record.

The cart is a single list per store, not per student, so several students
sharing one store share one cart.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from ..errors import InvalidQuantity
from ..events import CART_UPDATED, EventBus
from ..pricing import as_number, subtotal
from ..schemas import CartItem
from ..storage import CART, KeyValueStore

logger = logging.getLogger("canteen.cart")


class Cart:
    """Merge-by-id cart; every write broadcasts ``cart.updated``."""

    def __init__(self, store: KeyValueStore, bus: EventBus) -> None:
        self.store = store
        self.bus = bus

    def items(self) -> list[CartItem]:
        return [CartItem.model_validate(raw) for raw in self.store.get(CART, [])]

    def _save(self, items: list[CartItem]) -> list[CartItem]:
        self.store.set(CART, [item.to_store() for item in items])
        self.bus.emit(
            CART_UPDATED,
            {"itemCount": sum(i.quantity for i in items), "total": as_number(subtotal(items))},
        )
        return items

    def add(self, item: CartItem, quantity: int | None = None) -> list[CartItem]:
        """Add ``quantity`` of ``item``, merging with an entry of the same id."""

        qty = item.quantity if quantity is None else quantity
        if qty <= 0:
            raise InvalidQuantity()
        items = self.items()
        existing = next((i for i in items if i.id == item.id), None)
        if existing:
            existing.quantity += qty
        else:
            items.append(item.model_copy(update={"quantity": qty}))
        logger.info("cart add %s x%s", item.id, qty)
        return self._save(items)

    def set_quantity(self, item_id: str, quantity: int) -> list[CartItem]:
        """Overwrite the quantity of ``item_id``; ``quantity <= 0`` removes it."""

        items = self.items()
        if quantity <= 0:
            items = [i for i in items if i.id != item_id]
        else:
            for i in items:
                if i.id == item_id:
                    i.quantity = quantity
        return self._save(items)

    def remove(self, item_id: str) -> list[CartItem]:
        return self._save([i for i in self.items() if i.id != item_id])

    def clear(self) -> list[CartItem]:
        return self._save([])

    def total(self) -> Decimal:
        return subtotal(self.items())

    def item_count(self) -> int:
        return sum(i.quantity for i in self.items())

    def is_empty(self) -> bool:
        return not self.store.get(CART, [])

    def snapshot(self) -> dict:
        """Return the cart view served to clients."""

        items = self.items()
        return {
            "items": [i.to_store() for i in items],
            "itemCount": sum(i.quantity for i in items),
            "total": as_number(subtotal(items)),
        }
