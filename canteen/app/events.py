# events.py

"""Simple in-memory Pub/Sub dispatcher.

Emitting is fire-and-forget: there is no acknowledgement, no ordering
guarantee between subscribers and no conflict resolution. Listeners are
plain callables run inline; queues are :class:`asyncio.Queue` instances fed
with ``put_nowait``.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

CART_UPDATED = "cart.updated"
ORDER_PLACED = "order.placed"
ORDER_STATUS_CHANGED = "order.status_changed"
STUDENT_UPDATED = "student.updated"

Listener = Callable[[Dict[str, Any]], None]

logger = logging.getLogger("canteen.events")


class EventBus:
    """Dispatch events to listeners and queue subscribers."""

    def __init__(self) -> None:
        self._subs: Dict[str, List[asyncio.Queue]] = defaultdict(list)
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def subscribe(self, *names: str) -> asyncio.Queue:
        """Register interest in every event in ``names`` and return one queue."""

        queue: asyncio.Queue = asyncio.Queue()
        for name in names:
            self._subs[name].append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        for queues in self._subs.values():
            if queue in queues:
                queues.remove(queue)

    def listen(self, name: str, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` for every ``name`` event; return an unsubscriber."""

        self._listeners[name].append(listener)

        def _remove() -> None:
            if listener in self._listeners[name]:
                self._listeners[name].remove(listener)

        return _remove

    def emit(self, name: str, payload: Dict[str, Any]) -> None:
        """Broadcast ``payload`` to all subscribers of ``name`` without waiting."""

        for listener in list(self._listeners.get(name, [])):
            try:
                listener(payload)
            except Exception:
                logger.exception("listener failed for %s", name)
        for queue in self._subs.get(name, []):
            queue.put_nowait(payload)


__all__ = [
    "EventBus",
    "CART_UPDATED",
    "ORDER_PLACED",
    "ORDER_STATUS_CHANGED",
    "STUDENT_UPDATED",
]
