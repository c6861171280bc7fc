"""Staff dashboard: order board, daily summary, status changes and a live
event stream.

The stream sends ``event: board`` with the grouped board and the summary as
soon as an order is placed or changes status, and at least every
``dashboard_poll_secs`` otherwise. The ``newOrders`` flag is set when the
order count grew since the previous frame.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import StreamingResponse

from .deps import Services, get_orders, get_payments, get_services
from .domain import next_status
from .events import ORDER_PLACED, ORDER_STATUS_CHANGED, EventBus
from .schemas import Order, StatusUpdate
from .services import OrderBook, PaymentAdapter
from .services.orders import parse_status
from .utils.responses import ok

logger = logging.getLogger("canteen.staff")

router = APIRouter(prefix="/api/staff", tags=["staff"])


def _card(order: Order) -> dict:
    nxt = next_status(order.status)
    return {**order.to_store(), "nextStatus": nxt.value if nxt else None}


def board_payload(orders: OrderBook, query: str = "") -> dict:
    board = orders.board(query)
    return {
        "board": {status: [_card(o) for o in items] for status, items in board.items()},
        "counts": {status: len(items) for status, items in board.items()},
    }


@router.get("/orders")
async def staff_board(
    q: str = "",
    status: Optional[str] = Query(default=None),
    orders: OrderBook = Depends(get_orders),
) -> dict:
    """Return orders grouped by status; ``status`` narrows to one column."""

    if status:
        matches = orders.search(q, orders.by_status(parse_status(status)))
        return ok({"status": status, "orders": [o.to_store() for o in matches]})
    return ok(board_payload(orders, q))


@router.get("/summary")
async def staff_summary(orders: OrderBook = Depends(get_orders)) -> dict:
    return ok(orders.today_summary())


@router.post("/orders/{order_id}/status")
async def change_status(
    order_id: str, payload: StatusUpdate, orders: OrderBook = Depends(get_orders)
) -> dict:
    order = orders.advance(order_id, payload.status)
    return ok(order.to_store())


@router.post("/orders/{order_id}/verify")
async def verify_payment(
    order_id: str, payments: PaymentAdapter = Depends(get_payments)
) -> dict:
    """Report the gateway's payment state; the order itself is left as is."""

    result = await payments.verify(order_id)
    return ok(result.to_wire())


async def board_events(
    orders: OrderBook,
    bus: EventBus,
    poll_secs: float,
    is_disconnected: Callable[[], Awaitable[bool]],
) -> AsyncIterator[str]:
    """Yield a board frame on every order event, or after ``poll_secs`` of quiet."""

    queue = bus.subscribe(ORDER_PLACED, ORDER_STATUS_CHANGED)
    seq = 0
    last_count: Optional[int] = None
    try:
        while True:
            payload = board_payload(orders)
            payload["summary"] = orders.today_summary()
            count = sum(payload["counts"].values())
            payload["newOrders"] = last_count is not None and count > last_count
            last_count = count
            seq += 1
            yield f"event: board\nid: {seq}\ndata: {json.dumps(payload)}\n\n"
            if await is_disconnected():
                break
            try:
                await asyncio.wait_for(queue.get(), poll_secs)
            except asyncio.TimeoutError:
                pass
            # one frame covers every event that arrived meanwhile
            while not queue.empty():
                queue.get_nowait()
    finally:
        bus.unsubscribe(queue)


@router.get(
    "/orders/stream",
    response_class=StreamingResponse,
    responses={200: {"content": {"text/event-stream": {}}}},
)
async def stream_board(
    request: Request, services: Services = Depends(get_services)
) -> StreamingResponse:
    logger.info("staff board stream opened")
    return StreamingResponse(
        board_events(
            services.orders,
            services.bus,
            services.settings.dashboard_poll_secs,
            request.is_disconnected,
        ),
        media_type="text/event-stream",
    )
