"""Student-facing order routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from .deps import get_orders, get_students
from .services import OrderBook, StudentDirectory
from .utils.responses import err, ok

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("")
async def my_orders(
    students: StudentDirectory = Depends(get_students),
    orders: OrderBook = Depends(get_orders),
) -> dict:
    """Return the current student's orders, newest first."""

    student = students.require_current()
    history = sorted(orders.for_student(student.id), key=lambda o: o.timestamp, reverse=True)
    return ok([o.to_store() for o in history])


@router.get("/{order_id}/track")
async def track_order(order_id: str, orders: OrderBook = Depends(get_orders)):
    """Return the order with its lifecycle step, or a 404 ``found: false``."""

    result = orders.track(order_id)
    if not result.found:
        body = err("ORDER_NOT_FOUND", "We couldn't find this order.")
        body["data"] = result.to_store()
        return JSONResponse(body, status_code=404)
    return ok(result.to_store())
