"""Checkout routes for the balance and gateway payment paths."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .deps import get_payments
from .schemas import CheckoutIn
from .services import PaymentAdapter
from .utils.responses import ok

router = APIRouter(prefix="/api/checkout", tags=["checkout"])


@router.get("/quote")
async def checkout_quote(payments: PaymentAdapter = Depends(get_payments)) -> dict:
    return ok(payments.quote())


@router.post("")
async def checkout(
    payload: CheckoutIn, payments: PaymentAdapter = Depends(get_payments)
) -> dict:
    """Pay for the current cart and return the placed order with its token."""

    result = await payments.checkout(
        payload.payment_method,
        upi_id=payload.upi_id,
        customer_phone=payload.customer_phone,
        return_url=payload.return_url,
    )
    return ok(result.to_wire())
