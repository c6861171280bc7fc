"""Gateway proxy function.

Browser clients that cannot hold the Cashfree credentials call this route
with ``{action, orderData, orderId}``. It answers CORS for any origin and
reports every failure as ``{"success": false, "error": ...}`` with status 500.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .deps import get_gateway
from .errors import CanteenError
from .services import CashfreeClient

logger = logging.getLogger("canteen.gateway.proxy")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

router = APIRouter(prefix="/functions", tags=["gateway"])


class ProxyOrderData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    order_id: str
    amount: float = Field(..., gt=0)
    customer_id: str
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    return_url: Optional[str] = None
    notify_url: Optional[str] = None
    order_note: Optional[str] = None


class ProxyRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    action: str
    order_data: Optional[ProxyOrderData] = None
    order_id: Optional[str] = None


def _failure(message: str) -> JSONResponse:
    logger.error("cashfree-payment failed: %s", message)
    return JSONResponse(
        {"success": False, "error": message}, status_code=500, headers=CORS_HEADERS
    )


@router.options("/cashfree-payment")
async def cashfree_preflight() -> Response:
    return Response(headers=CORS_HEADERS)


@router.post("/cashfree-payment")
async def cashfree_payment(
    request: Request, gateway: CashfreeClient = Depends(get_gateway)
) -> JSONResponse:
    try:
        body: Dict[str, Any] = await request.json()
        call = ProxyRequest.model_validate(body)
    except (ValueError, ValidationError) as exc:
        return _failure(f"Invalid request: {exc}")

    try:
        if call.action == "create_order":
            if call.order_data is None:
                return _failure("orderData is required")
            data = call.order_data
            created = await gateway.create_order(
                order_id=data.order_id,
                amount=data.amount,
                customer_id=data.customer_id,
                customer_name=data.customer_name,
                customer_phone=data.customer_phone,
                return_url=data.return_url,
                note=data.order_note,
                customer_email=data.customer_email,
                notify_url=data.notify_url,
            )
            return JSONResponse(created.to_wire(), headers=CORS_HEADERS)
        if call.action == "verify_payment":
            if not call.order_id:
                return _failure("orderId is required")
            verified = await gateway.verify_payment(call.order_id)
            return JSONResponse(verified.to_wire(), headers=CORS_HEADERS)
    except CanteenError as exc:
        return _failure(exc.message)
    return _failure("Invalid action")
