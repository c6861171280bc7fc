"""Cashfree payment gateway client.

Two calls are supported: creating a gateway order and reading back its
authoritative status. Every failure, including transport errors and missing
credentials, surfaces as :class:`~canteen.app.errors.GatewayError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from config import Settings

from ..errors import GatewayError

logger = logging.getLogger("canteen.gateway")

DEFAULT_PHONE = "9999999999"
DEFAULT_NOTE = "Madras Kitchen Order"


@dataclass
class GatewayOrder:
    success: bool
    order_id: str
    payment_session_id: Optional[str]
    order_status: Optional[str]
    cf_order_id: Any

    def to_wire(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "orderId": self.order_id,
            "paymentSessionId": self.payment_session_id,
            "orderStatus": self.order_status,
            "cfOrderId": self.cf_order_id,
        }


@dataclass
class GatewayVerification:
    success: bool
    order_status: Optional[str]
    order_amount: Optional[float]
    payment_status: Optional[str]

    @property
    def paid(self) -> bool:
        return self.order_status == "PAID"

    def to_wire(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "orderStatus": self.order_status,
            "orderAmount": self.order_amount,
            "paymentStatus": self.payment_status,
        }


class CashfreeClient:
    """Thin async wrapper over the Cashfree PG orders API."""

    def __init__(
        self,
        base_url: str,
        app_id: str | None,
        secret_key: str | None,
        *,
        api_version: str = "2023-08-01",
        currency: str = "INR",
        timeout: float = 10.0,
        notify_url: str | None = None,
        email_domain: str = "madraskitchen.com",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.app_id = app_id
        self.secret_key = secret_key
        self.api_version = api_version
        self.currency = currency
        self.timeout = timeout
        self.notify_url = notify_url
        self.email_domain = email_domain

    @classmethod
    def from_settings(cls, settings: Settings) -> "CashfreeClient":
        return cls(
            settings.cashfree_base_url,
            settings.cashfree_app_id,
            settings.cashfree_secret_key,
            api_version=settings.cashfree_api_version,
            currency=settings.gateway_currency,
            timeout=settings.gateway_timeout_secs,
            notify_url=settings.gateway_notify_url,
            email_domain=settings.customer_email_domain,
        )

    def _headers(self) -> dict[str, str]:
        if not self.app_id or not self.secret_key:
            logger.error("Missing Cashfree credentials")
            raise GatewayError("Payment gateway not configured")
        return {
            "Content-Type": "application/json",
            "x-client-id": self.app_id,
            "x-client-secret": self.secret_key,
            "x-api-version": self.api_version,
        }

    @staticmethod
    def _decode(resp: httpx.Response, fallback: str) -> dict[str, Any]:
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if resp.status_code >= 400:
            logger.error("Cashfree API error status=%s", resp.status_code)
            raise GatewayError(data.get("message") or fallback)
        return data

    async def create_order(
        self,
        order_id: str,
        amount: float,
        customer_id: str,
        customer_name: str,
        customer_phone: str | None = None,
        return_url: str | None = None,
        note: str | None = None,
        customer_email: str | None = None,
        notify_url: str | None = None,
    ) -> GatewayOrder:
        """Create a gateway order and return its payment session."""

        headers = self._headers()
        payload = {
            "order_id": order_id,
            "order_amount": amount,
            "order_currency": self.currency,
            "customer_details": {
                "customer_id": customer_id,
                "customer_name": customer_name,
                "customer_email": customer_email or f"{customer_id}@{self.email_domain}",
                "customer_phone": customer_phone or DEFAULT_PHONE,
            },
            "order_meta": {
                "return_url": return_url,
                "notify_url": notify_url or self.notify_url,
            },
            "order_note": note or DEFAULT_NOTE,
        }
        logger.info("creating Cashfree order %s amount=%s", order_id, amount)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(f"{self.base_url}/orders", json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise GatewayError(f"Failed to create order: {exc}") from exc
        data = self._decode(resp, "Failed to create order")
        return GatewayOrder(
            success=True,
            order_id=data.get("order_id", order_id),
            payment_session_id=data.get("payment_session_id"),
            order_status=data.get("order_status"),
            cf_order_id=data.get("cf_order_id"),
        )

    async def verify_payment(self, order_id: str) -> GatewayVerification:
        """Return the gateway's authoritative state for ``order_id``."""

        headers = self._headers()
        logger.info("verifying Cashfree order %s", order_id)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(f"{self.base_url}/orders/{order_id}", headers=headers)
        except httpx.HTTPError as exc:
            raise GatewayError(f"Failed to verify payment: {exc}") from exc
        data = self._decode(resp, "Failed to verify payment")
        status = data.get("order_status")
        return GatewayVerification(
            success=True,
            order_status=status,
            order_amount=data.get("order_amount"),
            payment_status="SUCCESS" if status == "PAID" else status,
        )


__all__ = ["CashfreeClient", "GatewayOrder", "GatewayVerification"]
