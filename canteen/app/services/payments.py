"""Checkout: turn the current cart into an order through one of two paths.

``card`` pays from the student's stored balance synchronously. Every other
method goes through the Cashfree gateway: the order is recorded as
``pending`` as soon as the gateway accepts the create call, and payment
verification is a separate staff action that only reports the gateway state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from ..errors import (
    EmptyCart,
    GatewayError,
    InsufficientBalance,
    MissingUpiId,
    UnknownPaymentMethod,
)
from ..pricing import as_number, grand_total, points_for, quote
from ..schemas import CartItem, Order, PaymentMethod, Student
from .cart import Cart
from .gateway import CashfreeClient, GatewayVerification
from .orders import OrderBook
from .students import StudentDirectory

logger = logging.getLogger("canteen.payments")


@dataclass
class CheckoutResult:
    order: Order
    grand_total: float
    points_earned: int

    def to_wire(self) -> dict:
        return {
            "order": self.order.to_store(),
            "token": self.order.token,
            "grandTotal": self.grand_total,
            "pointsEarned": self.points_earned,
        }


class PaymentAdapter:
    def __init__(
        self,
        cart: Cart,
        orders: OrderBook,
        students: StudentDirectory,
        gateway: CashfreeClient,
        *,
        tax_rate: float = 0.05,
        points_divisor: int = 10,
    ) -> None:
        self.cart = cart
        self.orders = orders
        self.students = students
        self.gateway = gateway
        self.tax_rate = tax_rate
        self.points_divisor = points_divisor

    def quote(self) -> dict:
        return quote(self.cart.items(), self.tax_rate, self.points_divisor)

    def _preconditions(self) -> tuple[Student, list[CartItem], Decimal]:
        items = self.cart.items()
        if not items:
            raise EmptyCart()
        student = self.students.require_current()
        return student, items, grand_total(items, self.tax_rate)

    def pay_with_balance(self) -> CheckoutResult:
        """Debit the stored balance and place the order.

        Validation happens before any write and nothing here awaits, so no
        other request can interleave between the balance check and the debit.
        """

        student, items, total = self._preconditions()
        if Decimal(str(student.balance)) < total:
            logger.info("insufficient balance for %s", student.id)
            raise InsufficientBalance()

        points = points_for(total, self.points_divisor)
        amount = as_number(total)
        self.students.save(
            student.model_copy(
                update={
                    "balance": as_number(Decimal(str(student.balance)) - total),
                    "points": student.points + points,
                }
            )
        )
        order = self.orders.create(student.id, items, amount, PaymentMethod.CARD)
        self.cart.clear()
        return CheckoutResult(order=order, grand_total=amount, points_earned=points)

    async def pay_with_gateway(
        self,
        method: PaymentMethod,
        upi_id: str | None,
        customer_phone: str | None = None,
        return_url: str | None = None,
    ) -> CheckoutResult:
        """Create the gateway order, then record the local order optimistically.

        A failed gateway call leaves cart, student and orders untouched.
        """

        if not method.uses_gateway:
            raise UnknownPaymentMethod(f"{method.value} is not a gateway method")
        student, items, total = self._preconditions()
        if not upi_id or not upi_id.strip():
            raise MissingUpiId()

        amount = as_number(total)
        order_id = self.orders.new_order_id()
        try:
            created = await self.gateway.create_order(
                order_id=order_id,
                amount=amount,
                customer_id=student.id,
                customer_name=student.name,
                customer_phone=customer_phone,
                return_url=return_url,
                note=f"Canteen order {order_id} via {method.value}",
                customer_email=student.email,
            )
        except GatewayError:
            self.orders.release_order_id(order_id)
            raise

        # The student record may have changed during the gateway call.
        student = self.students.get(student.id)
        points = points_for(total, self.points_divisor)
        order = self.orders.create(
            student.id,
            items,
            amount,
            method,
            order_id=order_id,
            cashfree_order_id=created.order_id,
            cf_order_id=None if created.cf_order_id is None else str(created.cf_order_id),
        )
        self.students.save(student.model_copy(update={"points": student.points + points}))
        self.cart.clear()
        logger.info("gateway order %s created session=%s", order_id, created.payment_session_id)
        return CheckoutResult(order=order, grand_total=amount, points_earned=points)

    async def checkout(
        self,
        method: PaymentMethod,
        upi_id: str | None = None,
        customer_phone: str | None = None,
        return_url: str | None = None,
    ) -> CheckoutResult:
        if method is PaymentMethod.CARD:
            return self.pay_with_balance()
        return await self.pay_with_gateway(method, upi_id, customer_phone, return_url)

    async def verify(self, order_id: str) -> GatewayVerification:
        """Ask the gateway for the state of ``order_id`` without touching it."""

        order = self.orders.get(order_id)
        if not order.cashfree_order_id:
            raise GatewayError("No Cashfree order ID found")
        return await self.gateway.verify_payment(order.cashfree_order_id)


__all__ = ["PaymentAdapter", "CheckoutResult"]
