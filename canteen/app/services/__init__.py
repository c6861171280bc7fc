"""Service layer for the canteen: cart, orders, students and payments."""

from .cart import Cart
from .gateway import CashfreeClient
from .orders import OrderBook
from .payments import CheckoutResult, PaymentAdapter
from .students import StudentDirectory

__all__ = [
    "Cart",
    "CashfreeClient",
    "OrderBook",
    "PaymentAdapter",
    "CheckoutResult",
    "StudentDirectory",
]
