"""Domain errors raised by the canteen services.

Each error carries the HTTP status and stable code used by the exception
handler in :mod:`canteen.app.main` to build the error envelope.
"""

from __future__ import annotations


class CanteenError(Exception):
    """Base class for recoverable canteen errors."""

    status_code = 400
    code = "CANTEEN_ERROR"
    message = "Request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class EmptyCart(CanteenError):
    code = "EMPTY_CART"
    message = "Cart is empty"


class NotAuthenticated(CanteenError):
    status_code = 401
    code = "NOT_AUTHENTICATED"
    message = "Please login first"


class InsufficientBalance(CanteenError):
    status_code = 402
    code = "INSUFFICIENT_BALANCE"
    message = "Insufficient balance. Please recharge your card."


class MissingUpiId(CanteenError):
    code = "MISSING_UPI_ID"
    message = "Please enter your UPI ID"


class GatewayError(CanteenError):
    """Wrap any non-success response or network failure from the gateway."""

    status_code = 502
    code = "GATEWAY_ERROR"
    message = "Payment gateway request failed"


class OrderNotFound(CanteenError):
    status_code = 404
    code = "ORDER_NOT_FOUND"
    message = "Order not found"


class InvalidQuantity(CanteenError):
    code = "INVALID_QUANTITY"
    message = "Quantity must be at least 1"


class InvalidStatus(CanteenError):
    code = "INVALID_STATUS"
    message = "Unknown order status"


class IllegalTransition(CanteenError):
    status_code = 409
    code = "ILLEGAL_TRANSITION"
    message = "Order cannot move to that status"


class UnknownPaymentMethod(CanteenError):
    code = "UNKNOWN_PAYMENT_METHOD"
    message = "Unsupported payment method"


class DuplicateStudent(CanteenError):
    status_code = 409
    code = "DUPLICATE_STUDENT"
    message = "Student already registered"


class StudentNotFound(CanteenError):
    status_code = 404
    code = "STUDENT_NOT_FOUND"
    message = "Student not found"


class MenuItemNotFound(CanteenError):
    status_code = 404
    code = "MENU_ITEM_NOT_FOUND"
    message = "Menu item not found"


__all__ = [
    "CanteenError",
    "EmptyCart",
    "NotAuthenticated",
    "InsufficientBalance",
    "MissingUpiId",
    "GatewayError",
    "OrderNotFound",
    "InvalidQuantity",
    "InvalidStatus",
    "IllegalTransition",
    "UnknownPaymentMethod",
    "DuplicateStudent",
    "StudentNotFound",
    "MenuItemNotFound",
]
