# schemas.py

"""Pydantic models for stored records and API payloads.

Stored records use the camelCase keys of the original browser layout
(``studentId``, ``paymentMethod``...) while Python code reads the snake_case
attribute names. Always dump with ``by_alias=True`` before persisting.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from .domain import OrderStatus


def _whole(value: float) -> Any:
    return int(value) if float(value).is_integer() else value


# Money is held as float and written back as an int when whole.
Amount = Annotated[float, PlainSerializer(_whole, return_type=Any)]


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_store(self) -> dict:
        """Return a JSON-ready mapping keyed by the stored aliases."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PaymentMethod(str, Enum):
    """Payment options offered at checkout."""

    CARD = "card"
    UPI = "upi"
    GPAY = "gpay"
    PHONEPE = "phonepe"

    @property
    def uses_gateway(self) -> bool:
        return self is not PaymentMethod.CARD


class Student(_Record):
    id: str
    name: str
    email: str
    balance: Amount = Field(0, ge=0)
    points: int = Field(0, ge=0)


class MenuItem(_Record):
    id: str
    name: str
    price: Amount = Field(..., ge=0)
    image: str = ""
    category: str
    description: str = ""
    rating: float = 0.0
    is_veg: bool = True
    is_popular: bool = False


class CartItem(_Record):
    id: str
    name: str
    price: Amount = Field(..., ge=0)
    quantity: int = Field(..., ge=1)
    image: str = ""
    category: str = ""


class Order(_Record):
    id: str
    student_id: str
    items: list[CartItem]
    total: Amount
    payment_method: PaymentMethod
    status: OrderStatus = OrderStatus.PENDING
    token: str
    timestamp: int
    cashfree_order_id: Optional[str] = None
    cf_order_id: Optional[str] = None


class TrackingResult(_Record):
    """Outcome of a tracking lookup; ``found`` is ``False`` on a miss."""

    order_id: str
    found: bool
    order: Optional[Order] = None
    step: Optional[int] = None


# Request payloads


class StudentIn(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    id: Optional[str] = None
    balance: Optional[float] = Field(default=None, ge=0)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = Field(default=None, min_length=3)


class CartAdd(BaseModel):
    item_id: str
    quantity: int = 1


class CartQuantity(BaseModel):
    quantity: int


class CheckoutIn(BaseModel):
    payment_method: PaymentMethod = PaymentMethod.UPI
    upi_id: Optional[str] = None
    customer_phone: Optional[str] = None
    return_url: Optional[str] = None


class StatusUpdate(BaseModel):
    status: str


__all__ = [
    "PaymentMethod",
    "Student",
    "MenuItem",
    "CartItem",
    "Order",
    "TrackingResult",
    "StudentIn",
    "ProfileUpdate",
    "CartAdd",
    "CartQuantity",
    "CheckoutIn",
    "StatusUpdate",
]
