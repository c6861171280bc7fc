import asyncio
import pathlib
import sys

import httpx
import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from canteen.app.domain import OrderStatus  # noqa: E402
from canteen.app.errors import (  # noqa: E402
    EmptyCart,
    GatewayError,
    InsufficientBalance,
    MissingUpiId,
    NotAuthenticated,
    OrderNotFound,
    UnknownPaymentMethod,
)
from canteen.app.schemas import CartItem, PaymentMethod  # noqa: E402


def _fill(services):
    services.cart.add(CartItem(id="a", name="A", price=50, quantity=2))
    services.cart.add(CartItem(id="b", name="B", price=30, quantity=1))


def test_balance_checkout(services):
    services.students.login("MEC2024001")
    _fill(services)
    result = asyncio.run(services.payments.checkout(PaymentMethod.CARD))
    assert result.grand_total == 137
    assert result.points_earned == 13
    student = services.students.get("MEC2024001")
    assert student.balance == 363
    assert student.points == 63
    assert services.cart.is_empty()
    order = services.orders.get(result.order.id)
    assert order.status is OrderStatus.PENDING
    assert order.total == 137
    assert order.payment_method is PaymentMethod.CARD
    assert order.cashfree_order_id is None
    assert result.to_wire()["token"] == order.token
    stored_student = next(s for s in services.store.get("students") if s["id"] == "MEC2024001")
    assert type(stored_student["balance"]) is int and stored_student["balance"] == 363
    stored_order = services.store.get("orders")[0]
    assert type(stored_order["total"]) is int and stored_order["total"] == 137
    assert type(stored_order["items"][0]["price"]) is int


def test_insufficient_balance_changes_nothing(services):
    services.students.login("MEC2024003")
    for _ in range(3):
        services.cart.add(CartItem(id="biryani", name="Biryani", price=120, quantity=1))
    with pytest.raises(InsufficientBalance):
        services.payments.pay_with_balance()
    student = services.students.get("MEC2024003")
    assert student.balance == 300
    assert student.points == 20
    assert services.cart.item_count() == 3
    assert services.orders.list_all() == []


def test_exact_balance_is_enough(services):
    services.students.register("Edge", "edge@mec.edu", student_id="EDGE", balance=137)
    services.students.login("EDGE")
    _fill(services)
    services.payments.pay_with_balance()
    assert services.students.get("EDGE").balance == 0


def test_preconditions(services):
    with pytest.raises(EmptyCart):
        services.payments.pay_with_balance()
    _fill(services)
    with pytest.raises(NotAuthenticated):
        services.payments.pay_with_balance()
    services.students.login("MEC2024001")
    with pytest.raises(MissingUpiId):
        asyncio.run(services.payments.checkout(PaymentMethod.UPI, upi_id="  "))
    with pytest.raises(UnknownPaymentMethod):
        asyncio.run(services.payments.pay_with_gateway(PaymentMethod.CARD, "x@upi"))


def test_gateway_checkout_records_pending_order(services, gateway_stub):
    gateway_stub.reply(
        200,
        {"order_id": "ignored", "payment_session_id": "sess", "order_status": "ACTIVE", "cf_order_id": 55},
    )
    services.students.login("MEC2024002")
    _fill(services)
    result = asyncio.run(
        services.payments.checkout(PaymentMethod.GPAY, upi_id="priya@okaxis")
    )
    order = services.orders.get(result.order.id)
    assert order.status is OrderStatus.PENDING
    assert order.payment_method is PaymentMethod.GPAY
    assert order.cashfree_order_id == "ignored"
    assert order.cf_order_id == "55"
    sent = gateway_stub.calls[0]["json"]
    assert sent["order_id"] == order.id
    assert sent["order_amount"] == 137
    assert sent["customer_details"]["customer_email"] == "priya@mec.edu"
    student = services.students.get("MEC2024002")
    assert student.balance == 750
    assert student.points == 133
    assert services.cart.is_empty()


def test_gateway_failure_leaves_everything_intact(services, gateway_stub, monkeypatch):
    monkeypatch.setattr("canteen.app.services.orders.now_ms", lambda: 1_700_000_000_000)
    gateway_stub.fail(httpx.ReadTimeout("slow"))
    services.students.login("MEC2024002")
    _fill(services)
    with pytest.raises(GatewayError):
        asyncio.run(services.payments.checkout(PaymentMethod.UPI, upi_id="priya@okaxis"))
    assert services.cart.item_count() == 3
    assert services.orders.list_all() == []
    assert services.students.get("MEC2024002").points == 120
    gateway_stub.reply(200, {"order_id": "CFX", "payment_session_id": "s", "order_status": "ACTIVE"})
    result = asyncio.run(services.payments.checkout(PaymentMethod.UPI, upi_id="priya@okaxis"))
    assert gateway_stub.calls[0]["json"]["order_id"] == "CF1700000000000"
    assert result.order.id == gateway_stub.calls[1]["json"]["order_id"] == "CF1700000000000"


def test_verify_reports_without_mutating(services, gateway_stub):
    gateway_stub.reply(200, {"order_id": "CFX", "payment_session_id": "s", "order_status": "ACTIVE"})
    gateway_stub.reply(200, {"order_status": "PAID", "order_amount": 137})
    services.students.login("MEC2024001")
    _fill(services)
    result = asyncio.run(services.payments.checkout(PaymentMethod.PHONEPE, upi_id="arun@ybl"))
    verification = asyncio.run(services.payments.verify(result.order.id))
    assert verification.paid
    assert gateway_stub.calls[1]["url"].endswith("/orders/CFX")
    assert services.orders.get(result.order.id).status is OrderStatus.PENDING


def test_verify_errors(services):
    with pytest.raises(OrderNotFound):
        asyncio.run(services.payments.verify("CF404"))
    services.students.login("MEC2024001")
    _fill(services)
    order = services.payments.pay_with_balance().order
    with pytest.raises(GatewayError) as excinfo:
        asyncio.run(services.payments.verify(order.id))
    assert excinfo.value.message == "No Cashfree order ID found"
