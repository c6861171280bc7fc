import asyncio
import json
import pathlib
import sys

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from canteen.app.routes_staff import board_events  # noqa: E402
from canteen.app.schemas import CartItem, PaymentMethod  # noqa: E402


def _place(services, name="Idli", total=32):
    return services.orders.create(
        "MEC2024001",
        [CartItem(id=name.lower(), name=name, price=30, quantity=1)],
        total,
        PaymentMethod.CARD,
    )


def test_board_and_status_changes(client, services):
    first = _place(services)
    second = _place(services, "Samosa", 16)
    board = client.get("/api/staff/orders").json()["data"]
    assert board["counts"] == {"pending": 2, "preparing": 0, "ready": 0, "delivered": 0}

    resp = client.post(f"/api/staff/orders/{first.id}/status", json={"status": "delivered"})
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "delivered"
    resp = client.post(f"/api/staff/orders/{first.id}/status", json={"status": "pending"})
    assert resp.json()["data"]["status"] == "pending"

    filtered = client.get("/api/staff/orders", params={"q": "samosa"}).json()["data"]
    assert [o["id"] for o in filtered["board"]["pending"]] == [second.id]
    assert filtered["board"]["pending"][0]["nextStatus"] == "preparing"
    column = client.get("/api/staff/orders", params={"status": "pending"}).json()["data"]
    assert len(column["orders"]) == 2


def test_status_errors(client, services):
    order = _place(services)
    resp = client.post(f"/api/staff/orders/{order.id}/status", json={"status": "lost"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_STATUS"
    resp = client.post("/api/staff/orders/CF0/status", json={"status": "ready"})
    assert resp.status_code == 404
    resp = client.get("/api/staff/orders", params={"status": "lost"})
    assert resp.status_code == 400


def test_summary(client, services):
    _place(services, total=32)
    _place(services, "Tea", total=17)
    data = client.get("/api/staff/summary").json()["data"]
    assert data["ordersToday"] == 2
    assert data["revenueToday"] == 49
    assert data["averageOrderValue"] == 25


def test_verify_route(client, services, gateway_stub):
    gateway_stub.reply(200, {"order_status": "ACTIVE", "order_amount": 32})
    order = services.orders.create(
        "MEC2024001",
        [CartItem(id="idli", name="Idli", price=30, quantity=1)],
        32,
        PaymentMethod.UPI,
        cashfree_order_id="CFG1",
    )
    data = client.post(f"/api/staff/orders/{order.id}/verify").json()["data"]
    assert data == {
        "success": True,
        "orderStatus": "ACTIVE",
        "orderAmount": 32,
        "paymentStatus": "ACTIVE",
    }
    assert services.orders.get(order.id).status.value == "pending"


def test_board_events_flag_new_orders(services):
    async def _collect():
        frames = []
        ticks = iter([False, False, True])

        async def _disconnected():
            if len(frames) == 1:
                _place(services, "Vada", 21)
            return next(ticks)

        async for frame in board_events(services.orders, services.bus, 0, _disconnected):
            frames.append(frame)
        return frames

    _place(services)
    frames = asyncio.run(_collect())
    assert len(frames) == 3
    payloads = [json.loads(f.split("data: ", 1)[1]) for f in frames]
    assert frames[0].startswith("event: board\nid: 1\n")
    assert [p["newOrders"] for p in payloads] == [False, True, False]
    assert payloads[1]["counts"]["pending"] == 2
    assert payloads[2]["summary"]["ordersToday"] == 2


def test_board_events_wake_on_order_events(services):
    placed = []

    async def _collect():
        frames = []

        async def _disconnected():
            if len(frames) == 1:
                placed.append(_place(services, "Vada", 21))
            elif len(frames) == 2:
                services.orders.advance(placed[0].id, "preparing")
            return len(frames) == 3

        async for frame in board_events(services.orders, services.bus, 30, _disconnected):
            frames.append(frame)
        return frames

    frames = asyncio.run(asyncio.wait_for(_collect(), 5))
    payloads = [json.loads(f.split("data: ", 1)[1]) for f in frames]
    assert [p["newOrders"] for p in payloads] == [False, True, False]
    assert payloads[2]["counts"]["preparing"] == 1
    assert services.bus._subs["order.placed"] == []
