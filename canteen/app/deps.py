"""Dependency wiring for routes.

All mutable application state lives on one :class:`Services` bundle stored
at ``app.state.services``; routes receive the pieces they need through the
``Depends`` helpers below.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Request

from config import Settings

from .events import EventBus
from .services import Cart, CashfreeClient, OrderBook, PaymentAdapter, StudentDirectory
from .storage import KeyValueStore, build_store


@dataclass
class Services:
    settings: Settings
    store: KeyValueStore
    bus: EventBus
    students: StudentDirectory
    cart: Cart
    orders: OrderBook
    gateway: CashfreeClient
    payments: PaymentAdapter


def build_services(
    settings: Settings,
    store: KeyValueStore | None = None,
    gateway: CashfreeClient | None = None,
    bus: EventBus | None = None,
) -> Services:
    """Assemble the service graph for ``settings``."""

    store = store if store is not None else build_store(settings)
    bus = bus or EventBus()
    students = StudentDirectory(store, bus, default_balance=settings.default_balance)
    cart = Cart(store, bus)
    orders = OrderBook(
        store,
        bus,
        strict=settings.strict_status_transitions,
        token_length=settings.token_length,
        token_max_attempts=settings.token_max_attempts,
    )
    gateway = gateway or CashfreeClient.from_settings(settings)
    payments = PaymentAdapter(
        cart,
        orders,
        students,
        gateway,
        tax_rate=settings.tax_rate,
        points_divisor=settings.points_divisor,
    )
    return Services(settings, store, bus, students, cart, orders, gateway, payments)


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_cart(services: Services = Depends(get_services)) -> Cart:
    return services.cart


def get_orders(services: Services = Depends(get_services)) -> OrderBook:
    return services.orders


def get_students(services: Services = Depends(get_services)) -> StudentDirectory:
    return services.students


def get_payments(services: Services = Depends(get_services)) -> PaymentAdapter:
    return services.payments


def get_gateway(services: Services = Depends(get_services)) -> CashfreeClient:
    return services.gateway


__all__ = [
    "Services",
    "build_services",
    "get_services",
    "get_cart",
    "get_orders",
    "get_students",
    "get_payments",
    "get_gateway",
]
