"""Cart routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import menu
from .deps import get_cart
from .errors import InvalidQuantity
from .schemas import CartAdd, CartItem, CartQuantity
from .services import Cart
from .utils.responses import ok

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("")
async def view_cart(cart: Cart = Depends(get_cart)) -> dict:
    return ok(cart.snapshot())


@router.post("/items")
async def add_item(payload: CartAdd, cart: Cart = Depends(get_cart)) -> dict:
    """Add a menu item; price and name always come from the menu."""

    if payload.quantity <= 0:
        raise InvalidQuantity()
    item = menu.get_item(payload.item_id)
    cart.add(
        CartItem(
            id=item.id,
            name=item.name,
            price=item.price,
            quantity=payload.quantity,
            image=item.image,
            category=item.category,
        )
    )
    return ok(cart.snapshot())


@router.patch("/items/{item_id}")
async def set_quantity(
    item_id: str, payload: CartQuantity, cart: Cart = Depends(get_cart)
) -> dict:
    cart.set_quantity(item_id, payload.quantity)
    return ok(cart.snapshot())


@router.delete("/items/{item_id}")
async def remove_item(item_id: str, cart: Cart = Depends(get_cart)) -> dict:
    cart.remove(item_id)
    return ok(cart.snapshot())


@router.delete("")
async def clear_cart(cart: Cart = Depends(get_cart)) -> dict:
    cart.clear()
    return ok(cart.snapshot())
