"""Menu browsing routes."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter

from . import menu
from .utils.responses import ok

router = APIRouter(prefix="/api/menu", tags=["menu"])


@router.get("")
async def list_menu() -> dict:
    """Return categories, every item and today's offer."""

    return ok(
        {
            "categories": menu.CATEGORIES,
            "items": [item.to_store() for item in menu.MENU_ITEMS],
            "offer": menu.day_offer(date.today()),
        }
    )


@router.get("/{category}")
async def menu_by_category(category: str) -> dict:
    items = menu.by_category(category)
    return ok({"category": category, "count": len(items), "items": [i.to_store() for i in items]})
