# menu.py

"""Static canteen menu with categories and the weekday offer."""

from __future__ import annotations

from datetime import date

from .errors import MenuItemNotFound
from .schemas import MenuItem

CATEGORIES: list[dict[str, str]] = [
    {"id": "veg", "name": "Veg"},
    {"id": "non-veg", "name": "Non-Veg"},
    {"id": "snacks", "name": "Snacks"},
    {"id": "beverages", "name": "Beverages"},
]

MENU_ITEMS: list[MenuItem] = [
    MenuItem(id="idli", name="Idli (2 pcs)", price=30, category="veg",
             description="Steamed rice cakes with sambar and chutney",
             rating=4.5, is_popular=True, image="/static/images/idli.png"),
    MenuItem(id="masala-dosa", name="Masala Dosa", price=50, category="veg",
             description="Crispy dosa with potato masala",
             rating=4.7, is_popular=True, image="/static/images/masala_dosa.png"),
    MenuItem(id="veg-meals", name="Veg Meals", price=80, category="veg",
             description="Rice, sambar, rasam, poriyal and curd",
             rating=4.3, image="/static/images/veg_meals.png"),
    MenuItem(id="curd-rice", name="Curd Rice", price=40, category="veg",
             description="Tempered curd rice with pickle",
             rating=4.2, image="/static/images/curd_rice.png"),
    MenuItem(id="chicken-biryani", name="Chicken Biryani", price=120,
             category="non-veg", is_veg=False,
             description="Seeraga samba biryani with raita",
             rating=4.8, is_popular=True, image="/static/images/chicken_biryani.png"),
    MenuItem(id="egg-fried-rice", name="Egg Fried Rice", price=70,
             category="non-veg", is_veg=False,
             description="Wok tossed rice with egg",
             rating=4.1, image="/static/images/egg_fried_rice.png"),
    MenuItem(id="chicken-65", name="Chicken 65", price=90, category="non-veg",
             is_veg=False, description="Spicy deep fried chicken",
             rating=4.6, image="/static/images/chicken_65.png"),
    MenuItem(id="samosa", name="Samosa", price=15, category="snacks",
             description="Potato stuffed pastry",
             rating=4.0, image="/static/images/samosa.png"),
    MenuItem(id="vada", name="Medu Vada", price=20, category="snacks",
             description="Crispy lentil doughnut",
             rating=4.4, is_popular=True, image="/static/images/vada.png"),
    MenuItem(id="bajji", name="Bajji", price=20, category="snacks",
             description="Chilli and onion fritters",
             rating=4.1, image="/static/images/bajji.png"),
    MenuItem(id="filter-coffee", name="Filter Coffee", price=20,
             category="beverages", description="Madras filter coffee",
             rating=4.9, is_popular=True, image="/static/images/filter_coffee.png"),
    MenuItem(id="tea", name="Tea", price=15, category="beverages",
             description="Masala chai", rating=4.3, image="/static/images/tea.png"),
    MenuItem(id="lime-juice", name="Fresh Lime Juice", price=25,
             category="beverages", description="Sweet or salted",
             rating=4.2, image="/static/images/lime_juice.png"),
]

# Monday is 0
DAY_OFFERS: dict[int, dict[str, object]] = {
    0: {"title": "Masala Monday", "itemId": "masala-dosa", "discount": 10},
    2: {"title": "Biryani Wednesday", "itemId": "chicken-biryani", "discount": 15},
    4: {"title": "Filter Coffee Friday", "itemId": "filter-coffee", "discount": 20},
}

_BY_ID = {item.id: item for item in MENU_ITEMS}


def get_item(item_id: str) -> MenuItem:
    """Return the menu item ``item_id`` or raise :class:`MenuItemNotFound`."""

    try:
        return _BY_ID[item_id]
    except KeyError:
        raise MenuItemNotFound(f"Unknown menu item: {item_id}") from None


def by_category(category: str) -> list[MenuItem]:
    return [item for item in MENU_ITEMS if item.category == category]


def day_offer(today: date | None = None) -> dict[str, object] | None:
    """Return the offer advertised for ``today``'s weekday, if any."""

    today = today or date.today()
    return DAY_OFFERS.get(today.weekday())
