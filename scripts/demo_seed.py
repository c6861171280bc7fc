#!/usr/bin/env python3
"""Seed demo students into the configured store.

The store is selected by the usual settings (``STORAGE_BACKEND`` and
friends). Pass ``--reset`` to clear orders, the cart and the current user
before seeding; existing students are replaced by the demo set.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from canteen.app.services.students import DEMO_STUDENTS  # noqa: E402
from canteen.app.storage import ORDERS, RECORDS, STUDENTS, KeyValueStore, build_store  # noqa: E402
from config import get_settings  # noqa: E402


def _reset(store: KeyValueStore) -> None:
    """Drop orders, cart, selection and students."""

    for name in RECORDS:
        store.delete(name)


def seed(store: KeyValueStore, reset: bool = False) -> dict[str, object]:
    """Write the demo students and return a summary of the store."""

    if reset:
        _reset(store)
    if not store.get(STUDENTS, []):
        store.set(STUDENTS, DEMO_STUDENTS)
    return {
        "students": [s["id"] for s in store.get(STUDENTS, [])],
        "orders": len(store.get(ORDERS, [])),
    }


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed demo canteen students")
    parser.add_argument(
        "--reset", action="store_true", help="Clear orders and cart before seeding"
    )
    args = parser.parse_args(argv)
    store = build_store(get_settings())
    print(json.dumps(seed(store, args.reset)))


if __name__ == "__main__":
    main()
