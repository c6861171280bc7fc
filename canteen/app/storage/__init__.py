"""Storage backend selector.

Provides a narrow ``get``/``set`` interface over the named canteen records
(``students``, ``orders``, ``currentUserId`` and ``cart``) backed by an
in-process dict, a JSON file on disk or Redis. The backend is chosen via the
``storage_backend`` setting (``memory`` by default).
"""

from __future__ import annotations

from typing import Any, Protocol

from config import Settings, StorageBackendName

STUDENTS = "students"
ORDERS = "orders"
CURRENT_USER = "currentUserId"
CART = "cart"

RECORDS = (STUDENTS, ORDERS, CURRENT_USER, CART)


class KeyValueStore(Protocol):
    """Minimal protocol implemented by storage backends."""

    def get(self, name: str, default: Any = None) -> Any:
        """Return the decoded value stored under ``name`` or ``default``."""

    def set(self, name: str, value: Any) -> None:
        """Replace the value stored under ``name``."""

    def delete(self, name: str) -> None:
        """Remove ``name`` if present."""


def build_store(settings: Settings) -> KeyValueStore:
    """Return the backend configured by ``settings.storage_backend``."""

    backend = StorageBackendName(settings.storage_backend)
    if backend is StorageBackendName.REDIS:
        from .redis_backend import RedisStore

        return RedisStore.from_url(settings.redis_url, namespace=settings.redis_namespace)
    if backend is StorageBackendName.LOCAL:
        from .local_backend import JsonFileStore

        return JsonFileStore(settings.storage_path)
    from .memory_backend import MemoryStore

    return MemoryStore()


__all__ = [
    "KeyValueStore",
    "build_store",
    "STUDENTS",
    "ORDERS",
    "CURRENT_USER",
    "CART",
    "RECORDS",
]
