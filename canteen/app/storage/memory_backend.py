"""In-process storage backend."""

from __future__ import annotations

import json
from typing import Any


class MemoryStore:
    """Keep records as JSON strings so callers never share mutable state."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, name: str, default: Any = None) -> Any:
        raw = self._data.get(name)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, name: str, value: Any) -> None:
        self._data[name] = json.dumps(value)

    def delete(self, name: str) -> None:
        self._data.pop(name, None)
