"""Filesystem-based storage backend."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


class JsonFileStore:
    """Persist every record in one JSON document at ``path``.

    Each write rewrites the whole document through a temporary file and an
    atomic rename, so a crash never leaves a half-written file behind.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        text = self.path.read_text(encoding="utf-8")
        return json.loads(text) if text.strip() else {}

    def _dump(self, data: dict[str, Any]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data), encoding="utf-8")
        os.replace(tmp, self.path)

    def get(self, name: str, default: Any = None) -> Any:
        return self._load().get(name, default)

    def set(self, name: str, value: Any) -> None:
        data = self._load()
        data[name] = value
        self._dump(data)

    def delete(self, name: str) -> None:
        data = self._load()
        if name in data:
            del data[name]
            self._dump(data)
