"""Redis-backed storage."""

from __future__ import annotations

import json
from typing import Any

import redis


class RedisStore:
    """Store each record as a JSON string under ``<namespace>:<name>``."""

    def __init__(self, client: redis.Redis, namespace: str = "canteen") -> None:
        self.client = client
        self.namespace = namespace

    @classmethod
    def from_url(cls, url: str, namespace: str = "canteen") -> "RedisStore":
        return cls(redis.Redis.from_url(url, decode_responses=True), namespace)

    def _key(self, name: str) -> str:
        return f"{self.namespace}:{name}"

    def get(self, name: str, default: Any = None) -> Any:
        raw = self.client.get(self._key(name))
        if raw is None:
            return default
        if isinstance(raw, bytes):
            raw = raw.decode()
        return json.loads(raw)

    def set(self, name: str, value: Any) -> None:
        self.client.set(self._key(name), json.dumps(value))

    def delete(self, name: str) -> None:
        self.client.delete(self._key(name))
