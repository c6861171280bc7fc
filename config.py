# config.py

"""Canteen settings.

Defaults live in ``config.json`` next to this module (or the file named by
``CANTEEN_CONFIG``); environment variables win over the file.
"""

from __future__ import annotations

import json
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackendName(str, Enum):
    """Select where the canteen records live.

    ``MEMORY`` keeps everything in process and is the default for tests,
    ``LOCAL`` writes a single JSON document to ``storage_path`` and ``REDIS``
    stores one key per record under ``redis_namespace``.
    """

    MEMORY = "memory"
    LOCAL = "local"
    REDIS = "redis"


class Settings(BaseSettings):
    """Application settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    storage_backend: StorageBackendName = StorageBackendName.MEMORY
    storage_path: str = "./canteen_store.json"
    redis_url: str = "redis://localhost:6379/0"
    redis_namespace: str = "canteen"
    tax_rate: float = Field(0.05, ge=0, lt=1)
    points_divisor: int = Field(10, ge=1)
    default_balance: int = Field(500, ge=0)
    token_length: int = Field(4, ge=3, le=8)
    token_max_attempts: int = Field(20, ge=1)
    strict_status_transitions: bool = False
    dashboard_poll_secs: float = Field(5.0, gt=0)
    cashfree_base_url: str = "https://api.cashfree.com/pg"
    cashfree_app_id: str | None = None
    cashfree_secret_key: str | None = None
    cashfree_api_version: str = "2023-08-01"
    gateway_currency: str = "INR"
    gateway_timeout_secs: float = 10.0
    gateway_notify_url: str | None = None
    customer_email_domain: str = "madraskitchen.com"
    allowed_origins: str = ""
    seed_demo_students: bool = True

    @field_validator("cashfree_base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")


def _config_path() -> Path:
    override = os.getenv("CANTEEN_CONFIG")
    return Path(override) if override else Path(__file__).with_name("config.json")


@lru_cache
def get_settings() -> Settings:
    """Build :class:`Settings` once per process.

    Call ``get_settings.cache_clear()`` after changing the environment.
    """

    path = _config_path()
    file_values = json.loads(path.read_text()) if path.exists() else {}
    env_values = {
        key.lower(): value
        for key, value in os.environ.items()
        if key.lower() in Settings.model_fields
    }
    return Settings(**{**file_values, **env_values})
