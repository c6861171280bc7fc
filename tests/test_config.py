# test_config.py
import json
import pathlib
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from config import StorageBackendName, get_settings  # noqa: E402

CONFIG_JSON = Path(__file__).resolve().parents[1] / "config.json"


def _settings():
    get_settings.cache_clear()
    return get_settings()


def test_defaults_from_config(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    settings = _settings()
    data = json.loads(CONFIG_JSON.read_text())
    assert settings.redis_url == data["redis_url"]
    assert settings.tax_rate == data["tax_rate"]
    assert settings.token_length == 4


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://override")
    monkeypatch.setenv("STRICT_STATUS_TRANSITIONS", "true")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.test,https://b.test")
    settings = _settings()
    assert settings.redis_url == "redis://override"
    assert settings.strict_status_transitions is True
    assert settings.allowed_origins == "https://a.test,https://b.test"
    monkeypatch.delenv("REDIS_URL")
    get_settings.cache_clear()


def test_missing_key_uses_default(monkeypatch):
    original = CONFIG_JSON.read_text()
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    monkeypatch.setattr(
        Path,
        "read_text",
        lambda self, *a, **k: json.dumps(
            {k2: v for k2, v in json.loads(original).items() if k2 != "storage_backend"}
        ),
    )
    settings = _settings()
    assert settings.storage_backend == StorageBackendName.MEMORY
    get_settings.cache_clear()


def test_alternate_config_file(monkeypatch, tmp_path):
    alt = tmp_path / "canteen.json"
    alt.write_text(json.dumps({"tax_rate": 0.12, "cashfree_base_url": "https://sandbox.test/pg/"}))
    monkeypatch.setenv("CANTEEN_CONFIG", str(alt))
    monkeypatch.delenv("CASHFREE_BASE_URL", raising=False)
    monkeypatch.delenv("TAX_RATE", raising=False)
    settings = _settings()
    assert settings.tax_rate == 0.12
    assert settings.cashfree_base_url == "https://sandbox.test/pg"
    monkeypatch.delenv("CANTEEN_CONFIG")
    get_settings.cache_clear()


def test_invalid_values_rejected(monkeypatch):
    monkeypatch.setenv("TAX_RATE", "1.5")
    with pytest.raises(ValidationError):
        _settings()
    monkeypatch.delenv("TAX_RATE")
    get_settings.cache_clear()
