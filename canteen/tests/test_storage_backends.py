import pathlib
import sys

import fakeredis
import pytest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[2]))

from canteen.app.storage import ORDERS, STUDENTS, build_store  # noqa: E402
from canteen.app.storage.local_backend import JsonFileStore  # noqa: E402
from canteen.app.storage.memory_backend import MemoryStore  # noqa: E402
from canteen.app.storage.redis_backend import RedisStore  # noqa: E402
from config import Settings  # noqa: E402


@pytest.fixture(params=["memory", "local", "redis"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    if request.param == "local":
        return JsonFileStore(tmp_path / "nested" / "store.json")
    return RedisStore(fakeredis.FakeRedis(), namespace="test")


def test_get_set_delete(store):
    assert store.get(STUDENTS) is None
    assert store.get(STUDENTS, []) == []
    store.set(STUDENTS, [{"id": "MEC1", "balance": 500}])
    assert store.get(STUDENTS) == [{"id": "MEC1", "balance": 500}]
    store.delete(STUDENTS)
    assert store.get(STUDENTS, []) == []
    store.delete(STUDENTS)


def test_values_are_copies(store):
    store.set(ORDERS, [{"id": "CF1"}])
    value = store.get(ORDERS)
    value.append({"id": "CF2"})
    assert store.get(ORDERS) == [{"id": "CF1"}]


def test_json_file_survives_reopen(tmp_path):
    path = tmp_path / "store.json"
    JsonFileStore(path).set("currentUserId", "MEC2024001")
    assert JsonFileStore(path).get("currentUserId") == "MEC2024001"
    assert not path.with_suffix(".json.tmp").exists()


def test_redis_keys_are_namespaced():
    client = fakeredis.FakeRedis()
    RedisStore(client, namespace="mk").set("cart", [])
    assert client.get("mk:cart") == b"[]"


def test_build_store_selects_backend(tmp_path):
    assert isinstance(build_store(Settings(storage_backend="memory")), MemoryStore)
    local = build_store(Settings(storage_backend="local", storage_path=str(tmp_path / "s.json")))
    assert isinstance(local, JsonFileStore)
    remote = build_store(Settings(storage_backend="redis", redis_url="redis://localhost:6379/0"))
    assert isinstance(remote, RedisStore)
    assert remote.namespace == "canteen"
