from __future__ import annotations

import sqlite3

import pytest
import redis

from conftest import make_settings
from core.jobs.errors import PersistenceError, StartupError
from core.results import manager as manager_module
from core.results.manager import open_result_store
from core.results.memory_provider import MemoryResultStore
from core.results.redis_provider import RedisResultStore
from core.results.sqlite_provider import SqliteResultStore
from core.results.types import JobResult


class _StubRedis:
    def __init__(self, *, fail: bool = False) -> None:
        self.hashes: dict[str, dict[bytes, bytes]] = {}
        self.fail = fail
        self.closed = False

    def _check(self) -> None:
        if self.fail:
            raise redis.ConnectionError("connection refused")

    def hget(self, name: str, key: bytes):
        self._check()
        return self.hashes.get(name, {}).get(key)

    def hset(self, name: str, key: bytes, value: bytes) -> int:
        self._check()
        self.hashes.setdefault(name, {})[key] = value
        return 1

    def ping(self) -> bool:
        self._check()
        return True

    def close(self) -> None:
        self.closed = True


@pytest.fixture(params=["memory", "sqlite", "redis"])
def any_store(request, tmp_path):
    if request.param == "memory":
        store = MemoryResultStore()
    elif request.param == "sqlite":
        store = SqliteResultStore(str(tmp_path / "results.db"))
    else:
        store = RedisResultStore(_StubRedis())
    yield store
    store.close()


def test_get_missing_returns_none(any_store):
    assert any_store.get("never-submitted") is None


def test_put_overwrites_whole_record(any_store):
    any_store.put(JobResult(identifier="alpha", finished=True, output=b"old output"))
    any_store.put(JobResult(identifier="alpha"))

    assert any_store.get("alpha") == JobResult(identifier="alpha", finished=False, output=b"")


def test_records_are_keyed_by_identifier(any_store):
    any_store.put(JobResult(identifier="a", output=b"1"))
    any_store.put(JobResult(identifier="b", output=b"2"))

    assert any_store.get("a").output == b"1"
    assert any_store.get("b").output == b"2"
    any_store.ping()


def test_stored_record_is_not_shared_with_caller(any_store):
    result = JobResult(identifier="alpha", output=b"one")
    any_store.put(result)
    result.output += b"two"

    assert any_store.get("alpha").output == b"one"


def test_sqlite_store_survives_reopen(tmp_path):
    path = str(tmp_path / "nested" / "results.db")
    store = SqliteResultStore(path, bucket="jobs")
    store.put(JobResult(identifier="github.com/user/pkg", finished=True, output=b"done"))
    store.close()

    reopened = SqliteResultStore(path, bucket="jobs")
    assert reopened.get("github.com/user/pkg") == JobResult("github.com/user/pkg", True, b"done")
    reopened.close()


def test_sqlite_store_reports_corrupt_value(tmp_path):
    path = str(tmp_path / "results.db")
    store = SqliteResultStore(path)
    conn = sqlite3.connect(path)
    with conn:
        conn.execute("INSERT INTO results (key, value) VALUES (?, ?)", (b"broken", b"garbage"))
    conn.close()

    with pytest.raises(PersistenceError):
        store.get("broken")
    store.close()


def test_sqlite_store_open_failure_is_startup_error(tmp_path):
    with pytest.raises(StartupError):
        SqliteResultStore(str(tmp_path))


def test_redis_store_translates_client_errors():
    store = RedisResultStore(_StubRedis(fail=True))

    with pytest.raises(PersistenceError):
        store.get("alpha")
    with pytest.raises(PersistenceError):
        store.put(JobResult(identifier="alpha"))
    with pytest.raises(PersistenceError):
        store.ping()


def test_redis_store_uses_bucket_as_hash_name():
    client = _StubRedis()
    store = RedisResultStore(client, bucket="results")
    store.put(JobResult(identifier="alpha"))

    assert b"alpha" in client.hashes["results"]


def test_redis_from_url_fails_startup_when_unreachable(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(redis.Redis, "from_url", classmethod(lambda cls, url, **kwargs: _StubRedis(fail=True)))

    with pytest.raises(StartupError):
        RedisResultStore.from_url("redis://127.0.0.1:1/0")


def test_open_result_store_builds_configured_backend(tmp_path, monkeypatch: pytest.MonkeyPatch):
    sqlite_store = open_result_store(
        make_settings(result_store_backend="sqlite", result_store_path=str(tmp_path / "r.db"))
    )
    assert isinstance(sqlite_store, SqliteResultStore)
    sqlite_store.close()

    assert isinstance(open_result_store(make_settings(result_store_backend="memory")), MemoryResultStore)

    monkeypatch.setattr(
        manager_module.RedisResultStore,
        "from_url",
        classmethod(lambda cls, url, **kwargs: cls(_StubRedis(), bucket=kwargs["bucket"])),
    )
    assert isinstance(open_result_store(make_settings(result_store_backend="redis")), RedisResultStore)


def test_open_result_store_rejects_unknown_backend():
    with pytest.raises(StartupError):
        open_result_store(make_settings(result_store_backend="bolt"))
