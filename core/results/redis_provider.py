from __future__ import annotations

from typing import Any

import redis

from core.jobs.errors import PersistenceError, StartupError
from core.results.codec import decode_result, encode_result
from core.results.provider import ResultStore
from core.results.types import JobResult, ResultBackend


class RedisResultStore(ResultStore):
    """Results kept in one Redis hash named after the bucket."""

    backend_name = ResultBackend.REDIS.value

    def __init__(self, client: Any, *, bucket: str = "results") -> None:
        self._client = client
        self._bucket = bucket

    @classmethod
    def from_url(cls, url: str, *, bucket: str = "results", open_timeout: float = 1.0) -> "RedisResultStore":
        client = redis.Redis.from_url(url, socket_connect_timeout=open_timeout)
        try:
            client.ping()
        except redis.RedisError as err:
            raise StartupError(f"could not connect to {url}: {err}") from err
        return cls(client, bucket=bucket)

    def get(self, identifier: str) -> JobResult | None:
        try:
            raw = self._client.hget(self._bucket, identifier.encode("utf-8"))
        except redis.RedisError as err:
            raise PersistenceError(f"could not read result {identifier!r}: {err}") from err

        if raw is None:
            return None
        return decode_result(identifier, raw)

    def put(self, result: JobResult) -> None:
        value = encode_result(result)
        try:
            self._client.hset(self._bucket, result.identifier.encode("utf-8"), value)
        except redis.RedisError as err:
            raise PersistenceError(f"could not store result {result.identifier!r}: {err}") from err

    def ping(self) -> None:
        try:
            self._client.ping()
        except redis.RedisError as err:
            raise PersistenceError(f"result store unavailable: {err}") from err

    def close(self) -> None:
        self._client.close()
