from __future__ import annotations

from threading import Lock

from core.results.codec import decode_result, encode_result
from core.results.provider import ResultStore
from core.results.types import JobResult, ResultBackend


class MemoryResultStore(ResultStore):
    backend_name = ResultBackend.MEMORY.value

    def __init__(self) -> None:
        self._records: dict[str, bytes] = {}
        self._lock = Lock()

    def get(self, identifier: str) -> JobResult | None:
        with self._lock:
            raw = self._records.get(identifier)
        if raw is None:
            return None
        return decode_result(identifier, raw)

    def put(self, result: JobResult) -> None:
        # stored encoded so callers never share a mutable record with the store
        value = encode_result(result)
        with self._lock:
            self._records[result.identifier] = value

    def ping(self) -> None:
        return None

    def close(self) -> None:
        with self._lock:
            self._records.clear()
