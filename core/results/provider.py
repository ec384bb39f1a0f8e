from __future__ import annotations

from typing import Protocol

from core.results.types import JobResult


class ResultStore(Protocol):
    backend_name: str

    def get(self, identifier: str) -> JobResult | None:
        ...

    def put(self, result: JobResult) -> None:
        ...

    def ping(self) -> None:
        ...

    def close(self) -> None:
        ...
