from __future__ import annotations

import threading
import time
from typing import Iterator

import pytest

from core.jobs.errors import ExecutionError
from core.jobs.queue import JobQueue
from core.results.memory_provider import MemoryResultStore
from core.settings import Settings
from services.job_service import JobService


class FakeExecutor:
    """Deterministic stand-in for the external command."""

    def __init__(
        self,
        chunks: list[bytes] | None = None,
        *,
        delay: float = 0.0,
        returncode: int = 0,
        launch_error: bool = False,
        pause_after: int | None = None,
    ) -> None:
        self.chunks = list(chunks if chunks is not None else [b"line 1\n", b"line 2\n"])
        self.delay = delay
        self.returncode = returncode
        self.launch_error = launch_error
        self.pause_after = pause_after
        self.paused = threading.Event()
        self.resume = threading.Event()
        self.calls: list[str] = []

    def execute(self, identifier: str) -> Iterator[bytes]:
        self.calls.append(identifier)
        if self.launch_error:
            raise ExecutionError("could not launch 'fake': no such file")
        return self._run()

    def _run(self) -> Iterator[bytes]:
        for index, chunk in enumerate(self.chunks):
            if self.pause_after is not None and index == self.pause_after:
                self.paused.set()
                self.resume.wait(timeout=5)
            if self.delay:
                time.sleep(self.delay)
            yield chunk
        if self.returncode != 0:
            raise ExecutionError(f"'fake' exited with status {self.returncode}", returncode=self.returncode)


def make_settings(**overrides) -> Settings:
    values = {
        "env": "test",
        "host": "127.0.0.1",
        "port": 8000,
        "log_level": "INFO",
        "debug_include_error_details": False,
        "result_store_backend": "memory",
        "result_store_path": "results.db",
        "result_bucket": "results",
        "result_store_open_timeout": 1.0,
        "redis_url": "redis://127.0.0.1:6379/0",
        "job_queue_capacity": 100,
        "job_admission_ratio": 0.75,
        "job_command": "vmstat 1 5",
        "worker_shutdown_timeout": 1.0,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def fake_executor() -> FakeExecutor:
    return FakeExecutor()


@pytest.fixture
def store() -> MemoryResultStore:
    return MemoryResultStore()


@pytest.fixture
def job_service(store: MemoryResultStore, fake_executor: FakeExecutor) -> JobService:
    return JobService(queue=JobQueue(100), store=store, executor=fake_executor)
