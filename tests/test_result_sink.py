from __future__ import annotations

import logging

import pytest

from core.jobs.errors import PersistenceError
from core.jobs.tracker import InFlightTracker
from core.results.memory_provider import MemoryResultStore
from core.results.sink import ResultSink
from core.results.types import JobResult


class _FlakyStore(MemoryResultStore):
    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures
        self.put_calls = 0

    def put(self, result: JobResult) -> None:
        self.put_calls += 1
        if self.failures > 0:
            self.failures -= 1
            raise PersistenceError("disk full")
        super().put(result)


def test_each_append_persists_the_whole_record(store):
    sink = ResultSink(store, JobResult(identifier="alpha"))

    sink.append(b"first ")
    assert store.get("alpha") == JobResult("alpha", False, b"first ")

    sink.append(b"second")
    assert store.get("alpha") == JobResult("alpha", False, b"first second")


def test_finalize_marks_finished(store):
    sink = ResultSink(store, JobResult(identifier="alpha"))
    sink.append(b"out")
    sink.finalize()

    assert store.get("alpha") == JobResult("alpha", True, b"out")


def test_empty_chunks_are_ignored(store):
    sink = ResultSink(store, JobResult(identifier="alpha"))
    sink.append(b"")

    assert store.get("alpha") is None


def test_write_failure_is_logged_and_retried_on_next_chunk(caplog: pytest.LogCaptureFixture):
    flaky = _FlakyStore(failures=1)
    sink = ResultSink(flaky, JobResult(identifier="alpha"))

    with caplog.at_level(logging.ERROR):
        sink.append(b"lost? ")
    assert flaky.get("alpha") is None
    assert "Could not persist result for alpha" in caplog.text

    sink.append(b"no")
    assert flaky.get("alpha").output == b"lost? no"


def test_finalize_failure_does_not_raise():
    flaky = _FlakyStore(failures=5)
    sink = ResultSink(flaky, JobResult(identifier="alpha"))

    sink.finalize()

    assert sink.result.finished is True
    assert flaky.put_calls == 1


def test_superseded_run_stops_writing(store):
    tracker = InFlightTracker()
    token = tracker.start("gamma")
    sink = ResultSink(store, JobResult(identifier="gamma"), tracker=tracker, token=token)
    sink.append(b"old run ")

    tracker.claim_submission("gamma", lambda: store.put(JobResult(identifier="gamma")))
    sink.append(b"more")
    sink.finalize()

    assert sink.superseded is True
    assert store.get("gamma") == JobResult("gamma", False, b"")
