from __future__ import annotations

import logging
import threading

from core.jobs.errors import ExecutionError, PersistenceError
from core.jobs.executor import JobExecutor
from core.jobs.queue import JobQueue
from core.jobs.tracker import InFlightTracker
from core.results.provider import ResultStore
from core.results.sink import ResultSink
from core.results.types import JobResult

logger = logging.getLogger(__name__)

_IDLE_POLL_SECONDS = 0.5


class JobWorker:
    """The single sequential consumer of the job queue."""

    def __init__(
        self,
        *,
        queue: JobQueue,
        store: ResultStore,
        executor: JobExecutor,
        tracker: InFlightTracker,
    ) -> None:
        self._queue = queue
        self._store = store
        self._executor = executor
        self._tracker = tracker
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._current: str | None = None
        self.processed_count = 0

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def current_identifier(self) -> str | None:
        return self._current

    def start(self) -> None:
        if self.is_alive:
            raise RuntimeError("worker is already running")
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, name="job-worker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                logger.warning("Worker still busy with %s at shutdown", self._current)

    def run(self) -> None:
        logger.info("Starting worker")
        while not self._stop.is_set():
            identifier = self._queue.dequeue(timeout=_IDLE_POLL_SECONDS)
            if identifier is None:
                continue
            self.process(identifier)
        logger.info("Worker stopped")

    def _load(self, identifier: str) -> JobResult:
        try:
            result = self._store.get(identifier)
        except PersistenceError as err:
            logger.error("Could not load result for %s, starting from an empty record: %s", identifier, err)
            result = None
        return result if result is not None else JobResult(identifier=identifier)

    def process(self, identifier: str) -> JobResult:
        token = self._tracker.start(identifier)
        self._current = identifier
        logger.info("Running job: %s", identifier)
        try:
            sink = ResultSink(self._store, self._load(identifier), tracker=self._tracker, token=token)
            try:
                for chunk in self._executor.execute(identifier):
                    sink.append(chunk)
            except ExecutionError as err:
                # non-zero exits are still a completed job
                logger.warning("Job %s: %s", identifier, err)
            except Exception:
                logger.exception("Job %s failed unexpectedly", identifier)
            sink.finalize()
            logger.info("Finished job: %s", identifier)
            return sink.result
        finally:
            self._tracker.finish(identifier, token)
            self._current = None
            self.processed_count += 1
