from __future__ import annotations

import logging
from urllib.parse import quote

from core.jobs.admission import admit
from core.jobs.errors import CapacityError, JobValidationError, ResultNotFound
from core.jobs.executor import JobExecutor, SubprocessExecutor
from core.jobs.queue import JobQueue
from core.jobs.tracker import InFlightTracker
from core.jobs.worker import JobWorker
from core.results.manager import open_result_store
from core.results.provider import ResultStore
from core.results.types import JobResult
from core.settings import Settings

logger = logging.getLogger(__name__)


def result_path(identifier: str) -> str:
    return f"/result/{quote(identifier, safe='/')}"


def status_path(identifier: str) -> str:
    return f"/api/status/{quote(identifier, safe='/')}"


class JobService:
    """Submission and status operations over one queue, store and worker."""

    def __init__(
        self,
        *,
        queue: JobQueue,
        store: ResultStore,
        executor: JobExecutor,
        admission_ratio: float = 0.75,
        tracker: InFlightTracker | None = None,
    ) -> None:
        self.queue = queue
        self.store = store
        self.admission_ratio = admission_ratio
        self.tracker = tracker or InFlightTracker()
        self.worker = JobWorker(queue=queue, store=store, executor=executor, tracker=self.tracker)

    def submit(self, identifier: str | None) -> str:
        """Queue ``identifier`` and return the path of its result view.

        Any earlier record for the identifier is replaced by an unfinished,
        empty placeholder before the job is queued.
        """
        if not identifier or not identifier.strip():
            raise JobValidationError("pkg not set")

        depth = self.queue.depth()
        if not admit(depth, self.queue.capacity, self.admission_ratio):
            logger.warning("Rejecting %s: queue depth %d of %d", identifier, depth, self.queue.capacity)
            raise CapacityError(depth, self.queue.capacity)

        placeholder = JobResult(identifier=identifier)
        needs_entry = self.tracker.claim_submission(identifier, lambda: self.store.put(placeholder))
        if needs_entry:
            self.queue.enqueue(identifier)
            logger.info("Queued %s (depth %d)", identifier, self.queue.depth())
        else:
            logger.info("Reset %s; already queued", identifier)

        return result_path(identifier)

    def status(self, identifier: str) -> JobResult:
        result = self.store.get(identifier)
        if result is None:
            raise ResultNotFound(identifier)
        return result

    def start(self) -> None:
        self.worker.start()

    def shutdown(self, timeout: float | None = None) -> None:
        self.worker.stop(timeout)
        self.store.close()


def build_job_service(settings: Settings) -> JobService:
    store = open_result_store(settings)
    return JobService(
        queue=JobQueue(settings.job_queue_capacity),
        store=store,
        executor=SubprocessExecutor(settings.job_command),
        admission_ratio=settings.job_admission_ratio,
    )
