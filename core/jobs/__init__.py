from core.jobs.admission import admit
from core.jobs.errors import (
    CapacityError,
    ExecutionError,
    JobError,
    JobValidationError,
    PersistenceError,
    ResultNotFound,
    StartupError,
)
from core.jobs.executor import JobExecutor, SubprocessExecutor
from core.jobs.queue import JobQueue
from core.jobs.tracker import InFlightTracker
from core.jobs.worker import JobWorker

__all__ = [
    "CapacityError",
    "ExecutionError",
    "InFlightTracker",
    "JobError",
    "JobExecutor",
    "JobQueue",
    "JobValidationError",
    "JobWorker",
    "PersistenceError",
    "ResultNotFound",
    "StartupError",
    "SubprocessExecutor",
    "admit",
]
