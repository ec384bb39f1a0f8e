from __future__ import annotations


class JobError(Exception):
    """Base class for failures raised by the job subsystem."""


class JobValidationError(JobError):
    pass


class CapacityError(JobError):
    def __init__(self, depth: int, capacity: int) -> None:
        super().__init__(f"queue depth {depth} exceeds admission threshold for capacity {capacity}")
        self.depth = depth
        self.capacity = capacity


class ResultNotFound(JobError):
    def __init__(self, identifier: str) -> None:
        super().__init__(f"no result for {identifier!r}")
        self.identifier = identifier


class PersistenceError(JobError):
    pass


class ExecutionError(JobError):
    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class StartupError(JobError):
    pass
