from __future__ import annotations

import queue

DEFAULT_QUEUE_CAPACITY = 100


class JobQueue:
    """Bounded FIFO of job identifiers shared by submitters and the worker."""

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._queue: queue.Queue[str] = queue.Queue(maxsize=capacity)

    def enqueue(self, identifier: str) -> None:
        # blocks while the queue is full, never drops
        self._queue.put(identifier)

    def dequeue(self, timeout: float | None = None) -> str | None:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def depth(self) -> int:
        return self._queue.qsize()
