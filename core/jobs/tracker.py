from __future__ import annotations

from threading import Lock
from typing import Callable


class InFlightTracker:
    """Per-identifier bookkeeping of queued and running jobs.

    A resubmission of a queued identifier reuses the queued entry. A
    resubmission of the running identifier supersedes that run: its later
    writes are dropped so they can never clobber the fresh record. Placeholder
    writes and worker writes go through the tracker lock, which orders them.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._pending: set[str] = set()
        self._running: str | None = None
        self._generation = 0
        self._current_token: int | None = None

    def claim_submission(self, identifier: str, write_placeholder: Callable[[], None]) -> bool:
        """Write the placeholder and return True when a new queue entry is needed.

        If the placeholder write raises, nothing is changed and the error
        propagates.
        """
        with self._lock:
            write_placeholder()
            if identifier == self._running:
                self._current_token = None
            if identifier in self._pending:
                return False
            self._pending.add(identifier)
            return True

    def is_pending(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._pending

    def start(self, identifier: str) -> int:
        with self._lock:
            self._pending.discard(identifier)
            self._generation += 1
            self._running = identifier
            self._current_token = self._generation
            return self._generation

    def persist_if_current(self, identifier: str, token: int, write: Callable[[], None]) -> bool:
        with self._lock:
            if self._running != identifier or self._current_token != token:
                return False
            write()
            return True

    def finish(self, identifier: str, token: int) -> None:
        with self._lock:
            if self._running == identifier and self._generation == token:
                self._running = None
                self._current_token = None

    @property
    def running(self) -> str | None:
        with self._lock:
            return self._running
