from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from core.jobs.errors import PersistenceError
from core.results.provider import ResultStore
from core.results.types import JobResult

if TYPE_CHECKING:
    from core.jobs.tracker import InFlightTracker

logger = logging.getLogger(__name__)


class ResultSink:
    """Streams job output into the result store.

    Every append re-persists the whole record so that status reads see the
    output grow while the job runs. Write failures are logged and retried
    implicitly by the next append or by finalize.
    """

    def __init__(
        self,
        store: ResultStore,
        result: JobResult,
        *,
        tracker: "InFlightTracker | None" = None,
        token: int | None = None,
    ) -> None:
        self._store = store
        self._result = result
        self._tracker = tracker
        self._token = token
        self.superseded = False

    @property
    def result(self) -> JobResult:
        return self._result

    def append(self, chunk: bytes) -> None:
        if not chunk:
            return
        self._result.output = self._result.output + chunk
        self._persist()

    def finalize(self) -> None:
        self._result.finished = True
        self._persist()

    def _write(self) -> None:
        self._store.put(self._result)

    def _persist(self) -> None:
        if self.superseded:
            return
        try:
            if self._tracker is None or self._token is None:
                self._write()
            elif not self._tracker.persist_if_current(self._result.identifier, self._token, self._write):
                self.superseded = True
                logger.info("Run for %s was superseded by a newer submission; dropping its output", self._result.identifier)
        except PersistenceError as err:
            logger.error("Could not persist result for %s: %s", self._result.identifier, err)
