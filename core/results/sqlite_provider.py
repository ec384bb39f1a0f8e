from __future__ import annotations

import sqlite3
from pathlib import Path
from threading import Lock

from core.jobs.errors import PersistenceError, StartupError
from core.results.codec import decode_result, encode_result
from core.results.provider import ResultStore
from core.results.types import JobResult, ResultBackend


class SqliteResultStore(ResultStore):
    backend_name = ResultBackend.SQLITE.value

    def __init__(self, path: str, *, bucket: str = "results", open_timeout: float = 1.0) -> None:
        self._path = path
        # bucket names are validated by settings; they are interpolated as a table name
        self._bucket = bucket
        self._lock = Lock()
        try:
            if path != ":memory:":
                Path(path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(path, timeout=open_timeout, check_same_thread=False)
            with self._conn:
                self._conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {self._bucket} (key BLOB PRIMARY KEY, value BLOB NOT NULL)"
                )
        except (OSError, sqlite3.Error) as err:
            raise StartupError(f"could not initialise {path}: {err}") from err

    def get(self, identifier: str) -> JobResult | None:
        try:
            with self._lock:
                row = self._conn.execute(
                    f"SELECT value FROM {self._bucket} WHERE key = ?",
                    (identifier.encode("utf-8"),),
                ).fetchone()
        except sqlite3.Error as err:
            raise PersistenceError(f"could not read result {identifier!r}: {err}") from err

        if row is None:
            return None
        return decode_result(identifier, bytes(row[0]))

    def put(self, result: JobResult) -> None:
        value = encode_result(result)
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    f"INSERT OR REPLACE INTO {self._bucket} (key, value) VALUES (?, ?)",
                    (result.identifier.encode("utf-8"), value),
                )
        except sqlite3.Error as err:
            raise PersistenceError(f"could not store result {result.identifier!r}: {err}") from err

    def ping(self) -> None:
        try:
            with self._lock:
                self._conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as err:
            raise PersistenceError(f"result store unavailable: {err}") from err

    def close(self) -> None:
        with self._lock:
            self._conn.close()
