from __future__ import annotations

import logging

from core.jobs.errors import StartupError
from core.results.memory_provider import MemoryResultStore
from core.results.provider import ResultStore
from core.results.redis_provider import RedisResultStore
from core.results.sqlite_provider import SqliteResultStore
from core.results.types import ResultBackend
from core.settings import Settings

logger = logging.getLogger(__name__)


def open_result_store(settings: Settings) -> ResultStore:
    """Open the configured backend and make sure its bucket exists.

    Any failure here is a StartupError; the application must not start
    without a working result store.
    """
    try:
        backend = ResultBackend(settings.result_store_backend)
    except ValueError as err:
        raise StartupError(f"unknown result store backend {settings.result_store_backend!r}") from err

    if backend is ResultBackend.REDIS:
        logger.info("Opening redis result store (bucket=%s)", settings.result_bucket)
        store: ResultStore = RedisResultStore.from_url(
            settings.redis_url,
            bucket=settings.result_bucket,
            open_timeout=settings.result_store_open_timeout,
        )
    elif backend is ResultBackend.MEMORY:
        logger.warning("Using in-memory result store; results are lost on restart")
        store = MemoryResultStore()
    else:
        logger.info("Opening sqlite result store %s (bucket=%s)", settings.result_store_path, settings.result_bucket)
        store = SqliteResultStore(
            settings.result_store_path,
            bucket=settings.result_bucket,
            open_timeout=settings.result_store_open_timeout,
        )

    return store
