from core.results.manager import open_result_store
from core.results.provider import ResultStore
from core.results.sink import ResultSink
from core.results.types import JobResult, ResultBackend

__all__ = [
    "JobResult",
    "ResultBackend",
    "ResultSink",
    "ResultStore",
    "open_result_store",
]
