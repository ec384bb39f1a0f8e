from __future__ import annotations

from pydantic import Base64Bytes, BaseModel, StrictBool, ValidationError

from core.jobs.errors import PersistenceError
from core.results.types import JobResult


class StoredResult(BaseModel):
    """Stored form of a record. The store key is authoritative, so ``identifier`` is optional."""

    identifier: str | None = None
    finished: StrictBool = False
    output: Base64Bytes = b""


def encode_result(result: JobResult) -> bytes:
    # model_construct keeps raw bytes; Base64Bytes encodes them on dump
    stored = StoredResult.model_construct(
        identifier=result.identifier,
        finished=bool(result.finished),
        output=bytes(result.output),
    )
    return stored.model_dump_json().encode("utf-8")


def decode_result(key: str, raw: bytes) -> JobResult:
    try:
        stored = StoredResult.model_validate_json(raw)
    except ValidationError as err:
        raise PersistenceError(f"could not decode result {key!r}: {err}") from err

    return JobResult(identifier=key, finished=stored.finished, output=stored.output)
