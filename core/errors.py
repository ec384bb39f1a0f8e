from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, status

from core.jobs.errors import (
    CapacityError,
    JobError,
    JobValidationError,
    PersistenceError,
    ResultNotFound,
)

BUSY_RETRY_AFTER_SECONDS = 30


class ErrorCode(str, Enum):
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    SERVER_BUSY = "SERVER_BUSY"
    PERSISTENCE_ERROR = "PERSISTENCE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(HTTPException):
    def __init__(
        self,
        *,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        detail = {
            "message": message,
            "code": code.value,
            "details": details,
        }
        super().__init__(status_code=status_code, detail=detail, headers=headers)


def resource_not_found(resource: str, resource_id: str | None = None) -> AppException:
    details = {"resource": resource}
    if resource_id:
        details["resource_id"] = resource_id
    return AppException(
        status_code=status.HTTP_404_NOT_FOUND,
        code=ErrorCode.RESOURCE_NOT_FOUND,
        message=f"{resource} not found",
        details=details,
    )


def validation_failed(message: str, details: Any | None = None) -> AppException:
    return AppException(
        status_code=status.HTTP_400_BAD_REQUEST,
        code=ErrorCode.VALIDATION_FAILED,
        message=message,
        details=details,
    )


def server_busy(depth: int, capacity: int) -> AppException:
    return AppException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        code=ErrorCode.SERVER_BUSY,
        message="server too busy",
        details={"queue_depth": depth, "queue_capacity": capacity},
        headers={"Retry-After": str(BUSY_RETRY_AFTER_SECONDS)},
    )


def persistence_failed(message: str) -> AppException:
    return AppException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorCode.PERSISTENCE_ERROR,
        message=message,
    )


def to_app_exception(exc: JobError) -> AppException:
    if isinstance(exc, JobValidationError):
        return validation_failed(str(exc), details={"field": "pkg"})
    if isinstance(exc, CapacityError):
        return server_busy(exc.depth, exc.capacity)
    if isinstance(exc, ResultNotFound):
        return resource_not_found("Result", exc.identifier)
    if isinstance(exc, PersistenceError):
        return persistence_failed("error accessing result store")
    return AppException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorCode.INTERNAL_ERROR,
        message="Internal Server Error",
    )
