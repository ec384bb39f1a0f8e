from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_RESULT_STORE_BACKENDS = {"sqlite", "redis", "memory"}
_BUCKET_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _env(name: str) -> str | None:
    raw_value = os.getenv(name)
    if raw_value is None:
        return None
    normalized = raw_value.strip()
    return normalized or None


def _flag(name: str, default: str = "false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in {"1", "true", "yes"}


def _check_positive_int(name: str, invalid_values: list[str]) -> None:
    raw_value = _env(name)
    if raw_value is None:
        return
    try:
        if int(raw_value) <= 0:
            raise ValueError("must be positive")
    except ValueError:
        invalid_values.append(f"{name} must be a positive integer")


def _check_positive_float(name: str, invalid_values: list[str]) -> None:
    raw_value = _env(name)
    if raw_value is None:
        return
    try:
        if float(raw_value) <= 0:
            raise ValueError("must be positive")
    except ValueError:
        invalid_values.append(f"{name} must be a positive number")


def collect_missing_required_env_vars() -> list[str]:
    missing: list[str] = []

    result_store_backend = (_env("RESULT_STORE_BACKEND") or "sqlite").lower()
    if result_store_backend == "redis" and _env("REDIS_URL") is None:
        missing.append("REDIS_URL")

    return sorted(set(missing))


def collect_invalid_env_values() -> list[str]:
    invalid_values: list[str] = []

    result_store_backend = (_env("RESULT_STORE_BACKEND") or "sqlite").lower()
    if result_store_backend not in SUPPORTED_RESULT_STORE_BACKENDS:
        invalid_values.append("RESULT_STORE_BACKEND must be one of: memory, redis, sqlite")

    bucket = _env("RESULT_BUCKET")
    if bucket is not None and not _BUCKET_NAME_PATTERN.match(bucket):
        invalid_values.append("RESULT_BUCKET must contain only letters, digits and underscores")

    _check_positive_int("PORT", invalid_values)
    _check_positive_int("JOB_QUEUE_CAPACITY", invalid_values)
    _check_positive_float("RESULT_STORE_OPEN_TIMEOUT", invalid_values)
    _check_positive_float("WORKER_SHUTDOWN_TIMEOUT", invalid_values)

    admission_ratio = _env("JOB_ADMISSION_RATIO")
    if admission_ratio is not None:
        try:
            parsed_ratio = float(admission_ratio)
            if not 0 < parsed_ratio <= 1:
                raise ValueError("out of range")
        except ValueError:
            invalid_values.append("JOB_ADMISSION_RATIO must be a number in (0, 1]")

    if _env("JOB_COMMAND") is None and os.getenv("JOB_COMMAND") is not None:
        invalid_values.append("JOB_COMMAND must not be empty")

    log_level = _env("LOG_LEVEL")
    if log_level is not None and not isinstance(logging.getLevelName(log_level.upper()), int):
        invalid_values.append("LOG_LEVEL must be a logging level name")

    return invalid_values


def validate_required_environment() -> None:
    missing_vars = collect_missing_required_env_vars()
    invalid_values = collect_invalid_env_values()
    if not missing_vars and not invalid_values:
        return

    message_lines = ["Application startup blocked by invalid environment configuration."]
    if missing_vars:
        message_lines.append("")
        message_lines.append("Missing required environment variables:")
        message_lines.extend(f"- {name}" for name in missing_vars)
    if invalid_values:
        message_lines.append("")
        message_lines.append("Invalid environment values:")
        message_lines.extend(f"- {message}" for message in invalid_values)
    raise RuntimeError("\n".join(message_lines))


@dataclass(frozen=True)
class Settings:
    env: str
    host: str
    port: int
    log_level: str
    debug_include_error_details: bool
    result_store_backend: str
    result_store_path: str
    result_bucket: str
    result_store_open_timeout: float
    redis_url: str
    job_queue_capacity: int
    job_admission_ratio: float
    job_command: str
    worker_shutdown_timeout: float

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    validate_required_environment()

    return Settings(
        env=os.getenv("ENV", "development"),
        host=_env("HOST") or "0.0.0.0",
        port=int(_env("PORT") or 8000),
        log_level=(_env("LOG_LEVEL") or "INFO").upper(),
        debug_include_error_details=_flag("DEBUG_INCLUDE_ERROR_DETAILS"),
        result_store_backend=(_env("RESULT_STORE_BACKEND") or "sqlite").lower(),
        result_store_path=_env("RESULT_STORE_PATH") or "results.db",
        result_bucket=_env("RESULT_BUCKET") or "results",
        result_store_open_timeout=float(_env("RESULT_STORE_OPEN_TIMEOUT") or 1.0),
        redis_url=_env("REDIS_URL") or "redis://127.0.0.1:6379/0",
        job_queue_capacity=int(_env("JOB_QUEUE_CAPACITY") or 100),
        job_admission_ratio=float(_env("JOB_ADMISSION_RATIO") or 0.75),
        job_command=_env("JOB_COMMAND") or "vmstat 1 5",
        worker_shutdown_timeout=float(_env("WORKER_SHUTDOWN_TIMEOUT") or 5.0),
    )
