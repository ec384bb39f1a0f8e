from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ResultBackend(str, Enum):
    SQLITE = "sqlite"
    REDIS = "redis"
    MEMORY = "memory"


@dataclass
class JobResult:
    identifier: str
    finished: bool = False
    output: bytes = b""

    def text(self) -> str:
        return self.output.decode("utf-8", errors="replace")
