from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from core.results.types import JobResult
from services.job_service import result_path


class JobStatusOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    finished: bool = Field(alias="Finished")
    result: str = Field(alias="Result")
    link: str = Field(alias="Link")

    @classmethod
    def from_result(cls, result: JobResult) -> "JobStatusOut":
        return cls(
            finished=result.finished,
            result=result.text(),
            link=result_path(result.identifier),
        )


class WorkerHealth(BaseModel):
    status: str
    alive: bool
    current_job: str | None = None
    processed_count: int = 0
    queue_depth: int
    queue_capacity: int
