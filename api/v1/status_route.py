from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_job_service
from schemas.job_schema import JobStatusOut
from services.job_service import JobService

router = APIRouter(prefix="/api/status", tags=["Status"])


@router.get(
    "/{identifier:path}",
    response_model=JobStatusOut,
    responses={404: {"description": "Never submitted"}, 500: {"description": "Result store failure"}},
)
def get_job_status(identifier: str, service: JobService = Depends(get_job_service)):
    return JobStatusOut.from_result(service.status(identifier))
