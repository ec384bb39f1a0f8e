from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from api.dependencies import get_job_service
from api.web.templating import SITE_TITLE, templates
from core.response_envelope import request_id_from_request
from services.job_service import JobService, status_path

router = APIRouter(tags=["Web Jobs"])


@router.get("/", include_in_schema=False)
def home_page(request: Request):
    return templates.TemplateResponse(
        request,
        "home.html",
        {"title": SITE_TITLE, "request_id": request_id_from_request(request)},
    )


@router.post("/submit", include_in_schema=False)
def submit_job(pkg: str = Form(""), service: JobService = Depends(get_job_service)):
    target = service.submit(pkg)
    return RedirectResponse(url=target, status_code=302)


@router.get("/result/{identifier:path}", include_in_schema=False)
def result_page(identifier: str, request: Request, service: JobService = Depends(get_job_service)):
    result = service.status(identifier)
    return templates.TemplateResponse(
        request,
        "result.html",
        {
            "title": identifier,
            "result": result,
            "output": result.text(),
            "status_url": status_path(identifier),
            "request_id": request_id_from_request(request),
        },
    )
