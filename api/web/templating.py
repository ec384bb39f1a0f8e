from __future__ import annotations

from pathlib import Path

from fastapi import HTTPException, Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from core.response_envelope import parse_http_exception_detail, request_id_from_request

BASE_DIR = Path(__file__).resolve().parents[2]
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

SITE_TITLE = "Job Runner"


def render_error_page(request: Request, exc: HTTPException) -> Response:
    message, data = parse_http_exception_detail(exc.detail)
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "title": f"{exc.status_code} - {message}",
            "code": exc.status_code,
            "message": message,
            "error_code": data.get("code"),
            "request_id": request_id_from_request(request),
        },
        status_code=exc.status_code,
        headers=exc.headers,
    )
