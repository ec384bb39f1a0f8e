from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.web.templating import render_error_page
from core.errors import to_app_exception
from core.jobs.errors import JobError, PersistenceError
from core.response_envelope import error_response, http_exception_response, request_id_from_request
from core.settings import get_settings

logger = logging.getLogger(__name__)

JSON_PATH_PREFIXES = ("/api/", "/health", "/docs", "/openapi.json")


def wants_json(request: Request) -> bool:
    return request.url.path.startswith(JSON_PATH_PREFIXES)


def _respond(request: Request, exc: HTTPException):
    if wants_json(request):
        return http_exception_response(exc=exc, request=request)
    return render_error_page(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def custom_http_exception_handler(request: Request, exc: StarletteHTTPException):
        if not isinstance(exc, HTTPException):
            exc = HTTPException(status_code=exc.status_code, detail=exc.detail, headers=exc.headers)
        return _respond(request, exc)

    @app.exception_handler(JobError)
    async def job_error_handler(request: Request, exc: JobError):
        if isinstance(exc, PersistenceError):
            logger.error("Result store failure on %s: %s", request.url.path, exc)
        return _respond(request, to_app_exception(exc))

    @app.exception_handler(Exception)
    async def custom_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        settings = get_settings()
        details = str(exc) if (settings.debug_include_error_details and not settings.is_production) else None
        return error_response(
            status_code=500,
            message="Internal Server Error",
            data={"code": "INTERNAL_ERROR", "details": details},
            request_id=request_id_from_request(request),
        )
