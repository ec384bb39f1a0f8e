from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from api.dependencies import get_job_service
from api.error_handlers import register_exception_handlers
from api.v1.status_route import router as status_router
from api.web.job_pages_route import router as job_pages_router
from core.jobs.errors import PersistenceError
from core.logging_config import configure_logging
from core.response_envelope import request_id_from_request, success_payload
from core.settings import get_settings
from schemas.job_schema import WorkerHealth
from services.job_service import build_job_service

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting...")
    # StartupError propagates and aborts startup
    service = build_job_service(settings)
    app.state.job_service = service
    service.start()

    try:
        yield
    finally:
        logger.info("Shutting down worker")
        service.shutdown(timeout=settings.worker_shutdown_timeout)


app = FastAPI(lifespan=lifespan, title="Job Runner")
app.add_middleware(RequestIdMiddleware)
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(GZipMiddleware)
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
register_exception_handlers(app)


@app.get("/health", tags=["Health"])
def health_check(request: Request):
    service = get_job_service(request)
    services: dict[str, dict] = {}
    overall_status = "healthy"

    start = time.perf_counter()
    try:
        service.store.ping()
        services["result_store"] = {
            "status": "healthy",
            "backend": service.store.backend_name,
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
        }
    except PersistenceError as exc:
        overall_status = "degraded"
        services["result_store"] = {
            "status": "unhealthy",
            "backend": service.store.backend_name,
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            "message": str(exc),
        }

    worker = service.worker
    if not worker.is_alive:
        overall_status = "degraded"
    services["worker"] = WorkerHealth(
        status="healthy" if worker.is_alive else "unhealthy",
        alive=worker.is_alive,
        current_job=worker.current_identifier,
        processed_count=worker.processed_count,
        queue_depth=service.queue.depth(),
        queue_capacity=service.queue.capacity,
    ).model_dump()

    data = {
        "status": overall_status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": services,
    }
    return JSONResponse(
        content=jsonable_encoder(
            success_payload(data, "Health check completed", request_id=request_id_from_request(request))
        )
    )


app.include_router(job_pages_router)
app.include_router(status_router)


if __name__ == "__main__":
    logger.info("Listening on %s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
