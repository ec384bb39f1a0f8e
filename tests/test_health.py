from __future__ import annotations

from fastapi.testclient import TestClient

import main
from core.jobs.queue import JobQueue
from services.job_service import JobService


def test_health_reports_store_and_worker(store, fake_executor):
    service = JobService(queue=JobQueue(10), store=store, executor=fake_executor)
    service.queue.enqueue("waiting")
    main.app.state.job_service = service
    client = TestClient(main.app)

    service.start()
    try:
        response = client.get("/health")
    finally:
        service.worker.stop(timeout=2)

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    data = payload["data"]
    assert data["services"]["result_store"]["status"] == "healthy"
    assert data["services"]["result_store"]["backend"] == "memory"
    assert data["services"]["worker"]["alive"] is True
    assert data["services"]["worker"]["queue_capacity"] == 10
    assert "X-Request-ID" in response.headers


def test_health_is_degraded_without_worker(store, fake_executor):
    main.app.state.job_service = JobService(queue=JobQueue(10), store=store, executor=fake_executor)
    client = TestClient(main.app)

    response = client.get("/health")

    data = response.json()["data"]
    assert data["status"] == "degraded"
    assert data["services"]["worker"]["status"] == "unhealthy"
