import logging

from fastapi.testclient import TestClient

from facility_api.app import create_app
from facility_api.telemetry import _ProbeAccessLogFilter


def test_trace_header_is_propagated() -> None:
    client = TestClient(create_app())

    response = client.get("/healthz", headers={"x-trace-id": "trace-abc"})

    assert response.status_code == 200
    assert response.headers["x-trace-id"] == "trace-abc"


def test_api_latency_metric_uses_route_template() -> None:
    app = create_app()
    client = TestClient(app)

    response = client.get("/v1/facilities/nearby?lat=91&lng=0")
    metrics = app.state.api_metrics.snapshot()

    assert response.status_code == 422
    assert metrics[-1]["route"] == "/v1/facilities/nearby"
    assert metrics[-1]["status_code"] == 422
    assert metrics[-1]["duration_ms"] >= 0


def test_prometheus_metrics_endpoint_exposes_http_and_search_metrics() -> None:
    client = TestClient(create_app())

    client.get("/healthz")
    response = client.get("/metrics")
    body = response.text

    assert response.status_code == 200
    assert "facility_api_http_requests_total" in body
    assert "facility_api_http_request_duration_ms" in body
    assert "facility_search_cache_requests_total" in body


def test_probe_access_log_filter_drops_successful_probes() -> None:
    log_filter = _ProbeAccessLogFilter(ignored_paths=("/healthz",))

    def record(path: str, status: int) -> logging.LogRecord:
        return logging.LogRecord(
            "uvicorn.access",
            logging.INFO,
            __file__,
            1,
            '%s - "%s %s HTTP/%s" %d',
            ("127.0.0.1:5000", "GET", path, "1.1", status),
            None,
        )

    assert log_filter.filter(record("/healthz", 200)) is False
    assert log_filter.filter(record("/healthz", 503)) is True
    assert log_filter.filter(record("/v1/facilities/nearby?lat=1&lng=2", 200)) is True
