from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from facility_search.core.prometheus_exporter import SearchPrometheusExporter

from facility_api.dependencies import get_search_metrics
from facility_api.errors import ApiError
from facility_api.middleware import ObservabilityMiddleware
from facility_api.observability import (
    CompositeApiMetricsCollector,
    InMemoryApiMetricsCollector,
    PrometheusApiMetricsCollector,
)
from facility_api.response import error_response, success_response
from facility_api.routers.facilities import router as facilities_router
from facility_api.telemetry import configure_otel, configure_probe_access_log_filter


def create_app() -> FastAPI:
    app = FastAPI(title="Medical Facility Search API", version="0.1.0")
    configure_otel(service_name="facility-search-api")
    configure_probe_access_log_filter()
    app.state.api_metrics = InMemoryApiMetricsCollector()
    app.state.prom_metrics = PrometheusApiMetricsCollector()
    app.state.composite_metrics = CompositeApiMetricsCollector(
        [app.state.api_metrics, app.state.prom_metrics]
    )
    app.state.search_exporter = SearchPrometheusExporter()
    app.add_middleware(ObservabilityMiddleware, collector=app.state.composite_metrics)
    app.include_router(facilities_router)

    @app.get("/healthz")
    async def healthz() -> dict:
        return success_response({"status": "ok"}, meta={})

    @app.get("/readyz")
    async def readyz() -> dict:
        return success_response({"status": "ready"}, meta={})

    @app.get("/metrics")
    async def metrics() -> Response:
        payload = app.state.prom_metrics.render() + app.state.search_exporter.render(get_search_metrics())
        return Response(content=payload, media_type="text/plain; version=0.0.4")

    @app.exception_handler(ApiError)
    async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=error_response(exc.code, exc.message))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        message = "; ".join(err["msg"] for err in exc.errors())
        return JSONResponse(
            status_code=422,
            content=error_response("VALIDATION_ERROR", message),
        )

    return app


app = create_app()
