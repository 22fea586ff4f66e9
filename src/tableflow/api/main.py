from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from tableflow.api.error_handling import register_exception_handlers
from tableflow.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from tableflow.api.routes.health import router as health_router
from tableflow.api.routes.metrics import router as metrics_router
from tableflow.api.routes.orders import router as orders_router
from tableflow.api.routes.tables import router as tables_router
from tableflow.infrastructure.observability.logging_config import configure_logging
from tableflow.infrastructure.observability.otel import configure_otel

logger = logging.getLogger("tableflow.api.access")

REQUEST_COUNT = Counter(
    "tableflow_http_requests_total",
    "HTTP requests served, labelled by route template",
    ["method", "route", "status_code"],
)
REQUEST_LATENCY = Histogram(
    "tableflow_http_request_duration_seconds",
    "HTTP request duration in seconds, labelled by route template",
    ["method", "route"],
)

_OPEN_ENVIRONMENTS = {"dev", "test"}


def _cors_allow_origins() -> list[str]:
    if os.getenv("APP_ENV", "dev").lower() in _OPEN_ENVIRONMENTS:
        return ["*"]
    # Anywhere else only the explicit allowlist; empty means same-origin only.
    raw_value = os.getenv("CORS_ALLOW_ORIGINS", "")
    return [origin.strip() for origin in raw_value.split(",") if origin.strip()]


def _route_template(request: Request) -> str:
    # "/v1/orders/{order_id}" rather than one label per order id.
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            self._observe(request, 500, started, failed=True)
            raise
        self._observe(request, response.status_code, started)
        return response

    @staticmethod
    def _observe(request: Request, status_code: int, started: float, failed: bool = False) -> None:
        elapsed = time.perf_counter() - started
        route = _route_template(request)
        REQUEST_COUNT.labels(
            method=request.method, route=route, status_code=str(status_code)
        ).inc()
        REQUEST_LATENCY.labels(method=request.method, route=route).observe(elapsed)

        extra = {
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "duration_ms": round(elapsed * 1000, 2),
        }
        if failed:
            logger.exception("request_error", extra=extra)
        elif status_code >= 500:
            logger.error("request_complete", extra=extra)
        else:
            logger.info("request_complete", extra=extra)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Tableflow API",
        version="0.1.0",
        description="Table and order lifecycle for dine-in service.",
    )
    register_exception_handlers(app)
    for router in (health_router, metrics_router, tables_router, orders_router):
        app.include_router(router)

    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
