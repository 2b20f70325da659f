from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from patient_records.api import audit_logs, patients, system
from patient_records.api.errors import register_exception_handlers
from patient_records.core.config import settings
from patient_records.db.init import init_database
from patient_records.db.session import engine
from patient_records.logging_utils import _request_id_ctx_var, configure_logging

configure_logging(settings.log_level, service=settings.app_name)

logger = logging.getLogger(__name__)

REQUEST_COUNTER = Counter(
    "patient_records_requests_total",
    "Total number of processed HTTP requests.",
    ["method", "path", "status"],
)
REQUEST_LATENCY = Histogram(
    "patient_records_request_duration_seconds",
    "HTTP request latency in seconds.",
    ["method", "path"],
)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    if settings.auto_migrate:
        try:
            init_database(engine)
        except SQLAlchemyError:
            logger.exception("database initialization failed")
            raise
    yield


app = FastAPI(title=settings.app_name, version="0.1.0", lifespan=lifespan)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Populate the request id used by the log formatter."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

        request.state.request_id = request_id
        request_id_token = _request_id_ctx_var.set(request_id)

        try:
            response = await call_next(request)
        finally:
            _request_id_ctx_var.reset(request_id_token)

        response.headers["X-Request-ID"] = request_id
        return response


UNMATCHED_ROUTE = "unmatched"


def route_template(request: Request) -> str:
    """Path template of the matched route, so ids do not become label values."""

    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Emit structured access logs and feed metrics."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        start_time = time.perf_counter()
        path = request.scope.get("root_path", "") + request.scope.get("path", request.url.path)
        method = request.method

        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - start_time
            route = route_template(request)
            REQUEST_COUNTER.labels(method=method, path=route, status="500").inc()
            REQUEST_LATENCY.labels(method=method, path=route).observe(elapsed)
            logger.exception(
                "request failed",
                extra={
                    "method": method,
                    "path": path,
                    "route": route,
                    "duration_ms": round(elapsed * 1000, 2),
                },
            )
            raise

        elapsed = time.perf_counter() - start_time
        status_code = response.status_code
        route = route_template(request)

        REQUEST_COUNTER.labels(method=method, path=route, status=str(status_code)).inc()
        REQUEST_LATENCY.labels(method=method, path=route).observe(elapsed)

        logger.info(
            "request completed",
            extra={
                "method": method,
                "path": path,
                "route": route,
                "status_code": status_code,
                "duration_ms": round(elapsed * 1000, 2),
            },
        )

        return response


app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(AccessLogMiddleware)

register_exception_handlers(app)

app.include_router(patients.router)
app.include_router(audit_logs.router)
app.include_router(system.router)


@app.get("/metrics")
def metrics() -> Response:
    """Expose Prometheus metrics for scraping."""

    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint used by infrastructure probes."""

    return {"status": "ok"}
