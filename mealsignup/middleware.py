# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP Middleware: request ID propagation and Prometheus metrics.
Separated from main.py for clean architecture.
"""

import re
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from mealsignup.metrics.prometheus import HTTP_ERRORS, REQUEST_COUNT, REQUEST_LATENCY

KNOWN_SEGMENTS: set[str] = {
    "api", "v1", "calendar", "month", "week", "teams", "slots",
    "commitments", "cancel", "members", "stats", "weekdays",
    "health", "metrics", "ready",
}

SKIP_PATHS: tuple[str, ...] = (
    "/health", "/health/ready", "/metrics", "/openapi.json", "/docs", "/redoc",
)


_DATE_SEGMENT = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _label_segment(segment: str) -> str:
    if segment in KNOWN_SEGMENTS:
        return segment
    if _DATE_SEGMENT.match(segment):
        return "{date}"
    if segment.isdigit():
        return "{n}"
    return "{id}"


def normalize_path(path: str) -> str:
    """
    Metric label for a request path. Ids collapse to ``{id}`` so every
    team shares one series; ISO dates and calendar numbers keep their own
    placeholders so slot lookups stay apart from month grids.
    """
    parts = path.strip("/").split("/")
    if parts == [""]:
        return path
    return "/" + "/".join(_label_segment(p) for p in parts)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate or generate X-Request-ID for distributed tracing."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Track request count, latency, and error rate via Prometheus."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = time.time() - start

        path = request.url.path
        if path not in SKIP_PATHS:
            endpoint = normalize_path(path)
            REQUEST_COUNT.labels(
                method=request.method,
                endpoint=endpoint,
                status=str(response.status_code),
            ).inc()
            REQUEST_LATENCY.labels(method=request.method, endpoint=endpoint).observe(duration)
            if response.status_code >= 400:
                HTTP_ERRORS.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status=str(response.status_code),
                ).inc()

        return response
