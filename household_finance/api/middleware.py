"""FastAPI middleware for request tracing, access logging and metrics"""

import logging
import re
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from household_finance.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"

# Caller-supplied ids are written into log records verbatim
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,64}")


def resolve_request_id(header_value: str | None) -> str:
    """Reuse a well-formed caller id so traces join across services, otherwise mint one"""
    if header_value and REQUEST_ID_PATTERN.fullmatch(header_value):
        return header_value
    return str(uuid.uuid4())


def route_path(request: Request) -> str:
    """Matched route template (``/v1/transactions/{transaction_id}``), or the raw path when none matched"""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, echo it in the response and write one access log record"""

    async def dispatch(self, request: Request, call_next):
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        start_time = time.perf_counter()

        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        logging.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "route": route_path(request),
                "status": response.status_code,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
            },
        )
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request metrics"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        # Route template keeps ids out of the label values
        request_duration_histogram.labels(
            method=request.method,
            endpoint=route_path(request),
            status=response.status_code,
        ).observe(time.perf_counter() - start_time)

        return response
