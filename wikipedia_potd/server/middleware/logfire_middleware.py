"""
Request Monitoring Middleware for FastAPI.

This middleware traces and measures every request:
- Request/response logging
- Span attributes through Logfire / OpenTelemetry
- Prometheus request counter and latency histogram
- Slow request warnings
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.core.metrics import http_request_duration_seconds, http_requests_total
from wikipedia_potd.core.monitoring import log_api_request

logger = get_logger(__name__)

SLOW_REQUEST_MS = 1000

# Endpoint label for requests no route matched
UNMATCHED_ENDPOINT = "unmatched"


def _endpoint_label(request: Request) -> str:
    # Route templates keep the label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ENDPOINT


def _record(request: Request, status_code: int, duration_ms: float) -> None:
    method = request.method
    endpoint = _endpoint_label(request)
    http_requests_total.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration_ms / 1000)
    log_api_request(method=method, path=request.url.path, status_code=status_code, duration_ms=duration_ms)


class LogfireMiddleware(BaseHTTPMiddleware):
    """Middleware for tracing and measuring API requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process the request and record metrics.

        Args:
            request: The incoming HTTP request
            call_next: The next middleware/handler

        Returns:
            The HTTP response
        """
        start_time = time.time()
        method = request.method
        path = request.url.path

        request.state.start_time = start_time

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000
            logger.error(
                f"API request failed: {method} {path}",
                exc_info=True,
                extra={"method": method, "path": path, "duration_ms": duration_ms, "error": str(e)},
            )
            _record(request, 500, duration_ms)
            raise

        duration_ms = (time.time() - start_time) * 1000
        _record(request, response.status_code, duration_ms)
        response.headers["X-Process-Time"] = str(duration_ms)

        if duration_ms > SLOW_REQUEST_MS:
            logger.warning(
                f"Slow API request: {method} {path} took {duration_ms:.2f}ms",
                extra={
                    "method": method,
                    "path": path,
                    "duration_ms": duration_ms,
                    "status_code": response.status_code,
                },
            )
        return response
