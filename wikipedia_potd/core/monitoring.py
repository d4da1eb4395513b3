"""
Monitoring and Tracing Configuration Module.

This module provides integration with Pydantic Logfire, which is built on
OpenTelemetry, for tracing the service:
- FastAPI endpoint traces
- Outgoing HTTPX requests (Wikipedia page and image downloads)
- SQLAlchemy queries
- Pydantic AI (Gemini) calls
- Named spans around scraping and image processing

Spans are emitted through the OpenTelemetry API. Once ``initialize_logfire``
has configured Logfire, they are exported to Logfire and/or any OTLP endpoint
set through the standard ``OTEL_EXPORTER_OTLP_*`` variables. Without it they
are no-ops.
"""

import functools
import inspect
import logging
from typing import Any, Callable, Optional, TypeVar

from fastapi import FastAPI
from opentelemetry import trace

from wikipedia_potd.server.core.config import settings
from wikipedia_potd.server.core.constant import VERSION

logger = logging.getLogger(__name__)

tracer = trace.get_tracer("wikipedia_potd")

F = TypeVar("F", bound=Callable[..., Any])

_initialized = False


def initialize_logfire(app: FastAPI | None = None, engine: Any = None) -> bool:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    Args:
        app: FastAPI application instance for endpoint instrumentation (optional).
        engine: SQLAlchemy async engine for query instrumentation (optional).

    Returns:
        True if tracing was configured, False when it is disabled.
    """
    global _initialized

    config = settings.logfire
    if not config.enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if _initialized:
        return True

    import logfire

    token: Optional[str] = config.token.get_secret_value() if config.token else None
    logfire.configure(
        token=token,
        service_name=config.service_name,
        service_version=VERSION,
        environment=config.environment,
        send_to_logfire="if-token-present",
        console=False,
    )

    instrumentations: list[tuple[str, Callable[[], Any]]] = [
        ("Pydantic AI", logfire.instrument_pydantic_ai),
        ("HTTPX", logfire.instrument_httpx),
    ]
    if engine is not None:
        instrumentations.append(("SQLAlchemy", lambda: logfire.instrument_sqlalchemy(engine=engine.sync_engine)))
    if app is not None:
        instrumentations.append(("FastAPI", lambda: logfire.instrument_fastapi(app)))

    for name, instrument in instrumentations:
        try:
            instrument()
            logger.info(f"Logfire: {name} instrumentation enabled")
        except Exception as e:
            logger.warning(f"Failed to instrument {name}: {e}")

    _initialized = True
    logger.info(
        f"Logfire monitoring initialized: service={config.service_name}, environment={config.environment}"
    )
    return True


def traced(span_name: str) -> Callable[[F], F]:
    """
    Decorate a sync or async function so each call runs inside a span.

    Args:
        span_name: Name of the span, e.g. ``"ImageService.dither_image"``.
    """

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with tracer.start_as_current_span(span_name):
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with tracer.start_as_current_span(span_name):
                return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """
    Attach API request metrics to the current span.

    Args:
        method: HTTP method
        path: Request path
        status_code: HTTP status code
        duration_ms: Request duration in milliseconds
    """
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute("potd.request.method", method)
        span.set_attribute("potd.request.path", path)
        span.set_attribute("potd.request.status_code", status_code)
        span.set_attribute("potd.request.duration_ms", duration_ms)
    logger.debug(f"API request completed: {method} {path} -> {status_code} in {duration_ms:.2f}ms")
