"""
Exception Handlers for FastAPI Application.

Domain errors are mapped to HTTP statuses; anything else is caught by the
global handler, which logs the full request context and returns an error ID
that clients can use to reference the error when reporting issues.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from wikipedia_potd.core.errors import (
    CircuitBreakerOpenError,
    ImageProcessingError,
    PotdError,
    RateLimitExceededError,
    ScrapeError,
)
from wikipedia_potd.core.logging_config import get_logger

logger = get_logger(__name__)

DOMAIN_STATUS_CODES: dict[type[PotdError], int] = {
    RateLimitExceededError: 429,
    CircuitBreakerOpenError: 503,
    ScrapeError: 502,
    ImageProcessingError: 500,
}


async def domain_exception_handler(request: Request, exc: PotdError) -> JSONResponse:
    """
    Map a domain error to its HTTP status.

    Args:
        request: The HTTP request that caused the exception
        exc: The domain error

    Returns:
        JSONResponse with the error message and type
    """
    status_code = next(
        (code for error_type, code in DOMAIN_STATUS_CODES.items() if isinstance(exc, error_type)),
        500,
    )
    log = logger.error if status_code >= 500 else logger.warning
    log(f"{type(exc).__name__} in {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error_type": type(exc).__name__},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(PotdError, domain_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
