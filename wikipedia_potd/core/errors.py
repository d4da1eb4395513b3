"""
Domain exceptions.

Every error raised on purpose by the service derives from ``PotdError`` so the
API layer can map it to an HTTP status without catching unrelated failures.
"""

from __future__ import annotations


class PotdError(Exception):
    """Base class for all service errors."""


class ImageProcessingError(PotdError):
    """Image bytes could not be decoded, transformed or encoded."""


class ScrapeError(PotdError):
    """Fetching the Wikipedia page or downloading the picture failed."""


class RateLimitExceededError(PotdError):
    """An operation was invoked more often than its rate limit allows."""


class CircuitBreakerOpenError(PotdError):
    """An operation was rejected because its circuit breaker is open."""
