"""Fault tolerance policies for async operations.

Three composable policies guard the scrape job:

- ``RetryPolicy``: re-run a failed call after a fixed delay
- ``CircuitBreaker``: stop calling a failing dependency for a while
- ``RateLimiter``: cap the number of calls per fixed time window

``FaultTolerance`` takes one rate limit permit per call, then retries the
call through the circuit breaker. Calls rejected by the circuit breaker or
the rate limiter are never retried.
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from enum import Enum
from typing import Awaitable, Callable, Deque, Optional, TypeVar

from wikipedia_potd.core.errors import CircuitBreakerOpenError, RateLimitExceededError
from wikipedia_potd.core.logging_config import get_logger
from wikipedia_potd.server.core.config import FaultToleranceConfig

logger = get_logger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]

_NOT_RETRIED = (RateLimitExceededError, CircuitBreakerOpenError)


class RetryPolicy:
    """Retry a coroutine a fixed number of times with a fixed delay."""

    def __init__(self, max_retries: int = 3, delay_seconds: float = 10.0, *, sleep: Sleep = asyncio.sleep) -> None:
        self.max_retries = max_retries
        self.delay_seconds = delay_seconds
        self._sleep = sleep

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        """Run ``func``, retrying on failure.

        Args:
            func: Zero-argument coroutine factory

        Returns:
            The first successful result.

        Raises:
            The last exception once all attempts are exhausted. A rejection
            by the rate limiter or the open circuit stops the retries and
            re-raises the last real failure, or the rejection itself on the
            first attempt.
        """
        attempt = 0
        last_error: Optional[Exception] = None
        while True:
            try:
                return await func()
            except _NOT_RETRIED as e:
                if last_error is None:
                    raise
                logger.error(f"Giving up after {attempt} retries, call rejected: {e}")
                raise last_error
            except Exception as e:
                last_error = e
                if attempt >= self.max_retries:
                    logger.error(f"Giving up after {attempt + 1} attempts: {e}")
                    raise
                attempt += 1
                logger.warning(
                    f"Attempt {attempt}/{self.max_retries + 1} failed: {e}; retrying in {self.delay_seconds}s"
                )
                await self._sleep(self.delay_seconds)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """Rolling-window circuit breaker.

    The breaker keeps the outcome of the last ``request_volume_threshold``
    calls. Once that window is full and the share of failures reaches
    ``failure_ratio``, the circuit opens and calls fail fast with
    ``CircuitBreakerOpenError`` for ``delay_seconds``. After the delay a
    single trial call is let through: success closes the circuit, failure
    opens it again.
    """

    def __init__(
        self,
        request_volume_threshold: int = 4,
        failure_ratio: float = 0.5,
        delay_seconds: float = 3600.0,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        self.request_volume_threshold = request_volume_threshold
        self.failure_ratio = failure_ratio
        self.delay_seconds = delay_seconds
        self._clock = clock
        self._window: Deque[bool] = deque(maxlen=request_volume_threshold)
        self._state = CircuitState.CLOSED
        self._opened_at: Optional[float] = None
        self._trial_in_flight = False

    @property
    def state(self) -> CircuitState:
        if self._state is CircuitState.OPEN and self._delay_elapsed():
            return CircuitState.HALF_OPEN
        return self._state

    def _delay_elapsed(self) -> bool:
        return self._opened_at is not None and self._clock() - self._opened_at >= self.delay_seconds

    def _open(self) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        self._window.clear()
        logger.warning(f"Circuit breaker opened for {self.delay_seconds}s")

    def _close(self) -> None:
        self._state = CircuitState.CLOSED
        self._opened_at = None
        self._window.clear()
        logger.info("Circuit breaker closed")

    def _before_call(self) -> None:
        if self._state is CircuitState.OPEN:
            if not self._delay_elapsed():
                raise CircuitBreakerOpenError("Circuit breaker is open")
            self._state = CircuitState.HALF_OPEN
        if self._state is CircuitState.HALF_OPEN:
            if self._trial_in_flight:
                raise CircuitBreakerOpenError("Circuit breaker is half-open, trial call in progress")
            self._trial_in_flight = True

    def _record(self, success: bool) -> None:
        if self._state is CircuitState.HALF_OPEN:
            self._trial_in_flight = False
            if success:
                self._close()
            else:
                self._open()
            return

        self._window.append(success)
        if len(self._window) < self.request_volume_threshold:
            return
        failures = sum(1 for ok in self._window if not ok)
        if failures / len(self._window) >= self.failure_ratio:
            self._open()

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        self._before_call()
        try:
            result = await func()
        except RateLimitExceededError:
            # A rejected call never reached the dependency
            if self._state is CircuitState.HALF_OPEN:
                self._trial_in_flight = False
            raise
        except Exception:
            self._record(False)
            raise
        self._record(True)
        return result


class RateLimiter:
    """Allow at most ``value`` calls per fixed ``window_seconds`` window."""

    def __init__(self, value: int = 1, window_seconds: float = 600.0, *, clock: Clock = time.monotonic) -> None:
        self.value = value
        self.window_seconds = window_seconds
        self._clock = clock
        self._window_start: Optional[float] = None
        self._count = 0

    def acquire(self) -> None:
        """Take one permit or raise ``RateLimitExceededError``."""
        now = self._clock()
        if self._window_start is None or now - self._window_start >= self.window_seconds:
            self._window_start = now
            self._count = 0
        if self._count >= self.value:
            raise RateLimitExceededError(
                f"Rate limit of {self.value} call(s) per {self.window_seconds}s exceeded"
            )
        self._count += 1

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        self.acquire()
        return await func()


class FaultTolerance:
    """Composition of retry, circuit breaker and rate limit.

    Any policy may be ``None`` to disable it.
    """

    def __init__(
        self,
        retry: Optional[RetryPolicy] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self.retry = retry
        self.circuit_breaker = circuit_breaker
        self.rate_limiter = rate_limiter

    @classmethod
    def from_config(cls, config: FaultToleranceConfig) -> "FaultTolerance":
        """Build the policies described by the configuration."""
        if not config.enabled:
            return cls()
        return cls(
            retry=RetryPolicy(config.retry_max_retries, config.retry_delay_seconds),
            circuit_breaker=CircuitBreaker(
                config.circuit_request_volume,
                config.circuit_failure_ratio,
                config.circuit_delay_seconds,
            ),
            rate_limiter=RateLimiter(config.rate_limit_value, config.rate_limit_window_seconds),
        )

    async def call(self, func: Callable[[], Awaitable[T]]) -> T:
        # One permit per call, retries included
        if self.rate_limiter is not None:
            self.rate_limiter.acquire()
        guarded = func
        if self.circuit_breaker is not None:
            guarded = _bind(self.circuit_breaker.call, guarded)
        if self.retry is not None:
            guarded = _bind(self.retry.call, guarded)
        return await guarded()


def _bind(
    policy_call: Callable[[Callable[[], Awaitable[T]]], Awaitable[T]],
    func: Callable[[], Awaitable[T]],
) -> Callable[[], Awaitable[T]]:
    async def wrapped() -> T:
        return await policy_call(func)

    return wrapped
