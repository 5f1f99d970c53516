"""
Circuit breaker for the geocoding provider.

Batch jobs make many independent lookups; once the provider has failed
several times in a row (bad key, quota exhausted, outage) further calls
are short-circuited until a recovery window passes. Nothing here retries.
"""

import time
from typing import Callable, Optional, Type


class CircuitOpenError(Exception):
    """Raised when a call is refused because the circuit is open."""
    pass


class CircuitBreaker:
    """
    Circuit breaker pattern to stop calling a failing service.

    States:
    - CLOSED: Normal operation, calls pass through
    - OPEN: Too many consecutive failures, calls are refused
    - HALF_OPEN: Recovery window elapsed, next call is a probe
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        expected_exception: Type[Exception] = Exception,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            failure_threshold: Consecutive failures before opening circuit
            recovery_timeout: Seconds to wait before allowing a probe call
            expected_exception: Exception type that counts as failure
            clock: Monotonic time source, injectable for tests
        """
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.expected_exception = expected_exception
        self._clock = clock

        self.failure_count = 0
        self.last_failure_time: Optional[float] = None
        self.state = self.CLOSED

    def allow(self) -> bool:
        """Return True if a call may proceed now, moving OPEN to HALF_OPEN when due."""
        if self.state == self.OPEN:
            if self._time_until_reset() <= 0:
                self.state = self.HALF_OPEN
                return True
            return False
        return True

    def call(self, func: Callable, *args, **kwargs):
        """
        Execute function with circuit breaker protection.

        Raises:
            CircuitOpenError: If circuit is OPEN
            Original exception: If function fails in CLOSED/HALF_OPEN state
        """
        if not self.allow():
            raise CircuitOpenError(
                f"Circuit breaker is OPEN. Retry after {self._time_until_reset():.0f}s"
            )

        try:
            result = func(*args, **kwargs)
        except self.expected_exception:
            self.record_failure()
            raise
        self.record_success()
        return result

    def _time_until_reset(self) -> float:
        if self.last_failure_time is None:
            return 0.0
        elapsed = self._clock() - self.last_failure_time
        return max(0.0, self.recovery_timeout - elapsed)

    def record_success(self):
        self.failure_count = 0
        self.state = self.CLOSED

    def record_failure(self):
        self.failure_count += 1
        self.last_failure_time = self._clock()

        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self.state = self.OPEN

    def reset(self):
        """Manually reset the circuit breaker."""
        self.failure_count = 0
        self.last_failure_time = None
        self.state = self.CLOSED
