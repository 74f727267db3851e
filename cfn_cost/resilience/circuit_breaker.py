"""
Circuit breaker for calls to the CloudFormation API.
After repeated failures, calls fail fast instead of waiting on client timeouts
for every stack in a multi-stack comparison.
"""
from enum import Enum
from datetime import datetime
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


FAILURE_THRESHOLD = 3  # Trip after N consecutive failures
OPEN_STATE_DURATION = 60  # Seconds to stay OPEN before probing
HALF_OPEN_MAX_REQUESTS = 1  # Probes admitted while HALF_OPEN


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing fast
    HALF_OPEN = "half_open"  # Probing for recovery


class CircuitBreakerError(Exception):
    """Raised when a call is refused because the circuit is open."""
    pass


class CircuitBreaker:
    """
    Circuit breaker guarding one upstream service.

    Transitions:
    - CLOSED -> OPEN: after failure_threshold consecutive failures
    - OPEN -> HALF_OPEN: once open_duration seconds have passed
    - HALF_OPEN -> CLOSED: probe succeeded
    - HALF_OPEN -> OPEN: probe failed
    """

    def __init__(
        self,
        service_name: str,
        failure_threshold: int = FAILURE_THRESHOLD,
        open_duration: int = OPEN_STATE_DURATION,
        half_open_max_requests: int = HALF_OPEN_MAX_REQUESTS,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize circuit breaker.

        Args:
            service_name: Name of the guarded service (e.g., "cloudformation:us-east-1")
            failure_threshold: Consecutive failures before opening
            open_duration: Seconds to remain OPEN before HALF_OPEN
            half_open_max_requests: Probes allowed in HALF_OPEN
            clock: Source of the current time
        """
        self.service_name = service_name
        self.failure_threshold = failure_threshold
        self.open_duration = open_duration
        self.half_open_max_requests = half_open_max_requests
        self._clock = clock

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.opened_at: Optional[datetime] = None
        self.half_open_requests = 0

    def _transition(self, new_state: CircuitState, reason: str) -> None:
        logger.warning(
            "Circuit breaker for %s: %s -> %s (%s)",
            self.service_name, self.state.name, new_state.name, reason,
        )
        self.state = new_state

    def allow_request(self) -> bool:
        """
        Check whether a call may proceed.

        Returns:
            True if the call should go upstream, False to fail fast
        """
        if self.state == CircuitState.OPEN:
            elapsed = (self._clock() - self.opened_at).total_seconds() if self.opened_at else 0
            if elapsed < self.open_duration:
                return False
            self._transition(CircuitState.HALF_OPEN, "testing recovery")
            self.half_open_requests = 0

        if self.state == CircuitState.HALF_OPEN:
            if self.half_open_requests >= self.half_open_max_requests:
                return False
            self.half_open_requests += 1

        return True

    def record_success(self) -> None:
        if self.state == CircuitState.HALF_OPEN:
            self._transition(CircuitState.CLOSED, "service recovered")
            self.half_open_requests = 0
            self.opened_at = None
        self.failure_count = 0

    def record_failure(self) -> None:
        self.failure_count += 1

        if self.state == CircuitState.HALF_OPEN:
            self._transition(CircuitState.OPEN, "service still failing")
            self.opened_at = self._clock()
            self.half_open_requests = 0
        elif self.state == CircuitState.CLOSED and self.failure_count >= self.failure_threshold:
            self._transition(CircuitState.OPEN, f"{self.failure_count} consecutive failures")
            self.opened_at = self._clock()

    def call(
        self,
        func: Callable[..., T],
        *args: Any,
        is_failure: Optional[Callable[[Exception], bool]] = None,
        **kwargs: Any,
    ) -> T:
        """
        Run func through the breaker.

        Exceptions raised by func are re-raised. They count as a failure unless
        is_failure says otherwise (an upstream that answers "not found" is healthy).

        Raises:
            CircuitBreakerError: If the circuit is open
        """
        if not self.allow_request():
            raise CircuitBreakerError(
                f"{self.service_name} is unavailable (circuit open after repeated failures)"
            )
        try:
            result = func(*args, **kwargs)
        except Exception as error:
            if is_failure is None or is_failure(error):
                self.record_failure()
            else:
                self.record_success()
            raise
        self.record_success()
        return result

    def current_state(self) -> CircuitState:
        return self.state


# One shared breaker per service name
_circuit_breakers: Dict[str, CircuitBreaker] = {}


def get_circuit_breaker(service_name: str) -> CircuitBreaker:
    """
    Get or create the circuit breaker for a service.

    Args:
        service_name: Name of the service

    Returns:
        CircuitBreaker instance shared by every caller using that name
    """
    if service_name not in _circuit_breakers:
        _circuit_breakers[service_name] = CircuitBreaker(service_name)
    return _circuit_breakers[service_name]


def reset_circuit_breakers() -> None:
    """Forget every breaker (used between test cases)."""
    _circuit_breakers.clear()
