"""
Circuit Breaker for the verification provider - Stops hammering a failing
verification source during a run.

Pattern:
- Track consecutive provider faults (exceptions and timeouts)
- Open circuit after N faults; checks then fail fast
- Auto-recover after cooldown period
"""

import time
from enum import Enum
from dataclasses import dataclass
from threading import Lock
from typing import Optional

from diligence.config import settings
from diligence.logger import get_logger

logger = get_logger("circuit_breaker")


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject requests
    HALF_OPEN = "half_open"  # Testing if recovered


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker configuration."""
    failure_threshold: int = 5  # Open after N consecutive failures
    cooldown_seconds: float = 60  # Wait before trying again
    half_open_max_calls: int = 3  # Test with N calls in half-open state

    @classmethod
    def from_settings(cls) -> "CircuitBreakerConfig":
        return cls(
            failure_threshold=settings.CIRCUIT_FAILURE_THRESHOLD,
            cooldown_seconds=settings.CIRCUIT_COOLDOWN_SECONDS,
            half_open_max_calls=settings.CIRCUIT_HALF_OPEN_MAX_CALLS,
        )


class ProviderCircuitBreaker:
    """Circuit breaker for verification provider calls."""

    def __init__(self, config: Optional[CircuitBreakerConfig] = None, clock=time.monotonic):
        self.config = config or CircuitBreakerConfig()
        self.state = CircuitState.CLOSED
        self.consecutive_failures = 0
        self.last_failure_time = 0.0
        self.half_open_calls = 0
        self._clock = clock
        self._lock = Lock()

    def can_call(self) -> tuple[bool, str]:
        """Check if a provider call is allowed.

        Returns:
            Tuple of (allowed, reason)
        """
        with self._lock:
            if self.state == CircuitState.CLOSED:
                return True, "circuit_closed"

            if self.state == CircuitState.OPEN:
                elapsed = self._clock() - self.last_failure_time
                if elapsed >= self.config.cooldown_seconds:
                    logger.info("Circuit breaker: transitioning to HALF_OPEN")
                    self.state = CircuitState.HALF_OPEN
                    self.half_open_calls = 1
                    return True, "circuit_half_open"
                remaining = int(self.config.cooldown_seconds - elapsed)
                return False, f"circuit_open_cooldown_{remaining}s"

            # HALF_OPEN
            if self.half_open_calls < self.config.half_open_max_calls:
                self.half_open_calls += 1
                return True, "circuit_half_open_testing"
            return False, "circuit_half_open_max_calls"

    def record_success(self):
        """Record a resolved provider call."""
        with self._lock:
            if self.state == CircuitState.HALF_OPEN:
                logger.info("Circuit breaker: recovered, transitioning to CLOSED")
                self.state = CircuitState.CLOSED
                self.consecutive_failures = 0
                self.half_open_calls = 0
            elif self.consecutive_failures > 0:
                logger.info(f"Circuit breaker: reset failure count (was {self.consecutive_failures})")
                self.consecutive_failures = 0

    def record_failure(self):
        """Record a provider fault."""
        with self._lock:
            self.consecutive_failures += 1
            self.last_failure_time = self._clock()

            if self.state == CircuitState.HALF_OPEN:
                logger.warning("Circuit breaker: failed in HALF_OPEN, reopening circuit")
                self.state = CircuitState.OPEN
                self.half_open_calls = 0

            elif self.state == CircuitState.CLOSED:
                if self.consecutive_failures >= self.config.failure_threshold:
                    logger.error(
                        f"Circuit breaker: OPENED after {self.consecutive_failures} failures "
                        f"(cooldown: {self.config.cooldown_seconds}s)"
                    )
                    self.state = CircuitState.OPEN
                else:
                    logger.warning(
                        f"Circuit breaker: failure {self.consecutive_failures}/{self.config.failure_threshold}"
                    )

    def release_trial(self):
        """Give back a half-open trial slot whose call was abandoned."""
        with self._lock:
            if self.state == CircuitState.HALF_OPEN and self.half_open_calls > 0:
                self.half_open_calls -= 1

    def reset(self):
        with self._lock:
            self.state = CircuitState.CLOSED
            self.consecutive_failures = 0
            self.last_failure_time = 0.0
            self.half_open_calls = 0

    def get_status(self) -> dict:
        """Get circuit breaker status."""
        with self._lock:
            return {
                "state": self.state.value,
                "consecutive_failures": self.consecutive_failures,
                "failure_threshold": self.config.failure_threshold,
                "cooldown_seconds": self.config.cooldown_seconds,
                "time_since_last_failure": (
                    int(self._clock() - self.last_failure_time) if self.last_failure_time > 0 else None
                ),
            }


# Global circuit breaker instance
_circuit_breaker: Optional[ProviderCircuitBreaker] = None


def get_circuit_breaker() -> ProviderCircuitBreaker:
    """Get global circuit breaker instance (singleton)."""
    global _circuit_breaker
    if _circuit_breaker is None:
        _circuit_breaker = ProviderCircuitBreaker(CircuitBreakerConfig.from_settings())
    return _circuit_breaker
