"""Read-only projection of circuit breaker counters."""

from __future__ import annotations

from collections.abc import Mapping

from ..schemas.metrics import CircuitBreakerSnapshot
from .circuit_breaker import CircuitBreaker


class MetricsReporter:
    """Builds per-breaker snapshots without touching breaker state."""

    def __init__(self, breakers: Mapping[str, CircuitBreaker]) -> None:
        self._breakers = dict(breakers)

    def snapshot(self) -> dict[str, CircuitBreakerSnapshot]:
        return {
            name: CircuitBreakerSnapshot(
                state=breaker.state.value,
                failure_rate_percent=f"{breaker.failure_rate_percent:.1f}",
                total_successes=breaker.total_successes,
                consecutive_failures=breaker.consecutive_failures,
            )
            for name, breaker in self._breakers.items()
        }
