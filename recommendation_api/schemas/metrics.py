"""Schemas for circuit breaker metrics."""

from pydantic import BaseModel


class CircuitBreakerSnapshot(BaseModel):
    """Point-in-time view of one circuit breaker."""

    state: str
    failure_rate_percent: str
    total_successes: int
    consecutive_failures: int
