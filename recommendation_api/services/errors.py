"""Exceptions raised along the breaker-protected call path."""

from __future__ import annotations


class CircuitBreakerError(Exception):
    """Base class for failures produced by a circuit breaker itself."""

    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class CircuitOpenError(CircuitBreakerError):
    """Raised when the breaker is open and the call was not attempted."""

    def __init__(self, name: str, retry_after: float) -> None:
        self.retry_after = retry_after
        super().__init__(
            name,
            f"Circuit breaker '{name}' is OPEN. Retry after {retry_after:.1f}s",
        )


class CallTimeoutError(CircuitBreakerError):
    """Raised when a protected call does not finish within the call timeout."""

    def __init__(self, name: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(name, f"Call to '{name}' timed out after {timeout:.1f}s")


class DownstreamError(Exception):
    """A downstream collaborator call failed."""

    def __init__(
        self, service: str, message: str, status_code: int | None = None
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(message)


class InvalidSimulationError(ValueError):
    """Unknown service or behavior passed to the behavior simulator."""
