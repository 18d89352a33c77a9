"""Per-dependency circuit breaker for downstream calls."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from ..observability.metrics import (
    CIRCUIT_BREAKER_CALLS,
    CIRCUIT_BREAKER_STATE,
    CIRCUIT_BREAKER_TRANSITIONS,
)
from .errors import CallTimeoutError, CircuitOpenError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CircuitState(str, Enum):
    """Circuit breaker states."""

    CLOSED = "CLOSED"
    OPEN = "OPEN"
    HALF_OPEN = "HALF_OPEN"


_STATE_GAUGE_VALUES = {
    CircuitState.CLOSED: 0,
    CircuitState.OPEN: 1,
    CircuitState.HALF_OPEN: 2,
}


@dataclass(frozen=True)
class BreakerConfig:
    """Thresholds and timings for one circuit breaker."""

    call_timeout: float = 2.0
    consecutive_failure_threshold: int = 5
    failure_rate_percent_threshold: float = 50.0
    failure_rate_window: int = 10
    open_cooldown: float = 30.0
    half_open_trials_required: int = 3

    def __post_init__(self) -> None:
        if self.call_timeout <= 0:
            raise ValueError("call_timeout must be positive")
        if self.consecutive_failure_threshold < 1:
            raise ValueError("consecutive_failure_threshold must be at least 1")
        if self.failure_rate_window < 1:
            raise ValueError("failure_rate_window must be at least 1")
        if self.half_open_trials_required < 1:
            raise ValueError("half_open_trials_required must be at least 1")
        if self.open_cooldown < 0:
            raise ValueError("open_cooldown must not be negative")


class CircuitBreaker:
    """Three-state circuit breaker: CLOSED → OPEN → HALF_OPEN → CLOSED.

    - **CLOSED**: calls pass through. The breaker trips on either
      ``consecutive_failure_threshold`` consecutive failures or, once the
      history window is full, a failure rate at or above
      ``failure_rate_percent_threshold``.
    - **OPEN**: calls are rejected with :class:`CircuitOpenError` until
      ``open_cooldown`` seconds have passed since the last failure.
    - **HALF_OPEN**: calls are attempted as trials. Any failure reopens the
      circuit; ``half_open_trials_required`` consecutive successes close it.

    State is guarded by an ``asyncio.Lock``. The protected call itself runs
    outside the lock, so outcomes are recorded in completion order.
    """

    def __init__(
        self,
        name: str,
        config: BreakerConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self.config = config or BreakerConfig()
        self._clock = clock
        self._lock = asyncio.Lock()
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._total_successes = 0
        self._trials_completed = 0
        self._last_failure_at: float | None = None
        self._history: deque[bool] = deque(maxlen=self.config.failure_rate_window)
        CIRCUIT_BREAKER_STATE.labels(breaker=name).set(
            _STATE_GAUGE_VALUES[self._state]
        )

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def total_successes(self) -> int:
        return self._total_successes

    @property
    def trials_completed(self) -> int:
        return self._trials_completed

    @property
    def last_failure_at(self) -> float | None:
        return self._last_failure_at

    @property
    def history(self) -> tuple[bool, ...]:
        """Recent outcomes, oldest first (``True`` = success)."""
        return tuple(self._history)

    @property
    def failure_rate_percent(self) -> float:
        """Percentage of failures in the history window, 0.0 when empty."""
        if not self._history:
            return 0.0
        failures = sum(1 for outcome in self._history if not outcome)
        return failures / len(self._history) * 100

    async def execute(self, call: Callable[[], Awaitable[T]]) -> T:
        """Run ``call`` under breaker protection.

        Raises :class:`CircuitOpenError` without invoking ``call`` while the
        circuit is open, :class:`CallTimeoutError` when ``call`` exceeds
        ``call_timeout``, or whatever ``call`` itself raised.

        The timeout cancels the pending coroutine via ``asyncio.timeout``.
        Side effects the call already performed are not undone. A
        ``TimeoutError`` raised by ``call`` itself is a plain failure and
        propagates unchanged.
        """
        await self._admit()

        deadline = asyncio.timeout(self.config.call_timeout)
        try:
            async with deadline:
                result = await call()
        except TimeoutError as exc:
            if not deadline.expired():
                await self._record_failure("failure")
                raise
            await self._record_failure("timeout")
            raise CallTimeoutError(self.name, self.config.call_timeout) from exc
        except Exception:
            await self._record_failure("failure")
            raise

        await self._record_success()
        return result

    async def _admit(self) -> None:
        async with self._lock:
            if self._state is not CircuitState.OPEN:
                return

            elapsed = self._clock() - (self._last_failure_at or 0.0)
            if elapsed > self.config.open_cooldown:
                self._trials_completed = 0
                self._transition(CircuitState.HALF_OPEN)
                return

            CIRCUIT_BREAKER_CALLS.labels(breaker=self.name, outcome="rejected").inc()
            raise CircuitOpenError(
                self.name, retry_after=max(0.0, self.config.open_cooldown - elapsed)
            )

    async def _record_success(self) -> None:
        async with self._lock:
            CIRCUIT_BREAKER_CALLS.labels(breaker=self.name, outcome="success").inc()
            self._history.append(True)
            self._total_successes += 1

            if self._state is CircuitState.HALF_OPEN:
                self._trials_completed += 1
                if self._trials_completed >= self.config.half_open_trials_required:
                    self._consecutive_failures = 0
                    self._trials_completed = 0
                    self._transition(CircuitState.CLOSED)
            elif self._state is CircuitState.CLOSED:
                self._consecutive_failures = 0

    async def _record_failure(self, outcome: str) -> None:
        async with self._lock:
            CIRCUIT_BREAKER_CALLS.labels(breaker=self.name, outcome=outcome).inc()
            self._history.append(False)
            self._last_failure_at = self._clock()

            if self._state is CircuitState.HALF_OPEN:
                self._trials_completed = 0
                self._transition(CircuitState.OPEN, reason="trial_failed")
            elif self._state is CircuitState.CLOSED:
                self._consecutive_failures += 1
                if (
                    self._consecutive_failures
                    >= self.config.consecutive_failure_threshold
                ):
                    self._transition(CircuitState.OPEN, reason="consecutive_failures")
                elif (
                    len(self._history) >= self.config.failure_rate_window
                    and self.failure_rate_percent
                    >= self.config.failure_rate_percent_threshold
                ):
                    self._transition(CircuitState.OPEN, reason="failure_rate")

    def _transition(self, new_state: CircuitState, reason: str | None = None) -> None:
        old_state = self._state
        self._state = new_state
        CIRCUIT_BREAKER_STATE.labels(breaker=self.name).set(
            _STATE_GAUGE_VALUES[new_state]
        )
        CIRCUIT_BREAKER_TRANSITIONS.labels(
            breaker=self.name, from_state=old_state.value, to_state=new_state.value
        ).inc()

        extra = {
            "breaker": self.name,
            "from_state": old_state.value,
            "to_state": new_state.value,
            "consecutive_failures": self._consecutive_failures,
            "failure_rate_percent": round(self.failure_rate_percent, 1),
        }
        if reason:
            extra["reason"] = reason

        if new_state is CircuitState.OPEN:
            logger.warning("circuit_breaker.opened", extra=extra)
        elif new_state is CircuitState.HALF_OPEN:
            logger.info("circuit_breaker.half_open", extra=extra)
        else:
            logger.info("circuit_breaker.closed", extra=extra)
