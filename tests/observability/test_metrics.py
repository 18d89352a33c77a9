"""Tests for observability metrics definitions."""

from prometheus_client import Counter, Gauge, Histogram

from recommendation_api.observability.metrics import (
    CIRCUIT_BREAKER_CALLS,
    CIRCUIT_BREAKER_STATE,
    CIRCUIT_BREAKER_TRANSITIONS,
    DOWNSTREAM_LATENCY_BUCKETS,
    DOWNSTREAM_REQUEST_DURATION,
    RECOMMENDATION_BRANCHES,
    RECOMMENDATION_FALLBACKS,
)


class TestMetricDefinitions:
    """Verify metric objects are properly defined."""

    def test_breaker_state_is_gauge(self) -> None:
        assert isinstance(CIRCUIT_BREAKER_STATE, Gauge)
        assert CIRCUIT_BREAKER_STATE._labelnames == ("breaker",)

    def test_breaker_calls_labels(self) -> None:
        assert isinstance(CIRCUIT_BREAKER_CALLS, Counter)
        assert CIRCUIT_BREAKER_CALLS._labelnames == ("breaker", "outcome")

    def test_breaker_transitions_labels(self) -> None:
        assert CIRCUIT_BREAKER_TRANSITIONS._labelnames == (
            "breaker",
            "from_state",
            "to_state",
        )

    def test_downstream_duration_is_histogram(self) -> None:
        assert isinstance(DOWNSTREAM_REQUEST_DURATION, Histogram)
        assert DOWNSTREAM_REQUEST_DURATION._labelnames == ("service",)
        assert len(DOWNSTREAM_LATENCY_BUCKETS) > 0

    def test_fallback_counters(self) -> None:
        assert RECOMMENDATION_FALLBACKS._labelnames == ("dependency",)
        assert RECOMMENDATION_BRANCHES._labelnames == ("branch",)


class TestBreakerStateGauge:
    """The gauge follows breaker transitions."""

    def test_new_breaker_reports_closed(self) -> None:
        from recommendation_api.services.circuit_breaker import CircuitBreaker

        CircuitBreaker("gauge-check")
        assert CIRCUIT_BREAKER_STATE.labels(breaker="gauge-check")._value.get() == 0
