"""Prometheus metric definitions for breaker and fallback observability."""

from prometheus_client import Counter, Gauge, Histogram

# --- Bucket configurations ---

DOWNSTREAM_LATENCY_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)

# --- Circuit breaker metrics ---

CIRCUIT_BREAKER_STATE = Gauge(
    "recommendation_api_circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=open, 2=half_open)",
    ["breaker"],
)

CIRCUIT_BREAKER_CALLS = Counter(
    "recommendation_api_circuit_breaker_calls_total",
    "Circuit breaker call outcomes",
    ["breaker", "outcome"],
)

CIRCUIT_BREAKER_TRANSITIONS = Counter(
    "recommendation_api_circuit_breaker_transitions_total",
    "Circuit breaker state transitions",
    ["breaker", "from_state", "to_state"],
)

# --- Downstream metrics ---

DOWNSTREAM_REQUEST_DURATION = Histogram(
    "recommendation_api_downstream_request_duration_seconds",
    "Downstream collaborator request latency in seconds",
    ["service"],
    buckets=DOWNSTREAM_LATENCY_BUCKETS,
)

# --- Composition metrics ---

RECOMMENDATION_FALLBACKS = Counter(
    "recommendation_api_fallbacks_total",
    "Fallbacks triggered per dependency",
    ["dependency"],
)

RECOMMENDATION_BRANCHES = Counter(
    "recommendation_api_composition_branches_total",
    "Composition branch selected per recommendation request",
    ["branch"],
)
