"""Routes exposing circuit breaker metrics."""

from fastapi import APIRouter, Depends

from ..providers.registry import ServiceRegistry, get_service_registry
from ..schemas.metrics import CircuitBreakerSnapshot

router = APIRouter(prefix="/metrics", tags=["metrics"])


@router.get(
    "/circuit-breakers", response_model=dict[str, CircuitBreakerSnapshot]
)
def get_circuit_breakers(
    registry: ServiceRegistry = Depends(get_service_registry),
) -> dict[str, CircuitBreakerSnapshot]:
    """Get a snapshot of every circuit breaker, keyed by dependency name."""
    return registry.metrics_reporter.snapshot()
