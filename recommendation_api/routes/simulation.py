"""Routes for injecting downstream behavior."""

from fastapi import APIRouter, Depends, HTTPException

from ..providers.registry import ServiceRegistry, get_service_registry
from ..schemas.recommendation import SimulationResponse
from ..services.errors import InvalidSimulationError

router = APIRouter(prefix="/simulate", tags=["simulation"])


@router.post("/{service}/{behavior}", response_model=SimulationResponse)
async def simulate(
    service: str,
    behavior: str,
    registry: ServiceRegistry = Depends(get_service_registry),
) -> SimulationResponse:
    """Set a collaborator's injected behavior to normal, slow or fail."""
    try:
        registry.simulator.set_behavior(service, behavior)
    except InvalidSimulationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SimulationResponse(message=f"{service} set to {behavior}")
