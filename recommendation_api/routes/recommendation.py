"""Routes for composed recommendations."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from ..providers.registry import ServiceRegistry, get_service_registry
from ..services.errors import DownstreamError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommendations"])


@router.get("/recommendations/{user_id}")
async def get_recommendations(
    user_id: str,
    registry: ServiceRegistry = Depends(get_service_registry),
) -> dict[str, Any]:
    """Get recommendations for a user, degrading when dependencies are down."""
    try:
        outcome = await registry.orchestrator.get_recommendations(user_id)
    except DownstreamError as e:
        logger.error(
            "recommendations.trending_unavailable",
            extra={"user_id": user_id, "service": e.service, "error": str(e)},
        )
        raise HTTPException(status_code=500, detail=str(e))
    return outcome.to_body()
