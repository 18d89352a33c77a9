"""Central registry wiring breakers, clients and the orchestrator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request

from ..adapters.downstream_factory import create_downstream_client
from ..services.circuit_breaker import CircuitBreaker
from ..services.metrics_reporter import MetricsReporter
from ..services.orchestrator import RecommendationOrchestrator
from ..services.simulation import (
    CONTENT_SERVICE,
    USER_PROFILE_SERVICE,
    BehaviorSimulator,
)

if TYPE_CHECKING:
    from ..adapters.downstream import DownstreamClient
    from ..config.settings import Settings

logger = logging.getLogger(__name__)


class ServiceRegistry:
    """Owns the per-process collaborators for one application instance.

    Each protected dependency gets exactly one breaker, created here and
    handed to the orchestrator. Nothing is module-global.
    """

    def __init__(
        self,
        settings: Settings,
        client: DownstreamClient | None = None,
    ) -> None:
        self._settings = settings
        self.simulator = BehaviorSimulator(
            slow_delay=settings.simulated_slow_delay_seconds
        )
        self.client = client or create_downstream_client(settings)

        breaker_config = settings.breaker_config()
        self.orchestrator = RecommendationOrchestrator(
            client=self.client,
            profile_breaker=CircuitBreaker(USER_PROFILE_SERVICE, breaker_config),
            catalog_breaker=CircuitBreaker(CONTENT_SERVICE, breaker_config),
            simulator=self.simulator,
        )
        self.metrics_reporter = MetricsReporter(self.orchestrator.breakers)

        logger.info(
            "service_registry.ready",
            extra={
                "downstream_mode": settings.downstream_mode,
                "breakers": list(self.orchestrator.breakers),
            },
        )

    async def aclose(self) -> None:
        await self.client.aclose()


def get_service_registry(request: Request) -> ServiceRegistry:
    """FastAPI dependency returning the registry built at startup."""
    registry: ServiceRegistry = request.app.state.registry
    return registry
