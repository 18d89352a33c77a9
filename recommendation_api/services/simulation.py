"""Injected behavior for protected downstream collaborators.

Lets operators and tests make a collaborator slow or failing without touching
the collaborator itself. The behavior is applied in front of every protected
call, inside the breaker's timeout.
"""

from __future__ import annotations

import asyncio
import logging

from .errors import DownstreamError, InvalidSimulationError

logger = logging.getLogger(__name__)

USER_PROFILE_SERVICE = "user-profile"
CONTENT_SERVICE = "content"

SIMULATED_SERVICES = (USER_PROFILE_SERVICE, CONTENT_SERVICE)
BEHAVIORS = ("normal", "slow", "fail")


class BehaviorSimulator:
    """Holds the injected behavior for each simulated collaborator."""

    def __init__(self, slow_delay: float = 3.0) -> None:
        self._slow_delay = slow_delay
        self._behaviors: dict[str, str] = {
            service: "normal" for service in SIMULATED_SERVICES
        }

    def get_behavior(self, service: str) -> str:
        self._require_service(service)
        return self._behaviors[service]

    def set_behavior(self, service: str, behavior: str) -> None:
        self._require_service(service)
        if behavior not in BEHAVIORS:
            raise InvalidSimulationError(
                f"Unknown behavior '{behavior}'. Expected one of: {', '.join(BEHAVIORS)}"
            )
        previous = self._behaviors[service]
        self._behaviors[service] = behavior
        logger.info(
            "simulation.behavior_changed",
            extra={"service": service, "from": previous, "to": behavior},
        )

    async def apply(self, service: str) -> None:
        """Act out the injected behavior for ``service``."""
        behavior = self.get_behavior(service)
        if behavior == "slow":
            await asyncio.sleep(self._slow_delay)
        elif behavior == "fail":
            raise DownstreamError(service, "Service Error - 500", status_code=500)

    def _require_service(self, service: str) -> None:
        if service not in self._behaviors:
            raise InvalidSimulationError(
                f"Unknown service '{service}'. "
                f"Expected one of: {', '.join(SIMULATED_SERVICES)}"
            )
