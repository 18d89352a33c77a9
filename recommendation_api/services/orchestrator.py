"""RecommendationOrchestrator: breaker-protected composition of recommendations.

Fetches the user's preference profile and the content catalog through their
circuit breakers, then picks one of four composition branches based on the
breakers' states once both calls have settled.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, ClassVar, Union

from opentelemetry import trace

from ..adapters.downstream import DownstreamClient
from ..observability.metrics import RECOMMENDATION_BRANCHES, RECOMMENDATION_FALLBACKS
from ..schemas.recommendation import Movie, UserPreferences
from .circuit_breaker import CircuitBreaker, CircuitState
from .simulation import CONTENT_SERVICE, USER_PROFILE_SERVICE, BehaviorSimulator

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("recommendation-api.orchestrator")

DEFAULT_PREFERENCES = ("Comedy", "Family")

PROFILE_DEPENDENCY = "user-profile-service"
CATALOG_DEPENDENCY = "content-service"

DEGRADED_MESSAGE = (
    "Our recommendation service is temporarily degraded. "
    "Here are some trending movies."
)
CATALOG_FALLBACK_MESSAGE = "Using trending movies as fallback"


def _dump_movies(movies: list[Movie]) -> list[dict[str, Any]]:
    return [movie.model_dump() for movie in movies]


# ----------------------------------------------------------------------
# Composition outcomes
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class FullRecommendations:
    """Both dependencies usable: real preferences and real catalog."""

    branch: ClassVar[str] = "full"
    fallback_triggered_for: ClassVar[tuple[str, ...]] = ()

    user_preferences: UserPreferences
    recommendations: list[Movie]

    def to_body(self) -> dict[str, Any]:
        return {
            "user_preferences": self.user_preferences.model_dump(),
            "recommendations": _dump_movies(self.recommendations),
        }


@dataclass(frozen=True)
class ProfileFallback:
    """Profile breaker open: default preferences plus the catalog result."""

    branch: ClassVar[str] = "profile_fallback"
    fallback_triggered_for: ClassVar[tuple[str, ...]] = (PROFILE_DEPENDENCY,)

    user_preferences: UserPreferences
    recommendations: list[Movie]

    def to_body(self) -> dict[str, Any]:
        return {
            "user_preferences": self.user_preferences.model_dump(),
            "recommendations": _dump_movies(self.recommendations),
            "fallback_triggered_for": ", ".join(self.fallback_triggered_for),
        }


@dataclass(frozen=True)
class CatalogFallback:
    """Catalog breaker open: preferences plus trending in place of the catalog."""

    branch: ClassVar[str] = "catalog_fallback"
    fallback_triggered_for: ClassVar[tuple[str, ...]] = (CATALOG_DEPENDENCY,)

    user_preferences: UserPreferences
    trending: list[Movie]
    message: str = CATALOG_FALLBACK_MESSAGE

    def to_body(self) -> dict[str, Any]:
        return {
            "user_preferences": self.user_preferences.model_dump(),
            "trending": _dump_movies(self.trending),
            "message": self.message,
            "fallback_triggered_for": ", ".join(self.fallback_triggered_for),
        }


@dataclass(frozen=True)
class DegradedService:
    """Both breakers open: trending only."""

    branch: ClassVar[str] = "degraded"
    fallback_triggered_for: ClassVar[tuple[str, ...]] = (
        PROFILE_DEPENDENCY,
        CATALOG_DEPENDENCY,
    )

    trending: list[Movie]
    message: str = DEGRADED_MESSAGE

    def to_body(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "trending": _dump_movies(self.trending),
            "fallback_triggered_for": ", ".join(self.fallback_triggered_for),
        }


RecommendationOutcome = Union[
    FullRecommendations, ProfileFallback, CatalogFallback, DegradedService
]


@dataclass
class _FetchResult:
    """Value obtained from one protected dependency, real or substituted."""

    value: Any
    fell_back: bool = False


class RecommendationOrchestrator:
    """Composes recommendations from two breaker-protected dependencies.

    Never raises for profile or catalog failures; those degrade the
    response. The trending source is unprotected, so a failure fetching it
    propagates to the caller.
    """

    def __init__(
        self,
        client: DownstreamClient,
        profile_breaker: CircuitBreaker,
        catalog_breaker: CircuitBreaker,
        simulator: BehaviorSimulator | None = None,
    ) -> None:
        if profile_breaker is catalog_breaker:
            raise ValueError(
                "profile and catalog dependencies need separate breakers"
            )
        self._client = client
        self.profile_breaker = profile_breaker
        self.catalog_breaker = catalog_breaker
        self._simulator = simulator or BehaviorSimulator()

    @property
    def breakers(self) -> dict[str, CircuitBreaker]:
        return {
            self.profile_breaker.name: self.profile_breaker,
            self.catalog_breaker.name: self.catalog_breaker,
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_recommendations(self, user_id: str) -> RecommendationOutcome:
        """Compose recommendations for ``user_id``.

        Branch selection, in priority order, on breaker state after both
        calls have settled:

        1. both open → :class:`DegradedService` (trending only)
        2. profile open → :class:`ProfileFallback`
        3. catalog open → :class:`CatalogFallback` (trending for catalog)
        4. otherwise → :class:`FullRecommendations`
        """
        start = time.monotonic()

        with tracer.start_as_current_span("orchestrator.get_recommendations") as span:
            span.set_attribute("user_id", user_id)

            profile = await self._fetch_profile(user_id)
            catalog = await self._fetch_catalog()

            profile_open = self.profile_breaker.state is CircuitState.OPEN
            catalog_open = self.catalog_breaker.state is CircuitState.OPEN

            outcome: RecommendationOutcome
            if profile_open and catalog_open:
                outcome = DegradedService(trending=await self._client.fetch_trending())
            elif profile_open:
                outcome = ProfileFallback(
                    user_preferences=_default_preferences(user_id),
                    recommendations=catalog.value,
                )
            elif catalog_open:
                outcome = CatalogFallback(
                    user_preferences=profile.value,
                    trending=await self._client.fetch_trending(),
                )
            else:
                outcome = FullRecommendations(
                    user_preferences=profile.value,
                    recommendations=catalog.value,
                )

            RECOMMENDATION_BRANCHES.labels(branch=outcome.branch).inc()
            total_latency = (time.monotonic() - start) * 1000

            span.set_attribute("branch", outcome.branch)
            span.set_attribute("profile_breaker_state", self.profile_breaker.state.value)
            span.set_attribute("catalog_breaker_state", self.catalog_breaker.state.value)
            span.set_attribute("total_latency_ms", total_latency)

            logger.info(
                "orchestrator.composed",
                extra={
                    "user_id": user_id,
                    "branch": outcome.branch,
                    "profile_fell_back": profile.fell_back,
                    "catalog_fell_back": catalog.fell_back,
                    "profile_breaker_state": self.profile_breaker.state.value,
                    "catalog_breaker_state": self.catalog_breaker.state.value,
                    "total_latency_ms": round(total_latency, 2),
                },
            )
            return outcome

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _fetch_profile(self, user_id: str) -> _FetchResult:
        """Profile through its breaker; default preferences on any failure."""

        async def call() -> UserPreferences:
            await self._simulator.apply(USER_PROFILE_SERVICE)
            return await self._client.fetch_profile(user_id)

        try:
            return _FetchResult(await self.profile_breaker.execute(call))
        except Exception as exc:
            self._record_fallback(PROFILE_DEPENDENCY, exc)
            return _FetchResult(_default_preferences(user_id), fell_back=True)

    async def _fetch_catalog(self) -> _FetchResult:
        """Catalog through its breaker; empty list on any failure."""

        async def call() -> list[Movie]:
            await self._simulator.apply(CONTENT_SERVICE)
            return await self._client.fetch_catalog()

        try:
            return _FetchResult(await self.catalog_breaker.execute(call))
        except Exception as exc:
            self._record_fallback(CATALOG_DEPENDENCY, exc)
            return _FetchResult([], fell_back=True)

    def _record_fallback(self, dependency: str, exc: Exception) -> None:
        RECOMMENDATION_FALLBACKS.labels(dependency=dependency).inc()
        logger.warning(
            "orchestrator.fallback_triggered",
            extra={
                "dependency": dependency,
                "error_type": type(exc).__name__,
                "error": str(exc),
            },
        )


def _default_preferences(user_id: str) -> UserPreferences:
    return UserPreferences(user_id=user_id, preferences=list(DEFAULT_PREFERENCES))
