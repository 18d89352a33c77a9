"""Shared test fixtures and configuration."""

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set up test environment BEFORE importing app modules that use get_settings
os.environ["DOWNSTREAM_MODE"] = "static"

from recommendation_api.adapters.static_downstream import (  # noqa: E402
    StaticDownstreamClient,
)
from recommendation_api.config import Settings, get_settings  # noqa: E402
from recommendation_api.main import app  # noqa: E402
from recommendation_api.providers.registry import (  # noqa: E402
    ServiceRegistry,
    get_service_registry,
)
from recommendation_api.services.circuit_breaker import BreakerConfig  # noqa: E402

# Clear the lru_cache on get_settings to pick up test env vars
get_settings.cache_clear()


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def breaker_config() -> BreakerConfig:
    """Default thresholds with a short call timeout."""
    return BreakerConfig(
        call_timeout=0.05,
        consecutive_failure_threshold=5,
        failure_rate_percent_threshold=50,
        failure_rate_window=10,
        open_cooldown=30.0,
        half_open_trials_required=3,
    )


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a short call timeout and a slow delay that exceeds it."""
    return Settings(
        downstream_mode="static",
        simulated_slow_delay_seconds=0.5,
        breaker_call_timeout_seconds=0.05,
        breaker_open_cooldown_seconds=30.0,
    )


@pytest.fixture
def registry(test_settings: Settings) -> ServiceRegistry:
    return ServiceRegistry(test_settings, client=StaticDownstreamClient())


@pytest_asyncio.fixture
async def client(registry: ServiceRegistry) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client bound to a fresh service registry."""
    app.dependency_overrides[get_service_registry] = lambda: registry

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
