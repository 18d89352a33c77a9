import os
from functools import lru_cache
from pydantic import BaseModel

from ..services.circuit_breaker import BreakerConfig


class Settings(BaseModel):
    env: str = os.getenv("ENV", "dev")
    port: int = int(os.getenv("PORT", "8080"))
    log_level: str = os.getenv("LOG_LEVEL", "info")

    # Downstream collaborators
    user_profile_url: str = os.getenv(
        "USER_PROFILE_URL", "http://user-profile-service:8081"
    )
    content_url: str = os.getenv("CONTENT_URL", "http://content-service:8082")
    trending_url: str = os.getenv("TRENDING_URL", "http://trending-service:8083")
    # "static" serves the collaborators' fixed payloads in-process, "http" calls them
    downstream_mode: str = os.getenv("DOWNSTREAM_MODE", "static")
    downstream_http_timeout_seconds: float = float(
        os.getenv("DOWNSTREAM_HTTP_TIMEOUT_SECONDS", "10.0")
    )

    # Injected "slow" behavior; longer than the call timeout so it trips the breaker
    simulated_slow_delay_seconds: float = float(
        os.getenv("SIMULATED_SLOW_DELAY_SECONDS", "3.0")
    )

    # Circuit breaker defaults, shared by every protected dependency
    breaker_call_timeout_seconds: float = float(
        os.getenv("BREAKER_CALL_TIMEOUT_SECONDS", "2.0")
    )
    breaker_consecutive_failure_threshold: int = int(
        os.getenv("BREAKER_CONSECUTIVE_FAILURE_THRESHOLD", "5")
    )
    breaker_failure_rate_percent_threshold: float = float(
        os.getenv("BREAKER_FAILURE_RATE_PERCENT_THRESHOLD", "50")
    )
    breaker_failure_rate_window: int = int(
        os.getenv("BREAKER_FAILURE_RATE_WINDOW", "10")
    )
    breaker_open_cooldown_seconds: float = float(
        os.getenv("BREAKER_OPEN_COOLDOWN_SECONDS", "30.0")
    )
    breaker_half_open_trials_required: int = int(
        os.getenv("BREAKER_HALF_OPEN_TRIALS_REQUIRED", "3")
    )

    # Observability
    otel_exporter_otlp_endpoint: str | None = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")

    def breaker_config(self) -> BreakerConfig:
        return BreakerConfig(
            call_timeout=self.breaker_call_timeout_seconds,
            consecutive_failure_threshold=self.breaker_consecutive_failure_threshold,
            failure_rate_percent_threshold=self.breaker_failure_rate_percent_threshold,
            failure_rate_window=self.breaker_failure_rate_window,
            open_cooldown=self.breaker_open_cooldown_seconds,
            half_open_trials_required=self.breaker_half_open_trials_required,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
