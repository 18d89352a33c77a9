"""Pydantic schemas for API request/response validation."""

from .metrics import CircuitBreakerSnapshot
from .recommendation import Movie, SimulationResponse, UserPreferences

__all__ = [
    "CircuitBreakerSnapshot",
    "Movie",
    "SimulationResponse",
    "UserPreferences",
]
