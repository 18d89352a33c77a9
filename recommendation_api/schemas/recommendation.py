"""Schemas for downstream payloads and recommendation responses."""

from pydantic import BaseModel, Field


class UserPreferences(BaseModel):
    """Preference profile for a user."""

    user_id: str = Field(..., description="Identifier of the user")
    preferences: list[str] = Field(
        default_factory=list, description="Preferred genres, most relevant first"
    )


class Movie(BaseModel):
    """Catalog or trending item."""

    movie_id: int
    title: str
    genre: str | None = None


class SimulationResponse(BaseModel):
    """Acknowledgement of an injected behavior change."""

    message: str
