"""In-process collaborator client serving fixed payloads."""

from __future__ import annotations

from ..schemas.recommendation import Movie, UserPreferences
from .downstream import DownstreamClient

PROFILE_PREFERENCES = ["Action", "Sci-Fi"]

CATALOG = [
    Movie(movie_id=101, title="Inception", genre="Sci-Fi"),
    Movie(movie_id=102, title="The Dark Knight", genre="Action"),
]

TRENDING = [
    Movie(movie_id=99, title="Trending Movie 1", genre="Action"),
    Movie(movie_id=100, title="Trending Movie 2", genre="Comedy"),
    Movie(movie_id=101, title="Trending Movie 3", genre="Drama"),
    Movie(movie_id=102, title="Trending Movie 4", genre="Sci-Fi"),
    Movie(movie_id=103, title="Trending Movie 5", genre="Thriller"),
]


class StaticDownstreamClient(DownstreamClient):
    """Returns the same deterministic payloads the collaborators serve."""

    async def fetch_profile(self, user_id: str) -> UserPreferences:
        return UserPreferences(user_id=user_id, preferences=list(PROFILE_PREFERENCES))

    async def fetch_catalog(self) -> list[Movie]:
        return [movie.model_copy() for movie in CATALOG]

    async def fetch_trending(self) -> list[Movie]:
        return [movie.model_copy() for movie in TRENDING]
