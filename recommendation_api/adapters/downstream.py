"""Downstream collaborator abstractions.

The recommendation core needs three reads from its collaborators: a user's
preference profile, the content catalog, and the trending list. Profile and
catalog are protected by circuit breakers; trending is the unprotected
last-resort source.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..schemas.recommendation import Movie, UserPreferences


class DownstreamClient(ABC):
    """Abstract client for the recommendation collaborators."""

    @abstractmethod
    async def fetch_profile(self, user_id: str) -> UserPreferences:
        """Fetch the preference profile for ``user_id``."""
        ...

    @abstractmethod
    async def fetch_catalog(self) -> list[Movie]:
        """Fetch the content catalog."""
        ...

    @abstractmethod
    async def fetch_trending(self) -> list[Movie]:
        """Fetch the trending list."""
        ...

    async def aclose(self) -> None:
        """Release any held resources."""
        return None
