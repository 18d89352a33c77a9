"""Collaborator client calling the downstream services over HTTP."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from opentelemetry import trace
from pydantic import ValidationError

from ..observability.metrics import DOWNSTREAM_REQUEST_DURATION
from ..schemas.recommendation import Movie, UserPreferences
from ..services.errors import DownstreamError
from .downstream import DownstreamClient

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("recommendation-api.downstream")


def _to_movie(item: dict[str, Any]) -> Movie:
    return Movie(
        movie_id=item["movieId"],
        title=item["title"],
        genre=item.get("genre"),
    )


class HttpDownstreamClient(DownstreamClient):
    """Calls the user profile, content and trending services.

    Endpoints:
    - ``GET {user_profile_url}/user/{id}`` → ``{userId, preferences}``
    - ``GET {content_url}/movies`` → ``[{movieId, title, genre}]``
    - ``GET {trending_url}/trending`` → ``{trending: [...], count}``

    Transport errors, non-2xx responses and malformed bodies all surface as
    :class:`DownstreamError`.
    """

    def __init__(
        self,
        user_profile_url: str,
        content_url: str,
        trending_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.user_profile_url = user_profile_url.rstrip("/")
        self.content_url = content_url.rstrip("/")
        self.trending_url = trending_url.rstrip("/")
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def fetch_profile(self, user_id: str) -> UserPreferences:
        data = await self._get_json(
            "user-profile", f"{self.user_profile_url}/user/{user_id}"
        )
        try:
            return UserPreferences(
                user_id=str(data.get("userId", user_id)),
                preferences=list(data["preferences"]),
            )
        except (KeyError, TypeError, AttributeError, ValidationError) as exc:
            raise DownstreamError(
                "user-profile", f"Malformed profile payload: {exc}"
            ) from exc

    async def fetch_catalog(self) -> list[Movie]:
        data = await self._get_json("content", f"{self.content_url}/movies")
        try:
            return [_to_movie(item) for item in data]
        except (KeyError, TypeError, ValidationError) as exc:
            raise DownstreamError("content", f"Malformed catalog payload: {exc}") from exc

    async def fetch_trending(self) -> list[Movie]:
        data = await self._get_json("trending", f"{self.trending_url}/trending")
        try:
            return [_to_movie(item) for item in data["trending"]]
        except (KeyError, TypeError, ValidationError) as exc:
            raise DownstreamError("trending", f"Malformed trending payload: {exc}") from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, service: str, url: str) -> Any:
        with tracer.start_as_current_span("downstream.get") as span:
            span.set_attribute("service", service)
            span.set_attribute("url", url)
            started = time.perf_counter()
            try:
                response = await self._client.get(url)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                span.set_attribute("status_code", status)
                logger.warning(
                    "downstream.bad_status",
                    extra={"service": service, "status_code": status},
                )
                raise DownstreamError(
                    service, f"{service} returned HTTP {status}", status_code=status
                ) from exc
            except httpx.HTTPError as exc:
                logger.warning(
                    "downstream.request_failed",
                    extra={"service": service, "error": str(exc)},
                )
                raise DownstreamError(
                    service, f"{service} request failed: {exc}"
                ) from exc
            except ValueError as exc:
                raise DownstreamError(service, f"{service} returned invalid JSON") from exc
            finally:
                DOWNSTREAM_REQUEST_DURATION.labels(service=service).observe(
                    time.perf_counter() - started
                )
