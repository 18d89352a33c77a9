"""Tests for HttpDownstreamClient."""

from __future__ import annotations

import httpx
import pytest

from recommendation_api.adapters.http_downstream import HttpDownstreamClient
from recommendation_api.schemas.recommendation import Movie
from recommendation_api.services.errors import DownstreamError


def _handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "profile" and request.url.path == "/user/42":
        return httpx.Response(
            200, json={"userId": "42", "preferences": ["Action", "Sci-Fi"]}
        )
    if request.url.host == "content" and request.url.path == "/movies":
        return httpx.Response(
            200,
            json=[
                {"movieId": 101, "title": "Inception", "genre": "Sci-Fi"},
                {"movieId": 102, "title": "The Dark Knight", "genre": "Action"},
            ],
        )
    if request.url.host == "trending" and request.url.path == "/trending":
        return httpx.Response(
            200,
            json={
                "trending": [{"movieId": 99, "title": "Trending Movie 1"}],
                "count": 1,
            },
        )
    return httpx.Response(404, json={"error": "not found"})


def _make_client(handler=_handler) -> HttpDownstreamClient:
    return HttpDownstreamClient(
        user_profile_url="http://profile/",
        content_url="http://content",
        trending_url="http://trending",
        transport=httpx.MockTransport(handler),
    )


class TestHttpDownstreamClientInit:
    """Test client initialization."""

    def test_strips_trailing_slash(self) -> None:
        client = _make_client()
        assert client.user_profile_url == "http://profile"
        assert client.content_url == "http://content"


class TestHttpDownstreamClientFetch:
    """Payload mapping for each collaborator."""

    @pytest.mark.asyncio
    async def test_fetch_profile(self) -> None:
        client = _make_client()
        profile = await client.fetch_profile("42")
        assert profile.user_id == "42"
        assert profile.preferences == ["Action", "Sci-Fi"]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_fetch_catalog(self) -> None:
        client = _make_client()
        catalog = await client.fetch_catalog()
        assert catalog == [
            Movie(movie_id=101, title="Inception", genre="Sci-Fi"),
            Movie(movie_id=102, title="The Dark Knight", genre="Action"),
        ]
        await client.aclose()

    @pytest.mark.asyncio
    async def test_fetch_trending(self) -> None:
        client = _make_client()
        trending = await client.fetch_trending()
        assert trending == [Movie(movie_id=99, title="Trending Movie 1", genre=None)]
        await client.aclose()


class TestHttpDownstreamClientErrors:
    """Failures surface as DownstreamError."""

    @pytest.mark.asyncio
    async def test_error_status_raises(self) -> None:
        client = _make_client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(DownstreamError) as exc_info:
            await client.fetch_catalog()
        assert exc_info.value.service == "content"
        assert exc_info.value.status_code == 500
        await client.aclose()

    @pytest.mark.asyncio
    async def test_unknown_user_raises(self) -> None:
        client = _make_client()
        with pytest.raises(DownstreamError) as exc_info:
            await client.fetch_profile("missing")
        assert exc_info.value.status_code == 404
        await client.aclose()

    @pytest.mark.asyncio
    async def test_connection_error_raises(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = _make_client(refuse)
        with pytest.raises(DownstreamError) as exc_info:
            await client.fetch_trending()
        assert exc_info.value.service == "trending"
        assert exc_info.value.status_code is None
        await client.aclose()

    @pytest.mark.asyncio
    async def test_malformed_payload_raises(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, json={"nope": 1}))
        with pytest.raises(DownstreamError, match="Malformed"):
            await client.fetch_trending()
        await client.aclose()

    @pytest.mark.asyncio
    async def test_bad_field_type_raises(self) -> None:
        client = _make_client(
            lambda request: httpx.Response(
                200,
                json={"trending": [{"movieId": "abc", "title": "x"}], "count": 1},
            )
        )
        with pytest.raises(DownstreamError, match="Malformed") as exc_info:
            await client.fetch_trending()
        assert exc_info.value.service == "trending"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_bad_profile_preferences_raise(self) -> None:
        client = _make_client(
            lambda request: httpx.Response(
                200, json={"userId": "42", "preferences": [1, {"x": 2}]}
            )
        )
        with pytest.raises(DownstreamError, match="Malformed"):
            await client.fetch_profile("42")
        await client.aclose()

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self) -> None:
        client = _make_client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(DownstreamError, match="invalid JSON"):
            await client.fetch_catalog()
        await client.aclose()
