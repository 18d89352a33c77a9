"""Tests for create_downstream_client."""

from __future__ import annotations

import pytest

from recommendation_api.adapters.downstream_factory import create_downstream_client
from recommendation_api.adapters.http_downstream import HttpDownstreamClient
from recommendation_api.adapters.static_downstream import StaticDownstreamClient
from recommendation_api.config import Settings


class TestCreateDownstreamClient:
    """Client selection by DOWNSTREAM_MODE."""

    def test_static_mode(self) -> None:
        client = create_downstream_client(Settings(downstream_mode="static"))
        assert isinstance(client, StaticDownstreamClient)

    def test_http_mode_uses_configured_urls(self) -> None:
        settings = Settings(
            downstream_mode="HTTP",
            user_profile_url="http://profile:9001",
            content_url="http://content:9002",
            trending_url="http://trending:9003",
        )
        client = create_downstream_client(settings)
        assert isinstance(client, HttpDownstreamClient)
        assert client.user_profile_url == "http://profile:9001"
        assert client.content_url == "http://content:9002"
        assert client.trending_url == "http://trending:9003"

    def test_unknown_mode_raises(self) -> None:
        with pytest.raises(ValueError, match="grpc"):
            create_downstream_client(Settings(downstream_mode="grpc"))


class TestStaticDownstreamClient:
    """Fixed collaborator payloads."""

    @pytest.mark.asyncio
    async def test_profile_echoes_user_id(self) -> None:
        profile = await StaticDownstreamClient().fetch_profile("abc")
        assert profile.user_id == "abc"
        assert profile.preferences == ["Action", "Sci-Fi"]

    @pytest.mark.asyncio
    async def test_catalog_and_trending(self) -> None:
        client = StaticDownstreamClient()
        catalog = await client.fetch_catalog()
        trending = await client.fetch_trending()
        assert [m.movie_id for m in catalog] == [101, 102]
        assert [m.movie_id for m in trending] == [99, 100, 101, 102, 103]

    @pytest.mark.asyncio
    async def test_returns_copies(self) -> None:
        client = StaticDownstreamClient()
        catalog = await client.fetch_catalog()
        catalog[0].title = "Changed"
        assert (await client.fetch_catalog())[0].title == "Inception"
