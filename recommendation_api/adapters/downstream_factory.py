"""Factory for creating DownstreamClient instances based on configuration."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config.settings import Settings
    from .downstream import DownstreamClient

logger = logging.getLogger(__name__)


def create_downstream_client(settings: Settings) -> DownstreamClient:
    """Create the DownstreamClient selected by ``settings.downstream_mode``."""
    mode = settings.downstream_mode.lower()

    if mode == "http":
        from .http_downstream import HttpDownstreamClient

        logger.info(
            "downstream_client.http",
            extra={
                "user_profile_url": settings.user_profile_url,
                "content_url": settings.content_url,
                "trending_url": settings.trending_url,
            },
        )
        return HttpDownstreamClient(
            user_profile_url=settings.user_profile_url,
            content_url=settings.content_url,
            trending_url=settings.trending_url,
            timeout=settings.downstream_http_timeout_seconds,
        )

    if mode != "static":
        raise ValueError(f"Unknown DOWNSTREAM_MODE '{settings.downstream_mode}'")

    from .static_downstream import StaticDownstreamClient

    logger.info("downstream_client.static")
    return StaticDownstreamClient()
