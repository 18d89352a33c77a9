import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    generate_latest,
)

from .config import get_settings
from .logging import configure_logging
from .observability.tracing import configure_tracing
from .health import router as health_router
from .providers.registry import ServiceRegistry
from .routes.metrics import router as metrics_router
from .routes.recommendation import router as recommendation_router
from .routes.simulation import router as simulation_router

logger = logging.getLogger(__name__)

REQUESTS = Counter(
    "recommendation_api_http_requests_total",
    "HTTP requests",
    ["method", "path", "status"],
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    configure_tracing("recommendation-api", settings.otel_exporter_otlp_endpoint)
    app.state.registry = ServiceRegistry(settings)
    logger.info("recommendation-api.start", extra={"env": settings.env})
    yield
    await app.state.registry.aclose()
    logger.info("recommendation-api.stop")


app = FastAPI(lifespan=lifespan, title="Recommendation API", version="0.1.0")


@app.middleware("http")
async def metrics_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    response: Response = await call_next(request)
    # Label by route template so path parameters don't add series.
    path = getattr(request.scope.get("route"), "path", request.url.path)
    try:
        REQUESTS.labels(request.method, path, str(response.status_code)).inc()
    except Exception:
        logger.warning("Failed to update metrics", exc_info=True)
    return response


@app.get("/metrics")
def metrics() -> Response:
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(health_router)
app.include_router(recommendation_router)
app.include_router(simulation_router)
app.include_router(metrics_router)
