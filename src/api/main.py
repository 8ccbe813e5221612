"""FastAPI application factory."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from src.api.metrics import ApiMetrics
from src.api.routes import API_VERSION, router
from src.stores.registry import Stores

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.debug("REST API application startup (api version %d)", API_VERSION)
    yield
    logger.debug("REST API application shutdown")


def create_app(stores: Stores | None = None, metrics: ApiMetrics | None = None) -> FastAPI:
    """
    Build the REST API over the given stores.

    The route table is fixed here and never changes afterwards. Without an
    explicit ApiMetrics the app gets its own isolated registry. No interactive
    docs or OpenAPI schema are served, and trailing-slash variants are not
    redirected: any path outside the table is a plain 404.
    """
    app = FastAPI(
        title="railfeed REST API",
        description="Read-only access to the arrival, departure and service stores.",
        version=str(API_VERSION),
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.stores = stores if stores is not None else Stores()
    app.state.metrics = metrics if metrics is not None else ApiMetrics()

    app.include_router(router)

    # Prometheus exposition at /metrics (mounted app, not instrumented)
    app.mount("/metrics", make_asgi_app(registry=app.state.metrics.registry))

    return app
