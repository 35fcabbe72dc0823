"""FastAPI application factory for the news proxy."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from news_reader.proxy.routes import SERVICE_NAME
from news_reader.proxy.routes import router as news_router
from news_reader.proxy.settings import ProxySettings

logger = logging.getLogger(__name__)


def create_app(
    settings: ProxySettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the proxy app; ``transport`` replaces the network for tests."""
    settings = settings or ProxySettings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # Startup: one pooled client for all upstream calls
        async with httpx.AsyncClient(
            transport=transport,
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
        ) as client:
            app.state.http_client = client
            if not settings.THENEWSAPI_TOKEN:
                logger.warning("THENEWSAPI_TOKEN is not set; /api/news/all will fail")
            yield
        # Shutdown: client closed by the context manager
        app.state.http_client = None

    app = FastAPI(title=SERVICE_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.http_client = None

    # include routes
    app.include_router(news_router)
    return app


__all__ = ["create_app"]
