"""Service interfaces + default adapters for app-level dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from news_reader.models import NewsPage, NewsQuery
from news_reader.services import news_api_service as _news_api


@runtime_checkable
class NewsApiService(Protocol):
    """Interface for News Query Service operations."""

    async def fetch_news(
        self,
        *,
        client: httpx.AsyncClient | None,
        query: NewsQuery,
        base_url: str,
        timeout_seconds: float,
    ) -> NewsPage:
        """Fetch a page of articles."""
        ...


class DefaultNewsApiService:
    """Default adapter that delegates to the function-based news API service."""

    async def fetch_news(
        self,
        *,
        client: httpx.AsyncClient | None,
        query: NewsQuery,
        base_url: str,
        timeout_seconds: float,
    ) -> NewsPage:
        return await _news_api.fetch_news(
            client=client,
            query=query,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
        )


@dataclass(slots=True)
class AppServices:
    """Aggregated service interfaces consumed by the app layer."""

    news_api: NewsApiService


def build_default_app_services() -> AppServices:
    """Build default app services backed by the function-based modules."""
    return AppServices(news_api=DefaultNewsApiService())


__all__ = [
    "AppServices",
    "DefaultNewsApiService",
    "NewsApiService",
    "build_default_app_services",
]
