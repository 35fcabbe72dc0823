"""HTTP routes for the news proxy."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlencode

import httpx
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from news_reader.proxy.settings import ProxySettings
from news_reader.proxy.upstream import (
    MISSING_TOKEN_MESSAGE,
    SERVER_ERROR_MESSAGE,
    build_upstream_params,
    map_upstream_error,
    parse_page,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "news-reader-proxy"
CACHE_CONTROL = "s-maxage=60, stale-while-revalidate=120"

router = APIRouter(prefix="/api", tags=["News"])


def _read_body(response: httpx.Response) -> Any:
    """Decode JSON bodies; anything else is returned as text."""
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            return response.json()
        except ValueError:
            logger.debug("Upstream sent invalid JSON with content-type %s", content_type)
    return response.text


@router.get("/health", summary="Liveness probe")
async def health() -> dict[str, Any]:
    return {
        "ok": True,
        "service": SERVICE_NAME,
        "time": datetime.now(timezone.utc).isoformat(),
    }


@router.get(
    "/news/all",
    summary="Fetch one page of news",
    description="Proxies TheNewsApi /v1/news/all with a fixed language and page size. "
    "A non-empty search takes precedence over categories.",
)
async def news_all(
    request: Request,
    page: str | None = None,
    search: str | None = None,
    categories: str | None = None,
) -> JSONResponse:
    settings: ProxySettings = request.app.state.settings
    token = settings.THENEWSAPI_TOKEN
    if not token:
        logger.warning("Missing THENEWSAPI_TOKEN. Set it in the environment or a .env file.")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": MISSING_TOKEN_MESSAGE},
        )

    params = build_upstream_params(
        page=parse_page(page),
        search=search,
        categories=categories,
        recency_days=settings.SEARCH_RECENCY_DAYS,
    )
    # Never log the token
    logger.info("GET %s?%s", settings.UPSTREAM_BASE_URL, urlencode(params))

    client: httpx.AsyncClient = request.app.state.http_client
    try:
        response = await client.get(
            settings.UPSTREAM_BASE_URL, params={**params, "api_token": token}
        )
        body = _read_body(response)
    except Exception as e:
        logger.error("Unexpected error while fetching news: %s", e, exc_info=e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": SERVER_ERROR_MESSAGE},
        )

    if not response.is_success:
        mapped_status, payload = map_upstream_error(response.status_code, body)
        logger.warning(
            "Upstream returned %d, responding %d", response.status_code, mapped_status
        )
        return JSONResponse(status_code=mapped_status, content=payload)

    if not isinstance(body, (dict, list)):
        body = {"data": []}
    return JSONResponse(content=body, headers={"Cache-Control": CACHE_CONTROL})


__all__ = ["CACHE_CONTROL", "SERVICE_NAME", "router"]
