"""News Query Service client: one proxied page fetch over httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from news_reader.errors import DEFAULT_FETCH_ERROR, TransportError, error_for_status
from news_reader.models import NewsPage, NewsQuery, parse_article
from news_reader.query import build_client_params

logger = logging.getLogger(__name__)

NEWS_ENDPOINT = "/api/news/all"


def _opt_int(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    return value if isinstance(value, int) and not isinstance(value, bool) else None


def parse_news_response(payload: Any) -> NewsPage:
    """Parse a ``{"data": [...], "meta": {...}}`` body; bad items are skipped."""
    if not isinstance(payload, dict):
        return NewsPage()
    raw_items = payload.get("data")
    if not isinstance(raw_items, list):
        raw_items = []
    articles = [a for a in (parse_article(item) for item in raw_items) if a is not None]
    meta = payload.get("meta")
    if not isinstance(meta, dict):
        meta = {}
    return NewsPage(
        articles=articles,
        found=_opt_int(meta, "found"),
        returned=_opt_int(meta, "returned"),
        limit=_opt_int(meta, "limit"),
        page=_opt_int(meta, "page"),
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_FETCH_ERROR
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return DEFAULT_FETCH_ERROR


async def fetch_news(
    *,
    client: httpx.AsyncClient | None,
    query: NewsQuery,
    base_url: str,
    timeout_seconds: float,
) -> NewsPage:
    """Fetch one page of articles from the proxy.

    Raises:
        AuthenticationError, UsageLimitError, UpstreamError: non-2xx responses.
        TransportError: the request failed before a response arrived.
    """
    url = base_url.rstrip("/") + NEWS_ENDPOINT
    params = build_client_params(query)
    headers = {"Accept": "application/json"}
    logger.debug("GET %s %s", url, params)

    try:
        if client is not None:
            response = await client.get(
                url, params=params, headers=headers, timeout=timeout_seconds
            )
        else:
            async with httpx.AsyncClient() as tmp_client:
                response = await tmp_client.get(
                    url, params=params, headers=headers, timeout=timeout_seconds
                )
    except (httpx.TransportError, OSError) as exc:
        raise TransportError(f"Network error while contacting {url}: {exc}") from exc

    if not response.is_success:
        raise error_for_status(response.status_code, _error_message(response))

    try:
        payload = response.json()
    except ValueError:
        logger.warning("News proxy returned non-JSON body for page %d", query.page)
        payload = None
    return parse_news_response(payload)


__all__ = ["NEWS_ENDPOINT", "fetch_news", "parse_news_response"]
