"""Upstream request building and error remapping for TheNewsApi."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any

UPSTREAM_LANGUAGE = "en"
UPSTREAM_PAGE_SIZE = 3
DEFAULT_UPSTREAM_CATEGORY = "tech"

MISSING_TOKEN_MESSAGE = "Server configuration error: missing THENEWSAPI_TOKEN"
USAGE_LIMIT_MESSAGE = "Daily request limit reached. Please try again later."
AUTH_FAILED_MESSAGE = "TheNewsApi authentication failed. Check your API token."
UPSTREAM_ERROR_MESSAGE = "Upstream error from TheNewsApi."
SERVER_ERROR_MESSAGE = "Server error while fetching news."

_USAGE_LIMIT_RE = re.compile(r"usage_limit", re.IGNORECASE)


def parse_page(raw: str | None) -> int:
    """Parse the ``page`` query value; missing, invalid or non-positive -> 1."""
    if raw is None:
        return 1
    try:
        page = int(raw.strip())
    except ValueError:
        return 1
    return page if page > 0 else 1


def published_after(days: int, now: datetime | None = None) -> str:
    """Return the UTC date ``days`` before ``now`` as YYYY-MM-DD."""
    current = now or datetime.now(timezone.utc)
    return (current.astimezone(timezone.utc) - timedelta(days=days)).strftime("%Y-%m-%d")


def build_upstream_params(
    *,
    page: int,
    search: str | None,
    categories: str | None,
    recency_days: int,
    now: datetime | None = None,
) -> dict[str, str]:
    """Build upstream query parameters (without the API token).

    A non-empty search wins over categories and is sorted by publish date,
    optionally restricted to the last ``recency_days`` days.
    """
    params = {
        "language": UPSTREAM_LANGUAGE,
        "limit": str(UPSTREAM_PAGE_SIZE),
        "page": str(page),
    }
    trimmed_search = (search or "").strip()
    if trimmed_search:
        params["search"] = trimmed_search
        params["sort"] = "published_on"
        if recency_days > 0:
            params["published_after"] = published_after(recency_days, now)
    else:
        params["categories"] = (categories or "").strip() or DEFAULT_UPSTREAM_CATEGORY
    return params


def upstream_error_code(body: Any) -> str:
    """Extract an error code from ``error.code`` or a top-level ``code``."""
    if not isinstance(body, dict):
        return ""
    error = body.get("error")
    if isinstance(error, dict) and error.get("code"):
        return str(error["code"])
    if body.get("code"):
        return str(body["code"])
    return ""


def map_upstream_error(status: int, body: Any) -> tuple[int, dict[str, Any]]:
    """Translate an upstream failure into the proxy's status and JSON payload."""
    if status == 429 or _USAGE_LIMIT_RE.search(upstream_error_code(body)):
        return 429, {"message": USAGE_LIMIT_MESSAGE}
    if status in (401, 403):
        return status, {"message": AUTH_FAILED_MESSAGE}
    return 502, {"message": UPSTREAM_ERROR_MESSAGE, "details": body}


__all__ = [
    "AUTH_FAILED_MESSAGE",
    "DEFAULT_UPSTREAM_CATEGORY",
    "MISSING_TOKEN_MESSAGE",
    "SERVER_ERROR_MESSAGE",
    "UPSTREAM_ERROR_MESSAGE",
    "UPSTREAM_LANGUAGE",
    "UPSTREAM_PAGE_SIZE",
    "USAGE_LIMIT_MESSAGE",
    "build_upstream_params",
    "map_upstream_error",
    "parse_page",
    "published_after",
    "upstream_error_code",
]
