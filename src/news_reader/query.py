"""Query key derivation, request building, and text formatting utilities."""

from __future__ import annotations

from datetime import datetime

from rich.markup import escape as escape_markup

from news_reader.models import DEFAULT_CATEGORY, NewsQuery

# ============================================================================
# Query Keys
# ============================================================================


def make_query_key(category: str | None = None, search: str | None = None) -> str:
    """Derive the page-cache partition key for a category/search selection.

    >>> make_query_key("science", "  ai ")
    'search:ai'
    >>> make_query_key("  ", None)
    'category:tech'
    """
    trimmed_search = (search or "").strip()
    if trimmed_search:
        return f"search:{trimmed_search}"
    trimmed_category = (category or "").strip()
    return f"category:{trimmed_category or DEFAULT_CATEGORY}"


def build_news_query(page: int, category: str | None, search: str | None) -> NewsQuery:
    """Build a request for ``page``; a non-empty search takes precedence."""
    trimmed_search = (search or "").strip()
    if trimmed_search:
        return NewsQuery(page=page, search=trimmed_search)
    return NewsQuery(page=page, category=(category or "").strip() or DEFAULT_CATEGORY)


def build_client_params(query: NewsQuery) -> dict[str, str]:
    """Build proxy query-string parameters for a NewsQuery."""
    params = {"page": str(query.page)}
    search = (query.search or "").strip()
    category = (query.category or "").strip()
    if search:
        params["search"] = search
    elif category:
        params["categories"] = category
    return params


# ============================================================================
# Text Formatting Utilities
# ============================================================================


def truncate_text(text: str, max_len: int, suffix: str = "...") -> str:
    """Truncate text to max_len characters, adding suffix if truncated."""
    if len(text) <= max_len:
        return text
    return text[:max_len] + suffix


def escape_rich_text(text: str) -> str:
    """Escape text for safe Rich markup rendering."""
    return escape_markup(text) if text else ""


def format_published_at(value: str | None) -> str:
    """Render an upstream ISO timestamp as ``YYYY-MM-DD HH:MM``.

    Unparseable values are returned unchanged.
    """
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime("%Y-%m-%d %H:%M")


def article_number(page: int, index: int, page_size: int = 3) -> int:
    """Return the 1-based absolute position of ``index`` on ``page``."""
    return (page - 1) * page_size + index + 1


__all__ = [
    "article_number",
    "build_client_params",
    "build_news_query",
    "escape_rich_text",
    "format_published_at",
    "make_query_key",
    "truncate_text",
]
