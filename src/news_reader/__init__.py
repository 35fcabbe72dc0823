"""Terminal news reader with a paged, prefetching browse session."""

from news_reader.errors import (
    AuthenticationError,
    NewsApiError,
    NewsReaderError,
    TransportError,
    UpstreamError,
    UsageLimitError,
)
from news_reader.favorites import FavoritesStore
from news_reader.models import PAGE_SIZE, Article, NewsPage, NewsQuery, UserConfig
from news_reader.page_cache import PageCache, PagePartition
from news_reader.pager import NavState
from news_reader.query import build_news_query, make_query_key
from news_reader.session import BrowserSession
from news_reader.storage import LocalStorage

__all__ = [
    "PAGE_SIZE",
    "Article",
    "AuthenticationError",
    "BrowserSession",
    "FavoritesStore",
    "LocalStorage",
    "NavState",
    "NewsApiError",
    "NewsPage",
    "NewsQuery",
    "NewsReaderError",
    "PageCache",
    "PagePartition",
    "TransportError",
    "UpstreamError",
    "UsageLimitError",
    "UserConfig",
    "build_news_query",
    "make_query_key",
]
