"""Data models and constants for the News Reader application."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Application identity, the single source of truth for platformdirs paths
CONFIG_APP_NAME = "news-reader"

# Upstream pages hold at most this many articles
PAGE_SIZE = 3

DEFAULT_CATEGORY = "tech"

CATEGORIES: tuple[str, ...] = (
    "tech",
    "general",
    "science",
    "sports",
    "business",
    "health",
    "entertainment",
    "politics",
    "food",
    "travel",
)

MAX_FAVORITES = 200

DEFAULT_PROXY_URL = "http://127.0.0.1:5177"
DEFAULT_REQUEST_TIMEOUT = 15
MAX_REQUEST_TIMEOUT = 120


@dataclass(slots=True)
class Article:
    """One upstream news item."""

    url: str
    title: str = ""
    uuid: str | None = None
    id: str | None = None
    description: str | None = None
    snippet: str | None = None
    image_url: str | None = None
    published_at: str | None = None
    source: str | dict[str, Any] | None = None
    category: str | None = None
    language: str | None = None
    author: str | None = None

    @property
    def identity(self) -> str:
        return article_id(self)

    @property
    def source_name(self) -> str:
        if isinstance(self.source, dict):
            name = self.source.get("name")
            return name if isinstance(name, str) else ""
        return self.source or ""

    @property
    def summary(self) -> str:
        return self.description or self.snippet or ""


def article_id(article: Article) -> str:
    """Return the identity used for dedup: uuid, else id, else url."""
    return article.uuid or article.id or article.url


def _opt_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) else None


def parse_article(item: Any) -> Article | None:
    """Parse one API/storage item. Returns None if it has no usable url."""
    if not isinstance(item, dict):
        return None
    url = item.get("url")
    if not isinstance(url, str) or not url:
        return None

    source = item.get("source")
    if not isinstance(source, (str, dict)):
        source = None

    # Upstream categories arrive as a list; keep the first one
    category = item.get("category")
    if category is None and isinstance(item.get("categories"), list):
        cats = [c for c in item["categories"] if isinstance(c, str)]
        category = cats[0] if cats else None
    if not isinstance(category, str):
        category = None

    return Article(
        url=url,
        title=_opt_str(item, "title") or "",
        uuid=_opt_str(item, "uuid") or None,
        id=_opt_str(item, "id") or None,
        description=_opt_str(item, "description"),
        snippet=_opt_str(item, "snippet"),
        image_url=_opt_str(item, "image_url"),
        published_at=_opt_str(item, "published_at"),
        source=source,
        category=category,
        language=_opt_str(item, "language"),
        author=_opt_str(item, "author"),
    )


def article_to_dict(article: Article) -> dict[str, Any]:
    """Serialize an Article, dropping unset optional fields."""
    data: dict[str, Any] = {"url": article.url, "title": article.title}
    for key in (
        "uuid",
        "id",
        "description",
        "snippet",
        "image_url",
        "published_at",
        "source",
        "category",
        "language",
        "author",
    ):
        value = getattr(article, key)
        if value is not None:
            data[key] = value
    return data


@dataclass(slots=True, frozen=True)
class NewsQuery:
    """Parameters for one News Query Service request.

    At most one of ``search`` / ``category`` is set; search wins.
    """

    page: int
    search: str | None = None
    category: str | None = None


@dataclass(slots=True)
class NewsPage:
    """One page of articles plus upstream paging metadata."""

    articles: list[Article] = field(default_factory=list)
    found: int | None = None
    returned: int | None = None
    limit: int | None = None
    page: int | None = None


@dataclass(slots=True)
class SessionState:
    """Query selection restored on the next run."""

    category: str = DEFAULT_CATEGORY
    search: str = ""

    def __post_init__(self) -> None:
        """Fall back to the default category for unknown values."""
        if self.category not in CATEGORIES:
            self.category = DEFAULT_CATEGORY


@dataclass(slots=True)
class UserConfig:
    """Complete user configuration including session state and preferences."""

    proxy_url: str = DEFAULT_PROXY_URL
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT
    prefetch_enabled: bool = True
    default_category: str = DEFAULT_CATEGORY
    theme_name: str = "monokai"
    session: SessionState = field(default_factory=SessionState)
    version: int = 1
    config_defaulted: bool = False
