"""Browsing session: query selection, paging, prefetch, and favorites.

:class:`BrowserSession` is the single owner of all client-side browsing
state. The UI reads its properties and calls its actions; every state change
is announced to registered listeners.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

import httpx

from news_reader import pager
from news_reader.favorites import FavoritesStore
from news_reader.fetch import Fetcher, FetchCoordinator, Prefetcher
from news_reader.models import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    DEFAULT_PROXY_URL,
    DEFAULT_REQUEST_TIMEOUT,
    Article,
    NewsPage,
    NewsQuery,
    article_id,
)
from news_reader.page_cache import PageCache, PagePartition
from news_reader.pager import NavState
from news_reader.query import build_news_query, make_query_key
from news_reader.services.interfaces import AppServices, build_default_app_services

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


def build_fetcher(
    services: AppServices,
    *,
    base_url: str = DEFAULT_PROXY_URL,
    timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT,
    client_getter: Callable[[], httpx.AsyncClient | None] = lambda: None,
) -> Fetcher:
    """Bind the news API service to a proxy URL and shared client."""

    async def _fetch(query: NewsQuery) -> NewsPage:
        return await services.news_api.fetch_news(
            client=client_getter(),
            query=query,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
        )

    return _fetch


class BrowserSession:
    """Client-side state for browsing live results and favorites."""

    def __init__(
        self,
        favorites: FavoritesStore,
        *,
        fetcher: Fetcher | None = None,
        services: AppServices | None = None,
        category: str = DEFAULT_CATEGORY,
        search: str = "",
        prefetch: bool = True,
    ) -> None:
        if fetcher is None:
            fetcher = build_fetcher(services or build_default_app_services())
        self.category = category if category in CATEGORIES else DEFAULT_CATEGORY
        self.search = search.strip()
        self.nav = NavState()
        self.page_cache = PageCache()
        self.favorites = favorites
        self.favorites_view = False
        self.fav_nav = NavState()
        self._listeners: list[Listener] = []
        self._background_tasks: set[asyncio.Task[None]] = set()
        self.coordinator = FetchCoordinator(
            fetcher, spawn=self._track_task, on_change=self._on_fetch_settled
        )
        self.prefetcher = Prefetcher(
            fetcher, spawn=self._track_task, on_commit=self._on_prefetched, enabled=prefetch
        )
        self.query_key = make_query_key(self.category, self.search)

    # ------------------------------------------------------------------
    # Listeners and task tracking
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _track_task(self, coro: Any) -> asyncio.Task[None]:
        """Create an asyncio task and track it to prevent garbage collection."""
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(self._on_task_done)
        return task

    @staticmethod
    def _on_task_done(task: asyncio.Task[None]) -> None:
        """Log unhandled exceptions from background tasks."""
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled exception in background task: %s", exc, exc_info=exc)

    async def close(self) -> None:
        """Cancel the primary request and all prefetches, then wait for them."""
        self.coordinator.cancel()
        self.prefetcher.cancel_all()
        pending = [task for task in self._background_tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_pending = await asyncio.wait(pending, timeout=0.5)
            for task in still_pending:
                logger.debug("Background task did not cancel before shutdown: %r", task)
        self._background_tasks.clear()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def page(self) -> int:
        return self.nav.page

    @property
    def index(self) -> int:
        return self.nav.index

    @property
    def is_loading(self) -> bool:
        return self.coordinator.is_loading

    @property
    def error(self) -> str | None:
        return self.coordinator.error

    @property
    def partition(self) -> PagePartition:
        return self.page_cache.partition(self.query_key)

    @property
    def current_articles(self) -> list[Article] | None:
        """Articles on the current page, or None while it is not loaded."""
        return self.partition.get(self.nav.page)

    @property
    def current_article(self) -> Article | None:
        articles = self.current_articles
        if not articles or self.nav.index >= len(articles):
            return None
        return articles[self.nav.index]

    @property
    def favorites_page_articles(self) -> list[Article]:
        return self.favorites.articles[pager.page_slice(self.fav_nav.page)]

    @property
    def current_favorite(self) -> Article | None:
        articles = self.favorites_page_articles
        if self.fav_nav.index >= len(articles):
            return None
        return articles[self.fav_nav.index]

    @property
    def displayed_article(self) -> Article | None:
        return self.current_favorite if self.favorites_view else self.current_article

    def is_favorite(self, article: Article) -> bool:
        return self.favorites.has_id(article_id(article))

    def query_for_page(self, page: int) -> NewsQuery:
        return build_news_query(page, self.category, self.search)

    # ------------------------------------------------------------------
    # Query selection
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Load the first page of the initial selection."""
        self._reset_for_query()

    def select_category(self, category: str) -> None:
        if category not in CATEGORIES:
            raise ValueError(f"unknown category: {category!r}")
        self.favorites_view = False
        self.search = ""
        self.category = category
        self._apply_selection()

    def submit_search(self, text: str) -> None:
        """Commit ``text`` as the active search; unchanged text only leaves favorites."""
        self.favorites_view = False
        trimmed = text.strip()
        if trimmed == self.search:
            self._notify()
            return
        self.search = trimmed
        self._apply_selection()

    def _apply_selection(self) -> None:
        key = make_query_key(self.category, self.search)
        if key == self.query_key:
            self._notify()
            return
        logger.debug("Query changed: %s -> %s", self.query_key, key)
        self.query_key = key
        self._reset_for_query()

    def _reset_for_query(self) -> None:
        """Reset paging, empty the key's cache, and show loading before refetching."""
        self.coordinator.cancel()
        self.nav = NavState()
        self.page_cache.clear(self.query_key)
        self.prefetcher.resume(self.query_key)
        self.coordinator.force_loading()
        self._sync()

    # ------------------------------------------------------------------
    # Live navigation
    # ------------------------------------------------------------------

    def _page_count(self, page: int) -> int | None:
        articles = self.partition.get(page)
        return None if articles is None else len(articles)

    def go_first(self) -> None:
        self._navigate(pager.first(self.nav))

    def go_prev(self) -> None:
        self._navigate(pager.prev(self.nav, self._page_count(self.nav.page - 1)))

    def go_next(self) -> None:
        self._navigate(pager.next(self.nav, self._page_count(self.nav.page)))

    def select_dot(self, index: int) -> None:
        self._navigate(pager.dot_select(self.nav, index))

    def _navigate(self, nav: NavState) -> None:
        self.nav = nav
        self._sync()

    def _sync(self) -> None:
        """Drive fetching, clamping, and prefetching for the current position."""
        partition = self.partition
        self.coordinator.ensure(partition, self.nav.page, self.query_for_page(self.nav.page))
        articles = partition.get(self.nav.page)
        if articles is not None:
            self.nav = pager.clamp_to_count(self.nav, len(articles))
        self.prefetcher.on_position(partition, self.nav, self.query_for_page)
        self._notify()

    def _on_fetch_settled(self) -> None:
        articles = self.current_articles
        if articles is not None:
            self.nav = pager.clamp_to_count(self.nav, len(articles))
            self.prefetcher.on_position(self.partition, self.nav, self.query_for_page)
        self._notify()

    def _on_prefetched(self, partition: PagePartition, page: int) -> None:
        if partition is self.partition and page == self.nav.page:
            self.nav = pager.clamp_to_count(self.nav, len(partition.get(page) or []))
        self._notify()

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    def toggle_favorite(self, article: Article) -> bool:
        """Add or remove ``article``; keeps the favorites pager in bounds."""
        added = self.favorites.toggle(article)
        self.fav_nav = pager.reclamp(len(self.favorites), self.fav_nav)
        self._notify()
        return added

    def toggle_current_favorite(self) -> bool | None:
        article = self.displayed_article
        if article is None:
            return None
        return self.toggle_favorite(article)

    def toggle_favorites_view(self) -> None:
        self.favorites_view = not self.favorites_view
        self.fav_nav = pager.reclamp(len(self.favorites), self.fav_nav)
        self._notify()

    def fav_first(self) -> None:
        self._fav_navigate(pager.first(self.fav_nav))

    def fav_prev(self) -> None:
        self._fav_navigate(pager.fav_prev(self.fav_nav, len(self.favorites)))

    def fav_next(self) -> None:
        self._fav_navigate(pager.fav_next(self.fav_nav, len(self.favorites)))

    def fav_select_dot(self, index: int) -> None:
        self._fav_navigate(pager.fav_dot_select(self.fav_nav, index, len(self.favorites)))

    def _fav_navigate(self, nav: NavState) -> None:
        self.fav_nav = pager.reclamp(len(self.favorites), nav)
        self._notify()

    # Dispatch helpers for the UI: act on whichever view is showing

    def first(self) -> None:
        if self.favorites_view:
            self.fav_first()
        else:
            self.go_first()

    def prev(self) -> None:
        if self.favorites_view:
            self.fav_prev()
        else:
            self.go_prev()

    def next(self) -> None:
        if self.favorites_view:
            self.fav_next()
        else:
            self.go_next()

    def dot(self, index: int) -> None:
        if self.favorites_view:
            self.fav_select_dot(index)
        else:
            self.select_dot(index)


__all__ = ["BrowserSession", "build_fetcher"]
