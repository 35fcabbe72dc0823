"""Primary page fetching and speculative prefetching.

:class:`FetchCoordinator` owns the loading/error status for the page on
screen. Every network request it issues takes a new value of ``version``;
a completion whose version is no longer current is discarded, and the
previous in-flight task is cancelled whenever the target changes. Together
these guarantee that only the newest request's result reaches the cache or
the status flags.

:class:`Prefetcher` warms neighbouring pages. It writes only to the cache,
never to loading/error state, and swallows every failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

from news_reader.errors import NewsApiError, UsageLimitError, describe_fetch_error
from news_reader.models import PAGE_SIZE, NewsPage, NewsQuery
from news_reader.page_cache import PagePartition
from news_reader.pager import NavState

logger = logging.getLogger(__name__)

Fetcher = Callable[[NewsQuery], Awaitable[NewsPage]]
Spawner = Callable[[Coroutine[Any, Any, None]], "asyncio.Task[None]"]


class FetchCoordinator:
    """Keeps the current (key, page) populated and tracks its status."""

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        spawn: Spawner = asyncio.create_task,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._spawn = spawn
        self._on_change = on_change
        self.version = 0
        self.is_loading = False
        self.error: str | None = None
        self._task: asyncio.Task[None] | None = None
        self._target: tuple[str, int, int] | None = None

    @property
    def inflight(self) -> bool:
        return self._task is not None and not self._task.done()

    def ensure(
        self, partition: PagePartition, page: int, query: NewsQuery
    ) -> asyncio.Task[None] | None:
        """Make ``page`` of ``partition`` the current target.

        Returns the request task, or None on a cache hit.
        """
        if partition.has(page):
            self.cancel()
            self._set_status(loading=False, error=None)
            return None

        target = (partition.key, page, partition.generation)
        if target == self._target and self.inflight:
            return self._task

        self.cancel()
        self.version += 1
        owned = self.version
        self._target = target
        self._set_status(loading=True, error=None)
        logger.debug("Fetching %s page %d (version %d)", partition.key, page, owned)
        self._task = self._spawn(self._run(partition, page, query, owned, partition.generation))
        return self._task

    def cancel(self) -> None:
        """Cancel the in-flight request and invalidate any late completion."""
        task = self._task
        self._task = None
        self._target = None
        if task is not None and not task.done():
            self.version += 1
            task.cancel()

    def force_loading(self) -> None:
        """Show the loading state while a query change is being applied."""
        self._set_status(loading=True, error=None)

    def _set_status(self, *, loading: bool, error: str | None) -> None:
        self.is_loading = loading
        self.error = error

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    async def _run(
        self,
        partition: PagePartition,
        page: int,
        query: NewsQuery,
        owned: int,
        generation: int,
    ) -> None:
        try:
            result = await self._fetcher(query)
        except asyncio.CancelledError:
            logger.debug("Request version %d for %s page %d cancelled", owned, partition.key, page)
            raise
        except Exception as exc:
            if owned != self.version:
                return
            if isinstance(exc, NewsApiError):
                logger.warning("Fetching %s page %d failed: %s", partition.key, page, exc)
            else:
                logger.error("Unexpected error fetching page %d: %s", page, exc, exc_info=exc)
            self._task = None
            self._target = None
            self._set_status(loading=False, error=describe_fetch_error(exc))
            self._notify()
            return

        if owned != self.version:
            logger.debug("Discarding stale response version %d (current %d)", owned, self.version)
            return
        partition.commit(page, result.articles, generation)
        self._task = None
        self._target = None
        self._set_status(loading=False, error=None)
        self._notify()


class Prefetcher:
    """Fire-and-forget warming of the pages adjacent to the current position."""

    def __init__(
        self,
        fetcher: Fetcher,
        *,
        spawn: Spawner = asyncio.create_task,
        on_commit: Callable[[PagePartition, int], None] | None = None,
        enabled: bool = True,
    ) -> None:
        self._fetcher = fetcher
        self._spawn = spawn
        self._on_commit = on_commit
        self.enabled = enabled
        self._inflight: dict[tuple[str, int, int], asyncio.Task[None]] = {}
        # Query keys whose prefetching stopped after a usage-limit response
        self._suspended: set[str] = set()

    @staticmethod
    def targets(nav: NavState) -> list[int]:
        """Pages worth warming from ``nav``: next at the last index, previous at 0."""
        pages = []
        if nav.index == PAGE_SIZE - 1:
            pages.append(nav.page + 1)
        if nav.index == 0 and nav.page > 1:
            pages.append(nav.page - 1)
        return pages

    def on_position(
        self,
        partition: PagePartition,
        nav: NavState,
        query_for_page: Callable[[int], NewsQuery],
    ) -> list[asyncio.Task[None]]:
        tasks = []
        for page in self.targets(nav):
            task = self.prefetch(partition, page, query_for_page(page))
            if task is not None:
                tasks.append(task)
        return tasks

    def prefetch(
        self, partition: PagePartition, page: int, query: NewsQuery
    ) -> asyncio.Task[None] | None:
        if not self.enabled or partition.key in self._suspended or partition.has(page):
            return None
        slot = (partition.key, page, partition.generation)
        existing = self._inflight.get(slot)
        if existing is not None and not existing.done():
            return existing
        logger.debug("Prefetching %s page %d", partition.key, page)
        task = self._spawn(self._run(partition, page, query, partition.generation))
        self._inflight[slot] = task
        task.add_done_callback(lambda _t, slot=slot: self._inflight.pop(slot, None))
        return task

    def resume(self, key: str) -> None:
        """Re-enable prefetching for ``key`` (called when the query is re-selected)."""
        self._suspended.discard(key)

    def cancel_all(self) -> None:
        for task in list(self._inflight.values()):
            task.cancel()
        self._inflight.clear()

    async def _run(
        self, partition: PagePartition, page: int, query: NewsQuery, generation: int
    ) -> None:
        try:
            result = await self._fetcher(query)
        except UsageLimitError:
            logger.debug("Prefetch hit usage limit; suspending prefetch for %s", partition.key)
            self._suspended.add(partition.key)
            return
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.debug("Prefetch of %s page %d failed: %s", partition.key, page, exc)
            return
        if partition.commit(page, result.articles, generation) and self._on_commit is not None:
            self._on_commit(partition, page)


__all__ = ["Fetcher", "FetchCoordinator", "Prefetcher", "Spawner"]
