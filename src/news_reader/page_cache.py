"""Per-query-key page cache.

Each query key owns a :class:`PagePartition` mapping 1-based page numbers to
the article list fetched for that page. Partitions are created lazily and are
never evicted; a query change empties the affected partition in place.

Async fetches hold a reference to the partition they write into together
with the partition's ``generation`` at issue time. :meth:`PagePartition.clear`
bumps the generation, so :meth:`PagePartition.commit` drops results that were
fetched before the clear.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

from news_reader.models import Article

logger = logging.getLogger(__name__)


class PagePartition:
    """Page number -> articles for one query key."""

    __slots__ = ("_pages", "generation", "key")

    def __init__(self, key: str) -> None:
        self.key = key
        self.generation = 0
        self._pages: dict[int, list[Article]] = {}

    def has(self, page: int) -> bool:
        return page in self._pages

    def get(self, page: int) -> list[Article] | None:
        return self._pages.get(page)

    def set(self, page: int, articles: list[Article]) -> None:
        self._pages[page] = list(articles)

    def commit(self, page: int, articles: list[Article], generation: int) -> bool:
        """Store ``articles`` only if the partition was not cleared since ``generation``."""
        if generation != self.generation:
            logger.debug(
                "Dropping page %d for %s: partition cleared (gen %d != %d)",
                page,
                self.key,
                generation,
                self.generation,
            )
            return False
        self.set(page, articles)
        return True

    def clear(self) -> None:
        self._pages.clear()
        self.generation += 1

    def pages(self) -> list[int]:
        return sorted(self._pages)

    def __len__(self) -> int:
        return len(self._pages)

    def __contains__(self, page: object) -> bool:
        return page in self._pages


class PageCache:
    """All partitions, keyed by query key."""

    def __init__(self) -> None:
        self._partitions: dict[str, PagePartition] = {}

    def partition(self, key: str) -> PagePartition:
        """Return the partition for ``key``, creating and registering it if needed."""
        part = self._partitions.get(key)
        if part is None:
            part = PagePartition(key)
            self._partitions[key] = part
        return part

    def has(self, key: str, page: int) -> bool:
        part = self._partitions.get(key)
        return part is not None and part.has(page)

    def get(self, key: str, page: int) -> list[Article] | None:
        part = self._partitions.get(key)
        return part.get(page) if part is not None else None

    def set(self, key: str, page: int, articles: list[Article]) -> None:
        self.partition(key).set(page, articles)

    def clear(self, key: str) -> None:
        """Empty the partition for ``key`` in place (same object stays registered)."""
        part = self._partitions.get(key)
        if part is not None:
            part.clear()

    def keys(self) -> Iterator[str]:
        return iter(self._partitions)


__all__ = ["PageCache", "PagePartition"]
