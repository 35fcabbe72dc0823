"""Persisted favorites list.

Favorites are an ordered, identity-unique list of articles, newest first and
capped at :data:`MAX_FAVORITES`. The identity set is a derived view of that
list rather than a second structure, so the two can never disagree. Both are
still written to storage as separate artifacts.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

from news_reader.models import (
    MAX_FAVORITES,
    Article,
    article_id,
    article_to_dict,
    parse_article,
)
from news_reader.storage import LocalStorage

logger = logging.getLogger(__name__)

FAVORITES_IDS_KEY = "news-reader:favorites"
FAVORITES_DATA_KEY = "news-reader:favorites:data"


def _load_articles(raw: str | None) -> list[Article]:
    """Decode the stored article list, skipping malformed and duplicate entries."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Stored favorites are not valid JSON, starting empty: %s", e)
        return []
    if not isinstance(data, list):
        logger.warning("Stored favorites are not a list, starting empty")
        return []
    result: list[Article] = []
    seen: set[str] = set()
    for item in data:
        article = parse_article(item)
        if article is None:
            continue
        ident = article_id(article)
        if ident in seen:
            continue
        seen.add(ident)
        result.append(article)
    return result[:MAX_FAVORITES]


class FavoritesStore:
    """Ordered unique favorites with O(1) membership checks."""

    def __init__(self, storage: LocalStorage, limit: int = MAX_FAVORITES) -> None:
        self._storage = storage
        self._limit = limit
        # Insertion order == display order (most recent first)
        self._by_id: dict[str, Article] = {}
        self.last_save_ok = True

    @classmethod
    def load(cls, storage: LocalStorage, limit: int = MAX_FAVORITES) -> FavoritesStore:
        """Rebuild favorites from storage; malformed content yields an empty list."""
        store = cls(storage, limit=limit)
        articles = _load_articles(storage.get_item(FAVORITES_DATA_KEY))[:limit]
        store._by_id = {article_id(a): a for a in articles}
        stored_ids = storage.get_item(FAVORITES_IDS_KEY)
        if stored_ids is not None:
            try:
                ids = json.loads(stored_ids)
            except json.JSONDecodeError:
                ids = None
            if (
                not isinstance(ids, list)
                or not all(isinstance(i, str) for i in ids)
                or set(ids) != set(store._by_id)
            ):
                logger.warning("Stored favorite ids disagree with stored articles; using articles")
        logger.debug("Loaded %d favorites", len(store._by_id))
        return store

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Article]:
        return iter(self._by_id.values())

    def __contains__(self, article: object) -> bool:
        return isinstance(article, Article) and article_id(article) in self._by_id

    @property
    def articles(self) -> list[Article]:
        return list(self._by_id.values())

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._by_id)

    def has_id(self, ident: str) -> bool:
        return ident in self._by_id

    def toggle(self, article: Article) -> bool:
        """Add or remove ``article``. Returns True if it is now a favorite."""
        ident = article_id(article)
        if ident in self._by_id:
            del self._by_id[ident]
            added = False
        else:
            merged = {ident: article, **self._by_id}
            if len(merged) > self._limit:
                merged = dict(list(merged.items())[: self._limit])
            self._by_id = merged
            added = True
        self.last_save_ok = self.save()
        return added

    def save(self) -> bool:
        """Persist both artifacts; failures are logged and swallowed."""
        data = json.dumps([article_to_dict(a) for a in self._by_id.values()], ensure_ascii=False)
        ids = json.dumps(list(self._by_id))
        ok_data = self._storage.set_item(FAVORITES_DATA_KEY, data)
        ok_ids = self._storage.set_item(FAVORITES_IDS_KEY, ids)
        return ok_data and ok_ids


__all__ = ["FAVORITES_DATA_KEY", "FAVORITES_IDS_KEY", "FavoritesStore"]
