"""Shared test fixtures for News Reader tests."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from news_reader.models import Article, NewsPage, NewsQuery, UserConfig
from news_reader.storage import LocalStorage
from news_reader.themes import DEFAULT_THEME, THEME_COLORS

# ── Module-level dict isolation ──────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _reset_theme_colors():
    """Restore THEME_COLORS after each test.

    NewsReaderApp.__init__ and the theme cycle action mutate the active palette.
    """
    yield
    THEME_COLORS.clear()
    THEME_COLORS.update(DEFAULT_THEME)


# ── Factories ────────────────────────────────────────────────────────────────


def build_article(ident: str = "a1", **kwargs: Any) -> Article:
    """Build an Article whose identity is ``ident``."""
    defaults: dict[str, Any] = {
        "url": f"https://news.example.com/{ident}",
        "title": f"Headline {ident}",
        "uuid": ident,
        "description": f"Description for {ident}.",
        "published_at": "2024-05-01T12:30:00.000000Z",
        "source": "example.com",
        "category": "tech",
    }
    defaults.update(kwargs)
    return Article(**defaults)


@pytest.fixture
def make_article():
    """Factory fixture for creating Article instances with sensible defaults."""
    return build_article


@pytest.fixture
def sample_config():
    """Factory fixture for creating UserConfig with optional overrides."""

    def _make(**kwargs: Any) -> UserConfig:
        return UserConfig(**kwargs)

    return _make


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    """LocalStorage backed by a file in the test's temp directory."""
    return LocalStorage(tmp_path / "storage.json")


# ── Fake News Query Service ──────────────────────────────────────────────────


class ScriptedFetcher:
    """Async fetcher returning generated pages, with per-query gates and errors.

    By default every page holds three articles labelled
    ``<search-or-category>-<page>-<i>``. ``counts`` overrides the size of a
    page, ``errors`` makes a query raise, and ``gates`` holds a query until
    its event is set.
    """

    def __init__(self) -> None:
        self.calls: list[NewsQuery] = []
        self.counts: dict[NewsQuery, int] = {}
        self.errors: dict[NewsQuery, BaseException] = {}
        self.gates: dict[NewsQuery, asyncio.Event] = {}

    def gate(self, query: NewsQuery) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[query] = event
        return event

    def calls_for(self, query: NewsQuery) -> int:
        return sum(1 for call in self.calls if call == query)

    async def __call__(self, query: NewsQuery) -> NewsPage:
        self.calls.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        error = self.errors.get(query)
        if error is not None:
            raise error
        label = query.search or query.category
        count = self.counts.get(query, 3)
        articles = [build_article(f"{label}-{query.page}-{i}") for i in range(count)]
        return NewsPage(articles=articles, returned=count, limit=3, page=query.page)


@pytest.fixture
def fetcher() -> ScriptedFetcher:
    return ScriptedFetcher()


async def settle(rounds: int = 10) -> None:
    """Let pending tasks run until they block or finish."""
    for _ in range(rounds):
        await asyncio.sleep(0)
