"""Tests for BrowserSession: query selection, paging, prefetch and favorites."""

from __future__ import annotations

import pytest
from conftest import settle

from news_reader.errors import UpstreamError, UsageLimitError
from news_reader.favorites import FavoritesStore
from news_reader.models import NewsQuery
from news_reader.pager import NavState
from news_reader.session import BrowserSession


def tech(page: int) -> NewsQuery:
    return NewsQuery(page=page, category="tech")


@pytest.fixture
def favorites(storage) -> FavoritesStore:
    return FavoritesStore(storage)


@pytest.fixture
def session(fetcher, favorites) -> BrowserSession:
    return BrowserSession(favorites, fetcher=fetcher)


def uuids(articles) -> list[str]:
    return [a.uuid for a in articles]


class TestLoading:
    @pytest.mark.asyncio
    async def test_start_loads_first_page(self, session):
        session.start()
        assert session.is_loading is True
        assert session.current_articles is None

        await settle()

        assert uuids(session.current_articles) == ["tech-1-0", "tech-1-1", "tech-1-2"]
        assert session.current_article.uuid == "tech-1-0"
        assert session.is_loading is False
        assert session.error is None

    @pytest.mark.asyncio
    async def test_listeners_are_notified(self, session):
        calls = []
        session.add_listener(lambda: calls.append(session.is_loading))

        session.start()
        await settle()

        assert calls[0] is True
        assert calls[-1] is False

        session.remove_listener(session._listeners[0])
        count = len(calls)
        session.go_next()
        assert len(calls) == count

    @pytest.mark.asyncio
    async def test_initial_search_takes_precedence(self, fetcher, favorites):
        session = BrowserSession(favorites, fetcher=fetcher, category="science", search=" ai ")
        session.start()
        await settle()

        assert session.query_key == "search:ai"
        assert fetcher.calls[0] == NewsQuery(page=1, search="ai")

    def test_unknown_initial_category_falls_back(self, fetcher, favorites):
        session = BrowserSession(favorites, fetcher=fetcher, category="astrology")
        assert session.query_key == "category:tech"


class TestNavigation:
    @pytest.mark.asyncio
    async def test_last_index_prefetches_next_page_and_next_is_a_cache_hit(
        self, session, fetcher
    ):
        session.start()
        await settle()

        session.go_next()
        session.go_next()
        assert session.nav == NavState(1, 2)
        await settle()
        assert fetcher.calls_for(tech(2)) == 1
        assert session.partition.has(2)

        session.go_next()

        assert session.nav == NavState(2, 0)
        assert session.is_loading is False
        assert session.current_article.uuid == "tech-2-0"
        assert fetcher.calls_for(tech(2)) == 1

    @pytest.mark.asyncio
    async def test_prev_wraps_to_last_item_of_previous_page(self, session):
        session.start()
        await settle()
        for _ in range(3):
            session.go_next()
        await settle()

        session.go_prev()

        assert session.nav == NavState(1, 2)
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_first_returns_to_page_one(self, session, fetcher):
        session.start()
        await settle()
        for _ in range(4):
            session.go_next()
        await settle()

        session.go_first()

        assert session.nav == NavState(1, 0)
        assert fetcher.calls_for(tech(1)) == 1

    @pytest.mark.asyncio
    async def test_partial_page_wraps_after_its_last_item(self, session, fetcher):
        fetcher.counts[tech(1)] = 2
        session.start()
        await settle()

        session.go_next()
        session.go_next()

        assert session.nav == NavState(2, 0)

    @pytest.mark.asyncio
    async def test_index_is_clamped_once_page_size_is_known(self, session, fetcher):
        fetcher.counts[tech(1)] = 1
        session.start()
        session.select_dot(2)
        assert session.nav == NavState(1, 2)

        await settle()

        assert session.nav == NavState(1, 0)
        assert session.current_article.uuid == "tech-1-0"

    @pytest.mark.asyncio
    async def test_empty_page_has_no_current_article(self, session, fetcher):
        fetcher.counts[tech(1)] = 0
        session.start()
        await settle()

        assert session.current_articles == []
        assert session.current_article is None

    def test_dot_outside_page_raises(self, session):
        with pytest.raises(ValueError):
            session.dot(3)

    @pytest.mark.asyncio
    async def test_stale_primary_response_never_reverts_display(self, session, fetcher):
        gate = fetcher.gate(tech(1))
        session.start()
        await settle()

        # Page 1 is still loading; step through to page 2
        for _ in range(3):
            session.go_next()
        assert session.nav == NavState(2, 0)
        await settle()

        assert session.current_article.uuid == "tech-2-0"
        assert session.is_loading is False

        gate.set()
        await settle()

        assert session.nav == NavState(2, 0)
        assert session.current_article.uuid == "tech-2-0"
        assert session.is_loading is False
        assert session.error is None


class TestQueryChanges:
    @pytest.mark.asyncio
    async def test_switching_away_and_back_refetches_without_stale_content(
        self, session, fetcher
    ):
        session.start()
        await settle()
        assert uuids(session.current_articles)[0] == "tech-1-0"

        session.submit_search("ai")
        assert session.query_key == "search:ai"
        assert session.current_articles is None
        assert session.is_loading is True
        await settle()
        assert session.current_article.uuid == "ai-1-0"

        session.select_category("tech")
        assert session.nav == NavState(1, 0)
        assert session.current_articles is None
        assert session.is_loading is True
        await settle()

        assert session.current_article.uuid == "tech-1-0"
        assert fetcher.calls_for(tech(1)) == 2

    @pytest.mark.asyncio
    async def test_query_change_resets_position(self, session):
        session.start()
        await settle()
        for _ in range(4):
            session.go_next()

        session.select_category("science")

        assert session.nav == NavState(1, 0)
        assert session.query_key == "category:science"

    @pytest.mark.asyncio
    async def test_same_search_does_not_refetch(self, session, fetcher):
        session.start()
        await settle()
        session.submit_search("  ")

        assert fetcher.calls_for(tech(1)) == 1
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_selecting_a_category_clears_search(self, fetcher, favorites):
        session = BrowserSession(favorites, fetcher=fetcher, search="ai")
        session.start()
        await settle()

        session.select_category("sports")

        assert session.search == ""
        assert session.query_key == "category:sports"

    def test_unknown_category_raises(self, session):
        with pytest.raises(ValueError, match="unknown category"):
            session.select_category("astrology")


class TestErrors:
    @pytest.mark.asyncio
    async def test_usage_limit_is_surfaced(self, session, fetcher):
        fetcher.errors[tech(1)] = UsageLimitError(
            "Daily request limit reached. Please try again later.", 429
        )
        session.start()
        await settle()

        assert session.is_loading is False
        assert "Daily request limit reached" in session.error
        assert session.current_articles is None

    @pytest.mark.asyncio
    async def test_renavigation_retries_after_error(self, session, fetcher):
        fetcher.errors[tech(1)] = UpstreamError("Upstream error from TheNewsApi.", 502)
        session.start()
        await settle()
        assert session.error == "Upstream error from TheNewsApi."

        del fetcher.errors[tech(1)]
        session.go_first()
        assert session.error is None
        await settle()

        assert fetcher.calls_for(tech(1)) == 2
        assert session.current_article.uuid == "tech-1-0"

    @pytest.mark.asyncio
    async def test_prefetch_failure_is_not_surfaced(self, session, fetcher):
        fetcher.errors[tech(2)] = UpstreamError("nope", 500)
        session.start()
        await settle()

        session.select_dot(2)
        await settle()

        assert fetcher.calls_for(tech(2)) == 1
        assert session.error is None
        assert session.is_loading is False

    @pytest.mark.asyncio
    async def test_prefetch_can_be_disabled(self, fetcher, favorites):
        session = BrowserSession(favorites, fetcher=fetcher, prefetch=False)
        session.start()
        await settle()

        session.select_dot(2)
        await settle()

        assert fetcher.calls_for(tech(2)) == 0


class TestFavorites:
    @pytest.mark.asyncio
    async def test_toggle_current_article(self, session):
        session.start()
        await settle()
        article = session.current_article

        assert session.toggle_current_favorite() is True
        assert session.is_favorite(article)
        assert session.toggle_current_favorite() is False
        assert not session.is_favorite(article)

    def test_toggle_without_article_returns_none(self, session):
        assert session.toggle_current_favorite() is None

    def test_favorites_view_paging_with_partial_page(self, session, make_article):
        for ident in ("a", "b", "c", "d"):
            session.toggle_favorite(make_article(ident))
        session.toggle_favorites_view()

        assert uuids(session.favorites_page_articles) == ["d", "c", "b"]
        session.next()
        session.next()
        session.next()
        assert session.fav_nav == NavState(2, 0)
        assert session.displayed_article.uuid == "a"

        session.dot(2)
        assert session.fav_nav == NavState(2, 0)

        session.next()
        assert session.fav_nav == NavState(2, 0)

        session.prev()
        assert session.fav_nav == NavState(1, 2)

        session.first()
        assert session.fav_nav == NavState(1, 0)

    def test_removing_last_item_of_page_reclamps(self, session, make_article):
        for ident in ("a", "b", "c", "d"):
            session.toggle_favorite(make_article(ident))
        session.toggle_favorites_view()
        session.fav_next()
        session.fav_next()
        session.fav_next()
        assert session.fav_nav == NavState(2, 0)

        session.toggle_current_favorite()

        assert session.fav_nav == NavState(1, 0)
        assert len(session.favorites) == 3

    def test_empty_favorites_reset_position(self, session, make_article):
        session.toggle_favorite(make_article("only"))
        session.toggle_favorites_view()
        session.toggle_current_favorite()

        assert session.fav_nav == NavState(1, 0)
        assert session.current_favorite is None

    @pytest.mark.asyncio
    async def test_submitting_search_leaves_favorites_view(self, session):
        session.start()
        await settle()
        session.toggle_favorites_view()

        session.submit_search("")

        assert session.favorites_view is False


class TestClose:
    @pytest.mark.asyncio
    async def test_close_cancels_in_flight_work(self, session, fetcher):
        fetcher.gate(tech(1))
        session.start()
        await settle()
        assert session.coordinator.inflight

        await session.close()

        assert not session.coordinator.inflight
        assert session._background_tasks == set()
