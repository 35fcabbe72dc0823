"""News Reader TUI - browse headlines three at a time through the news proxy.

Usage:
    news-reader                        # Restore the last category/search
    news-reader --category science     # Start on a category
    news-reader --search "open source" # Start with a search
    news-reader --no-restore           # Start fresh session

Key bindings:
    /         - Focus the search box (Enter commits)
    escape    - Focus the category list
    left/h    - Previous article
    right/l   - Next article
    home/g    - First page
    1-3       - Jump to article on the current page
    f         - Toggle favorite for the shown article
    v         - Toggle favorites view
    o         - Open shown article in browser
    ctrl+t    - Cycle color theme
    q         - Quit
"""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Callable

import httpx
from textual import on
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.widgets import Header, Input, Label, OptionList

from news_reader.action_messages import (
    build_favorite_notification,
    build_favorites_not_saved_warning,
    build_open_failed_error,
)
from news_reader.config import save_config
from news_reader.favorites import FavoritesStore
from news_reader.models import CATEGORIES, Article, SessionState, UserConfig
from news_reader.query import article_number, escape_rich_text, truncate_text
from news_reader.services.interfaces import AppServices, build_default_app_services
from news_reader.session import BrowserSession, build_fetcher
from news_reader.storage import LocalStorage
from news_reader.themes import TEXTUAL_THEMES, apply_theme_colors, next_theme_name
from news_reader.ui_constants import APP_BINDINGS, APP_CSS, FOOTER_BINDINGS
from news_reader.widgets import ArticleCard, CategoryBar, ContextFooter, PagerBar

logger = logging.getLogger(__name__)

EMPTY_FAVORITES_MESSAGE = "No favorites yet. Press f on an article to save it."
EMPTY_PAGE_MESSAGE = "No articles on this page."


class NewsReaderApp(App):
    """A TUI application to browse news through the proxy."""

    TITLE = "News Reader"

    # Theme-aware CSS and key bindings are defined in ui_constants for maintainability.
    CSS = APP_CSS

    BINDINGS = APP_BINDINGS

    def __init__(
        self,
        config: UserConfig | None = None,
        *,
        restore_session: bool = True,
        category: str | None = None,
        search: str | None = None,
        prefetch: bool | None = None,
        storage: LocalStorage | None = None,
        services: AppServices | None = None,
        ascii_icons: bool = False,
        open_url_fn: Callable[[str], bool] = webbrowser.open,
        save_config_fn: Callable[[UserConfig], bool] = save_config,
    ) -> None:
        super().__init__()
        # Register all Textual themes so $th-* CSS variables resolve before compose()
        for textual_theme in TEXTUAL_THEMES.values():
            self.register_theme(textual_theme)
        self._config = config or UserConfig()
        self._config.theme_name = apply_theme_colors(self._config.theme_name)
        self.theme = self._config.theme_name
        self._services: AppServices = services or build_default_app_services()
        self._http_client: httpx.AsyncClient | None = None
        self._ascii_icons = ascii_icons
        self._open_url_fn = open_url_fn
        self._save_config_fn = save_config_fn

        start_category = self._config.default_category
        start_search = ""
        if restore_session:
            start_category = self._config.session.category
            start_search = self._config.session.search
        if category is not None:
            start_category = category
            start_search = ""
        if search is not None:
            start_search = search

        fetcher = build_fetcher(
            self._services,
            base_url=self._config.proxy_url,
            timeout_seconds=self._config.request_timeout_seconds,
            client_getter=lambda: self._http_client,
        )
        self.session = BrowserSession(
            FavoritesStore.load(storage or LocalStorage()),
            fetcher=fetcher,
            category=start_category,
            search=start_search,
            prefetch=self._config.prefetch_enabled if prefetch is None else prefetch,
        )

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-container"):
            with Vertical(id="sidebar"):
                yield Label(" Browse", id="sidebar-header")
                yield Input(placeholder=" Search headlines", id="search-input")
                yield CategoryBar(id="category-list")
                yield Label("", id="favorites-indicator")
            with Vertical(id="content"):
                yield Label("", id="content-header")
                yield ArticleCard(ascii_icons=self._ascii_icons, id="article-card")
                yield PagerBar(id="pager-bar")
                yield Label("", id="status-bar")
        yield ContextFooter()

    def on_mount(self) -> None:
        """Called when app is mounted. Starts loading the first page."""
        # Create shared HTTP client for connection pooling
        self._http_client = httpx.AsyncClient()

        if self._config.config_defaulted:
            self.notify(
                "Config file was unreadable. Using defaults.",
                severity="warning",
                timeout=8,
            )

        self.query_one("#search-input", Input).value = self.session.search
        self.query_one(ContextFooter).render_bindings(FOOTER_BINDINGS)
        self.session.add_listener(self._refresh_view)
        self.session.start()

        logger.debug(
            "App mounted: proxy=%s, key=%s, favorites=%d",
            self._config.proxy_url,
            self.session.query_key,
            len(self.session.favorites),
        )

        try:
            self.query_one("#category-list", CategoryBar).focus()
        except NoMatches:
            pass

    async def on_unmount(self) -> None:
        """Called when app is unmounted. Saves session state and cancels fetches."""
        self.session.remove_listener(self._refresh_view)
        self._save_session_state()
        await self.session.close()

        # Close shared HTTP client
        client = self._http_client
        self._http_client = None
        if client is not None:
            try:
                await client.aclose()
            except Exception as e:
                logger.debug(
                    "Failed to close shared HTTP client during shutdown: %s", e, exc_info=True
                )

    def _save_session_state(self) -> None:
        self._config.session = SessionState(
            category=self.session.category, search=self.session.search
        )
        self._save_config_or_warn("session state")

    def _save_config_or_warn(self, context: str) -> bool:
        if self._save_config_fn(self._config):
            return True
        logger.warning("Failed to save %s", context)
        try:
            self.notify(f"Failed to save {context}.", severity="warning")
        except Exception as e:
            logger.debug("Could not show save warning: %s", e, exc_info=True)
        return False

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _refresh_view(self) -> None:
        """Re-render every widget from the session state."""
        try:
            card = self.query_one("#article-card", ArticleCard)
            pager_bar = self.query_one("#pager-bar", PagerBar)
        except NoMatches:
            return
        session = self.session
        if session.favorites_view:
            nav = session.fav_nav
            count: int | None = len(session.favorites_page_articles)
            article = session.current_favorite
            if article is not None:
                card.show_article(article, is_favorite=True)
            else:
                card.show_empty(EMPTY_FAVORITES_MESSAGE)
        else:
            nav = session.nav
            articles = session.current_articles
            count = None if articles is None else len(articles)
            article = session.current_article
            if articles is None:
                if session.error:
                    card.show_error(session.error)
                else:
                    card.show_loading()
            elif article is None:
                card.show_empty(EMPTY_PAGE_MESSAGE)
            else:
                card.show_article(article, is_favorite=session.is_favorite(article))
        pager_bar.update_state(nav.page, nav.index, count)
        self._update_headers()
        self._update_status_bar(nav.page, nav.index)

    def _selection_label(self) -> str:
        session = self.session
        if session.favorites_view:
            return f"Favorites ({len(session.favorites)})"
        if session.search:
            return f"Search: {truncate_text(session.search, 40)}"
        return f"Category: {session.category.capitalize()}"

    def _update_headers(self) -> None:
        try:
            header = self.query_one("#content-header", Label)
            indicator = self.query_one("#favorites-indicator", Label)
            categories = self.query_one("#category-list", CategoryBar)
        except NoMatches:
            return
        header.update(f" {escape_rich_text(self._selection_label())}")
        star = "*" if self._ascii_icons else "★"
        indicator.update(f"{star} {len(self.session.favorites)} favorites")
        categories.highlight_category(None if self.session.search else self.session.category)
        self.sub_title = self._selection_label()

    def _update_status_bar(self, page: int, index: int) -> None:
        try:
            status = self.query_one("#status-bar", Label)
        except NoMatches:
            return
        status.update(self._status_text(page, index))

    def _status_text(self, page: int, index: int) -> str:
        parts = [f"Page {page}", f"Article {article_number(page, index)}"]
        # A prefetch may fill the visible page before the primary request settles
        if (
            not self.session.favorites_view
            and self.session.is_loading
            and self.session.current_articles is None
        ):
            parts.append("Loading...")
        return " · ".join(parts)

    # ------------------------------------------------------------------
    # Widget events
    # ------------------------------------------------------------------

    @on(Input.Submitted, "#search-input")
    def _on_search_submitted(self, event: Input.Submitted) -> None:
        self.session.submit_search(event.value)

    @on(OptionList.OptionSelected, "#category-list")
    def _on_category_selected(self, event: OptionList.OptionSelected) -> None:
        category = event.option.id
        if category not in CATEGORIES:
            return
        self.query_one("#search-input", Input).value = ""
        self.session.select_category(category)

    def on_pager_bar_first(self, message: PagerBar.First) -> None:
        self.session.first()

    def on_pager_bar_prev(self, message: PagerBar.Prev) -> None:
        self.session.prev()

    def on_pager_bar_next(self, message: PagerBar.Next) -> None:
        self.session.next()

    def on_pager_bar_select_dot(self, message: PagerBar.SelectDot) -> None:
        self.session.dot(message.index)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_focus_search(self) -> None:
        self.query_one("#search-input", Input).focus()

    def action_focus_categories(self) -> None:
        self.query_one("#category-list", CategoryBar).focus()

    def action_first(self) -> None:
        self.session.first()

    def action_prev(self) -> None:
        self.session.prev()

    def action_next(self) -> None:
        self.session.next()

    def action_select_dot(self, index: int) -> None:
        self.session.dot(index)

    def action_toggle_favorite(self) -> None:
        article = self.session.displayed_article
        if article is None:
            self.notify("No article to favorite", title="Favorites", severity="warning")
            return
        added = self.session.toggle_favorite(article)
        self.notify(build_favorite_notification(article.title, added), title="Favorites")
        if not self.session.favorites.last_save_ok:
            self.notify(build_favorites_not_saved_warning(), severity="warning", timeout=8)

    def action_toggle_favorites_view(self) -> None:
        self.session.toggle_favorites_view()

    def action_open_url(self) -> None:
        article = self.session.displayed_article
        if article is None:
            self.notify("No article selected", title="Open", severity="warning")
            return
        self._open_article(article)

    def _open_article(self, article: Article) -> None:
        try:
            opened = self._open_url_fn(article.url)
        except (webbrowser.Error, OSError) as e:
            logger.warning("Failed to open %s: %s", article.url, e)
            opened = False
        if not opened:
            self.notify(
                build_open_failed_error(article.url),
                title="Open",
                severity="error",
                timeout=8,
            )
            return
        self.notify(truncate_text(article.title or article.url, 60), title="Opened")

    def action_cycle_theme(self) -> None:
        """Cycle through available color themes."""
        name = next_theme_name(self._config.theme_name)
        self._config.theme_name = apply_theme_colors(name)
        self.theme = self._config.theme_name
        self._refresh_view()
        self._save_config_or_warn("theme preference")
        self.notify(f"Theme: {self._config.theme_name}", title="Theme")


__all__ = ["EMPTY_FAVORITES_MESSAGE", "EMPTY_PAGE_MESSAGE", "NewsReaderApp"]
