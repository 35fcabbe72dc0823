"""Featured article card: the single article shown for the current position."""

from __future__ import annotations

from textual.widgets import Static

from news_reader.models import Article
from news_reader.query import escape_rich_text, format_published_at, truncate_text
from news_reader.themes import THEME_COLORS, get_category_color

SUMMARY_MAX_LEN = 600


def render_article(article: Article, *, is_favorite: bool = False, ascii_icons: bool = False) -> str:
    """Render an article as Rich markup."""
    accent = THEME_COLORS["accent"]
    muted = THEME_COLORS["muted"]
    star_on, star_off = ("*", "-") if ascii_icons else ("★", "☆")
    star_color = THEME_COLORS["accent_alt"] if is_favorite else muted
    star = star_on if is_favorite else star_off

    title = escape_rich_text(article.title) or "[italic]Untitled[/]"
    lines = [f"[{star_color}]{star}[/] [bold {accent}]{title}[/]"]

    meta = []
    if article.source_name:
        meta.append(escape_rich_text(article.source_name))
    published = format_published_at(article.published_at)
    if published:
        meta.append(escape_rich_text(published))
    if article.author:
        meta.append(f"by {escape_rich_text(article.author)}")
    if meta:
        lines.append(f"[{muted}]{' · '.join(meta)}[/]")
    if article.category:
        color = get_category_color(article.category)
        lines.append(f"[{color}]#{escape_rich_text(article.category)}[/]")

    summary = article.summary
    if summary:
        lines.append("")
        lines.append(escape_rich_text(truncate_text(summary, SUMMARY_MAX_LEN)))

    lines.append("")
    lines.append(f"[underline {muted}]{escape_rich_text(article.url)}[/]")
    return "\n".join(lines)


class ArticleCard(Static):
    """Shows the featured article, or the loading / error / empty state."""

    DEFAULT_CSS = """
    ArticleCard {
        height: 1fr;
        padding: 1 2;
        background: $th-panel;
        color: $th-text;
    }

    ArticleCard.loading-state {
        content-align: center middle;
        color: $th-muted;
    }

    ArticleCard.error-state {
        color: $th-pink;
    }
    """

    def __init__(self, *, ascii_icons: bool = False, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._ascii_icons = ascii_icons

    def _set_state(self, state: str) -> None:
        for name in ("loading-state", "error-state", "empty-state"):
            self.set_class(name == state, name)

    def show_article(self, article: Article, *, is_favorite: bool) -> None:
        self._set_state("")
        self.update(render_article(article, is_favorite=is_favorite, ascii_icons=self._ascii_icons))

    def show_loading(self) -> None:
        self._set_state("loading-state")
        self.update("Loading headlines...")

    def show_error(self, message: str) -> None:
        self._set_state("error-state")
        self.update(escape_rich_text(message))

    def show_empty(self, message: str) -> None:
        self._set_state("empty-state")
        self.update(f"[dim italic]{escape_rich_text(message)}[/]")


__all__ = ["SUMMARY_MAX_LEN", "ArticleCard", "render_article"]
