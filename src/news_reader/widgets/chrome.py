"""Widget chrome: footer hints and the category list."""

from __future__ import annotations

from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from news_reader.models import CATEGORIES
from news_reader.query import escape_rich_text
from news_reader.themes import THEME_COLORS


class ContextFooter(Static):
    """One-line key hint strip docked at the bottom."""

    DEFAULT_CSS = """
    ContextFooter {
        dock: bottom;
        height: 2;
        background: $th-background;
        color: $th-muted;
        padding: 0 1;
        border-top: solid $th-panel-alt;
    }
    """

    def render_bindings(self, bindings: list[tuple[str, str]]) -> None:
        """Show ``(key, label)`` hints separated by two spaces."""
        accent = THEME_COLORS["accent"]
        muted = THEME_COLORS["muted"]
        self.update(
            "  ".join(
                f"[bold {accent}]{escape_rich_text(key)}[/] [{muted}]{label}[/]"
                for key, label in bindings
            )
        )


class CategoryBar(OptionList):
    """Selectable list of news categories."""

    DEFAULT_CSS = """
    CategoryBar {
        height: auto;
        max-height: 12;
        background: $th-panel;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(
            *(Option(name.capitalize(), id=name) for name in CATEGORIES),
            **kwargs,
        )

    def highlight_category(self, category: str | None) -> None:
        """Highlight ``category``, or clear the highlight while a search is active."""
        if category is None or category not in CATEGORIES:
            self.highlighted = None
            return
        self.highlighted = CATEGORIES.index(category)


__all__ = ["CategoryBar", "ContextFooter"]
