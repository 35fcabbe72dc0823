"""Internal UI constants for the NewsReader app."""

from __future__ import annotations

from textual.binding import Binding, BindingType

APP_CSS = """
Screen {
    background: $th-background;
}

Header {
    background: $th-panel-alt;
    color: $th-text;
}

#main-container {
    height: 1fr;
}

#sidebar {
    width: 32;
    height: 100%;
    border: tall $th-highlight;
    background: $th-panel;
}

#sidebar:focus-within {
    border: tall $th-accent;
}

#content {
    width: 1fr;
    height: 100%;
    border: tall $th-highlight;
    background: $th-panel;
}

#content:focus-within {
    border: tall $th-accent;
}

#sidebar-header {
    padding: 0 1;
    background: $th-panel;
    color: $th-accent;
    text-style: bold;
}

#content-header {
    padding: 0 1;
    background: $th-panel;
    color: $th-accent-alt;
    text-style: bold;
}

#search-input {
    width: 100%;
    border: tall $th-accent;
    background: $th-background;
}

#search-input:focus {
    border: tall $th-accent-alt;
}

#category-list > .option-list--option-highlighted {
    background: $th-highlight;
}

#category-list:focus > .option-list--option-highlighted {
    background: $th-highlight-focus;
}

#category-list > .option-list--option-hover {
    background: $th-panel-alt;
}

#favorites-indicator {
    padding: 1 1 0 1;
    color: $th-muted;
}

#status-bar {
    padding: 0 1;
    color: $th-muted;
}
"""

APP_BINDINGS: list[BindingType] = [
    Binding("q", "quit", "Quit", show=False),
    Binding("slash", "focus_search", "Search", show=False),
    Binding("escape", "focus_categories", "Categories", show=False),
    # Pager
    Binding("left", "prev", "Prev", show=False),
    Binding("h", "prev", "Prev", show=False),
    Binding("right", "next", "Next", show=False),
    Binding("l", "next", "Next", show=False),
    Binding("home", "first", "First", show=False),
    Binding("g", "first", "First", show=False),
    Binding("1", "select_dot(0)", "Article 1", show=False),
    Binding("2", "select_dot(1)", "Article 2", show=False),
    Binding("3", "select_dot(2)", "Article 3", show=False),
    # Favorites
    Binding("f", "toggle_favorite", "Favorite", show=False),
    Binding("v", "toggle_favorites_view", "Favorites", show=False),
    Binding("o", "open_url", "Open", show=False),
    # Theme cycling
    Binding("ctrl+t", "cycle_theme", "Theme", show=False),
]

FOOTER_BINDINGS: list[tuple[str, str]] = [
    ("←/→", "prev/next"),
    ("1-3", "article"),
    ("g", "first"),
    ("/", "search"),
    ("f", "favorite"),
    ("v", "favorites"),
    ("o", "open"),
    ("q", "quit"),
]

__all__ = [
    "APP_BINDINGS",
    "APP_CSS",
    "FOOTER_BINDINGS",
]
