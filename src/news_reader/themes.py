"""Color palettes for the TUI.

Each palette is registered with Textual as a theme whose colors are exposed
to CSS as ``$th-*`` variables. Rich markup rendered in Python reads the
active palette from :data:`THEME_COLORS` instead.
"""

from __future__ import annotations

from textual.theme import Theme as TextualTheme

DEFAULT_CATEGORY_COLOR = "#888888"

DEFAULT_THEME = {
    "background": "#272822",
    "panel": "#1e1e1e",
    "panel_alt": "#3e3d32",
    "text": "#f8f8f2",
    "muted": "#75715e",
    "accent": "#66d9ef",
    "accent_alt": "#e6db74",
    "green": "#a6e22e",
    "orange": "#fd971f",
    "pink": "#f92672",
    "purple": "#ae81ff",
    "highlight": "#49483e",
    "highlight_focus": "#5a5950",
}

CATPPUCCIN_MOCHA_THEME: dict[str, str] = {
    "background": "#1e1e2e",
    "panel": "#181825",
    "panel_alt": "#313244",
    "text": "#cdd6f4",
    "muted": "#6c7086",
    "accent": "#89b4fa",
    "accent_alt": "#f9e2af",
    "green": "#a6e3a1",
    "orange": "#fab387",
    "pink": "#f38ba8",
    "purple": "#cba6f7",
    "highlight": "#313244",
    "highlight_focus": "#45475a",
}

SOLARIZED_DARK_THEME: dict[str, str] = {
    "background": "#002b36",
    "panel": "#073642",
    "panel_alt": "#586e75",
    "text": "#839496",
    "muted": "#586e75",
    "accent": "#268bd2",
    "accent_alt": "#b58900",
    "green": "#859900",
    "orange": "#cb4b16",
    "pink": "#d33682",
    "purple": "#6c71c4",
    "highlight": "#073642",
    "highlight_focus": "#586e75",
}

THEMES: dict[str, dict[str, str]] = {
    "monokai": DEFAULT_THEME,
    "catppuccin-mocha": CATPPUCCIN_MOCHA_THEME,
    "solarized-dark": SOLARIZED_DARK_THEME,
}
THEME_NAMES: list[str] = list(THEMES.keys())

# Mutable copy of the active palette, read by renderers
THEME_COLORS = DEFAULT_THEME.copy()


def _css_variables(colors: dict[str, str]) -> dict[str, str]:
    # palette key "panel_alt" becomes the CSS variable $th-panel-alt
    return {"th-" + key.replace("_", "-"): value for key, value in colors.items()}


def _build_textual_theme(name: str, colors: dict[str, str]) -> TextualTheme:
    """Wrap a palette as a dark Textual theme exposing every color as $th-*."""
    return TextualTheme(
        name=name,
        dark=True,
        primary=colors["accent"],
        secondary=colors["accent_alt"],
        accent=colors["green"],
        foreground=colors["text"],
        background=colors["background"],
        surface=colors["panel"],
        panel=colors["panel_alt"],
        success=colors["green"],
        warning=colors["orange"],
        error=colors["pink"],
        variables=_css_variables(colors),
    )


TEXTUAL_THEMES: dict[str, TextualTheme] = {
    name: _build_textual_theme(name, colors) for name, colors in THEMES.items()
}


def apply_theme_colors(name: str) -> str:
    """Make ``name`` the active palette and return the name actually applied.

    Unknown names (for example from a hand-edited config) fall back to the
    first theme.
    """
    resolved = name if name in THEMES else THEME_NAMES[0]
    THEME_COLORS.clear()
    THEME_COLORS.update(THEMES[resolved])
    return resolved


def next_theme_name(current: str) -> str:
    if current not in THEMES:
        return THEME_NAMES[0]
    position = THEME_NAMES.index(current) + 1
    return THEME_NAMES[position % len(THEME_NAMES)]


# News category -> palette role; categories not listed render in a neutral gray
CATEGORY_ROLES = {
    "tech": "accent",
    "science": "green",
    "health": "green",
    "business": "accent_alt",
    "politics": "pink",
    "sports": "orange",
    "entertainment": "purple",
}


def get_category_color(category: str | None) -> str:
    role = CATEGORY_ROLES.get(category or "")
    return THEME_COLORS[role] if role else DEFAULT_CATEGORY_COLOR


__all__ = [
    "CATEGORY_ROLES",
    "CATPPUCCIN_MOCHA_THEME",
    "DEFAULT_CATEGORY_COLOR",
    "DEFAULT_THEME",
    "SOLARIZED_DARK_THEME",
    "TEXTUAL_THEMES",
    "THEMES",
    "THEME_COLORS",
    "THEME_NAMES",
    "apply_theme_colors",
    "get_category_color",
    "next_theme_name",
]
