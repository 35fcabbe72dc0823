"""User-facing copy for toasts and stderr errors.

Failures read as up to three lines: what could not be done, optionally why,
and what to try next::

    Could not load headlines.
    Why: the proxy refused the connection.
    Next step: start news-reader-proxy.
"""

from __future__ import annotations

from collections.abc import Iterable


def _sentence(text: str) -> str:
    stripped = text.strip()
    if stripped and stripped[-1] not in ".!?":
        stripped += "."
    return stripped


def _compose(headline: str, why: str | None, next_step: str) -> str:
    parts = [headline]
    if why:
        parts.append("Why: " + _sentence(why))
    parts.append(build_next_step_hint(next_step))
    return "\n".join(parts)


def build_next_step_hint(next_step: str) -> str:
    return "Next step: " + _sentence(next_step)


def build_actionable_error(action: str, *, next_step: str, why: str | None = None) -> str:
    """``Could not <action>.`` followed by the optional reason and a next step."""
    return _compose(f"Could not {action.strip()}.", why, next_step)


def build_actionable_warning(message: str, *, next_step: str, why: str | None = None) -> str:
    return _compose(_sentence(message), why, next_step)


def build_invalid_category_error(value: str, categories: Iterable[str]) -> str:
    return build_actionable_error(
        f"start with category {value!r}",
        why="that category is not supported",
        next_step=f"use one of: {', '.join(categories)}",
    )


def build_open_failed_error(url: str) -> str:
    return build_actionable_error(
        "open the article",
        why="no web browser is available",
        next_step=f"open {url} manually",
    )


def build_favorites_not_saved_warning() -> str:
    return build_actionable_warning(
        "Favorites changed but could not be written to disk",
        next_step="check permissions for the news-reader data directory",
    )


def build_favorite_notification(title: str, added: bool) -> str:
    """Toast text after a favorite toggle; blank titles read as "Article"."""
    label = title.strip() or "Article"
    verb = "Saved to" if added else "Removed from"
    return f"{verb} favorites: {label}"


__all__ = [
    "build_actionable_error",
    "build_actionable_warning",
    "build_favorite_notification",
    "build_favorites_not_saved_warning",
    "build_invalid_category_error",
    "build_next_step_hint",
    "build_open_failed_error",
]
