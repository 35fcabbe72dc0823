"""Page/index navigation state machine.

Navigation state is ``(page, index)``: a 1-based page of up to
:data:`PAGE_SIZE` articles and the 0-based position of the displayed article
within it. All transitions are pure functions returning a new
:class:`NavState`.

Two flavours share the same rules:

- Live results, where the neighbouring page's size is only known once it is
  cached (``count=None`` means "unknown, assume full").
- Favorites, where every page size is computed from the list length and
  ``prev``/``next`` never step past the ends of the list.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from news_reader.models import PAGE_SIZE


@dataclass(slots=True, frozen=True)
class NavState:
    """Current page (1-based) and in-page index (0-based)."""

    page: int = 1
    index: int = 0


def clamp_index(index: int, count: int) -> int:
    """Clamp ``index`` to ``[0, count - 1]`` (0 for an empty page)."""
    return max(0, min(index, count - 1))


def last_index(count: int | None) -> int:
    """Highest valid index for a page holding ``count`` items (None = full)."""
    if count is None:
        return PAGE_SIZE - 1
    return clamp_index(PAGE_SIZE - 1, count)


# ============================================================================
# Live Result Transitions
# ============================================================================


def first(nav: NavState) -> NavState:
    return NavState(page=1, index=0)


def prev(nav: NavState, prev_count: int | None = None) -> NavState:
    """Step back one article, wrapping to the last item of the previous page."""
    if nav.index > 0:
        return NavState(page=nav.page, index=nav.index - 1)
    if nav.page > 1:
        return NavState(page=nav.page - 1, index=last_index(prev_count))
    return nav


def next(nav: NavState, count: int | None = None) -> NavState:  # noqa: A001
    """Step forward one article, wrapping to index 0 of the next page.

    ``count`` is the number of items on the current page when known; a
    partial page wraps after its last item instead of after index 2.
    """
    if nav.index < last_index(count):
        return NavState(page=nav.page, index=nav.index + 1)
    return NavState(page=nav.page + 1, index=0)


def dot_select(nav: NavState, index: int) -> NavState:
    if not 0 <= index < PAGE_SIZE:
        raise ValueError(f"dot index must be in 0..{PAGE_SIZE - 1}, got {index}")
    return NavState(page=nav.page, index=index)


def clamp_to_count(nav: NavState, count: int) -> NavState:
    """Re-clamp the index once the page's real item count is known."""
    index = clamp_index(nav.index, count)
    if index == nav.index:
        return nav
    return NavState(page=nav.page, index=index)


# ============================================================================
# Favorites Paging
# ============================================================================


def page_count(total: int) -> int:
    """Number of pages for ``total`` items (at least 1)."""
    return max(1, math.ceil(max(0, total) / PAGE_SIZE))


def page_item_count(total: int, page: int) -> int:
    """Number of items on ``page`` of a list holding ``total`` items."""
    start = (page - 1) * PAGE_SIZE
    return min(PAGE_SIZE, max(0, total - start))


def page_slice(page: int) -> slice:
    start = (page - 1) * PAGE_SIZE
    return slice(start, start + PAGE_SIZE)


def reclamp(total: int, nav: NavState) -> NavState:
    """Bring ``nav`` back inside a list of ``total`` items.

    The page is capped at the last page and the index at the item count of
    the resulting page; an empty list resets to ``(1, 0)``.
    """
    if total <= 0:
        return NavState(page=1, index=0)
    page = max(1, min(nav.page, page_count(total)))
    index = clamp_index(nav.index, page_item_count(total, page))
    if page == nav.page and index == nav.index:
        return nav
    return NavState(page=page, index=index)


def fav_prev(nav: NavState, total: int) -> NavState:
    if nav.index > 0:
        return NavState(page=nav.page, index=nav.index - 1)
    if nav.page > 1:
        target = nav.page - 1
        count = page_item_count(total, target)
        return NavState(page=target, index=clamp_index(PAGE_SIZE - 1, count))
    return nav


def fav_next(nav: NavState, total: int) -> NavState:
    count = page_item_count(total, nav.page)
    if nav.index < count - 1:
        return NavState(page=nav.page, index=nav.index + 1)
    if nav.page < page_count(total):
        return NavState(page=nav.page + 1, index=0)
    return nav


def fav_dot_select(nav: NavState, index: int, total: int) -> NavState:
    """Jump to ``index`` on the current favorites page, clamped to its size."""
    selected = dot_select(nav, index)
    return clamp_to_count(selected, page_item_count(total, nav.page))


__all__ = [
    "NavState",
    "clamp_index",
    "clamp_to_count",
    "dot_select",
    "fav_dot_select",
    "fav_next",
    "fav_prev",
    "first",
    "last_index",
    "next",
    "page_count",
    "page_item_count",
    "page_slice",
    "prev",
    "reclamp",
]
