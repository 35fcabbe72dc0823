"""Pager bar: first / previous / three article dots / next."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Label

from news_reader.models import PAGE_SIZE
from news_reader.query import article_number


class PagerBar(Horizontal):
    """Navigation controls for the current page of up to three articles."""

    class First(Message):
        """Request to jump to the first page."""

    class Prev(Message):
        """Request to step back one article."""

    class Next(Message):
        """Request to step forward one article."""

    class SelectDot(Message):
        """Request to show article ``index`` of the current page."""

        def __init__(self, index: int) -> None:
            super().__init__()
            self.index = index

    DEFAULT_CSS = """
    PagerBar {
        height: auto;
        padding: 0 1;
        background: $th-panel;
        align-horizontal: center;
    }

    PagerBar .pager-button {
        padding: 0 1;
        color: $th-muted;
    }

    PagerBar .pager-button:hover {
        color: $th-text;
    }

    PagerBar .pager-dot {
        padding: 0 1;
        color: $th-muted;
    }

    PagerBar .pager-dot.active {
        color: $th-accent;
        text-style: bold reverse;
    }

    PagerBar .pager-dot.missing {
        color: $th-panel-alt;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.page = 1
        self.index = 0

    def compose(self) -> ComposeResult:
        yield Label("«", classes="pager-button", id="pager-first")
        yield Label("‹", classes="pager-button", id="pager-prev")
        for i in range(PAGE_SIZE):
            yield Label(str(i + 1), classes="pager-dot", id=f"pager-dot-{i}")
        yield Label("›", classes="pager-button", id="pager-next")

    def update_state(self, page: int, index: int, count: int | None) -> None:
        """Refresh dot numbers and highlight; ``count`` is None while loading."""
        self.page = page
        self.index = index
        for i in range(PAGE_SIZE):
            dot = self.query_one(f"#pager-dot-{i}", Label)
            dot.update(str(article_number(page, i, PAGE_SIZE)))
            dot.set_class(i == index, "active")
            dot.set_class(count is not None and i >= count, "missing")

    def on_click(self, event: object) -> None:
        """Handle clicks on the pager controls."""
        from textual.events import Click

        if not isinstance(event, Click):
            return
        widget = event.widget
        if widget is None:
            return
        widget_id = widget.id or ""
        if widget_id == "pager-first":
            self.post_message(self.First())
        elif widget_id == "pager-prev":
            self.post_message(self.Prev())
        elif widget_id == "pager-next":
            self.post_message(self.Next())
        elif widget_id.startswith("pager-dot-"):
            try:
                self.post_message(self.SelectDot(int(widget_id.removeprefix("pager-dot-"))))
            except ValueError:
                pass


__all__ = ["PagerBar"]
