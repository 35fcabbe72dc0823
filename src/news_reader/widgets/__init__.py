"""Widget classes for modular UI composition."""

from news_reader.widgets.card import SUMMARY_MAX_LEN, ArticleCard, render_article
from news_reader.widgets.chrome import CategoryBar, ContextFooter
from news_reader.widgets.pager import PagerBar

__all__ = [
    "SUMMARY_MAX_LEN",
    "ArticleCard",
    "CategoryBar",
    "ContextFooter",
    "PagerBar",
    "render_article",
]
