"""Internal service layer for network access."""

from news_reader.services.news_api_service import fetch_news, parse_news_response

__all__ = [
    "fetch_news",
    "parse_news_response",
]
