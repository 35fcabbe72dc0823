"""Error taxonomy for the news client and proxy."""

from __future__ import annotations

from news_reader.action_messages import build_actionable_error

DEFAULT_FETCH_ERROR = "Failed to fetch news."


class NewsReaderError(Exception):
    """Base class for all application-level errors."""


class ConfigurationError(NewsReaderError):
    """Required configuration (e.g. the upstream credential) is missing."""


class NewsApiError(NewsReaderError):
    """A News Query Service request failed."""

    def __init__(self, message: str = DEFAULT_FETCH_ERROR, status: int | None = None) -> None:
        self.message = message or DEFAULT_FETCH_ERROR
        self.status = status
        super().__init__(self.message)


class AuthenticationError(NewsApiError):
    """Upstream rejected the credential (401/403)."""


class UsageLimitError(NewsApiError):
    """Upstream usage cap reached (429)."""


class UpstreamError(NewsApiError):
    """Any other non-success response."""


class TransportError(NewsApiError):
    """The request never produced a response (network failure)."""


def error_for_status(status: int, message: str | None) -> NewsApiError:
    """Map a non-success HTTP status to the matching NewsApiError subclass."""
    text = message or DEFAULT_FETCH_ERROR
    if status in (401, 403):
        return AuthenticationError(text, status)
    if status == 429:
        return UsageLimitError(text, status)
    return UpstreamError(text, status)


def describe_fetch_error(exc: BaseException) -> str:
    """Translate a fetch failure into the text shown in the error panel."""
    if isinstance(exc, UsageLimitError):
        return build_actionable_error(
            "load headlines",
            why=exc.message,
            next_step="try again later; no requests are retried automatically",
        )
    if isinstance(exc, TransportError):
        return build_actionable_error(
            "reach the news proxy",
            why=exc.message,
            next_step="check that news-reader-proxy is running, then navigate to retry",
        )
    if isinstance(exc, NewsApiError):
        return exc.message
    return DEFAULT_FETCH_ERROR


__all__ = [
    "DEFAULT_FETCH_ERROR",
    "AuthenticationError",
    "ConfigurationError",
    "NewsApiError",
    "NewsReaderError",
    "TransportError",
    "UpstreamError",
    "UsageLimitError",
    "describe_fetch_error",
    "error_for_status",
]
