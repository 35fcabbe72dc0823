"""Proxy settings loaded from the environment and an optional ``.env`` file."""

from __future__ import annotations

from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

_env_path = find_dotenv(usecwd=True)  # locate a .env file in the working directory or its parents
if _env_path:
    load_dotenv(_env_path)

DEFAULT_UPSTREAM_BASE_URL = "https://api.thenewsapi.com/v1/news/all"
DEFAULT_SEARCH_RECENCY_DAYS = 30


class ProxySettings(BaseSettings):
    # Upstream credentials; missing is reported per request, not at startup
    THENEWSAPI_TOKEN: str | None = None

    # Searches only return articles published in the last N days (0 disables)
    SEARCH_RECENCY_DAYS: int = DEFAULT_SEARCH_RECENCY_DAYS

    HOST: str = "127.0.0.1"
    PORT: int = 5177

    UPSTREAM_BASE_URL: str = DEFAULT_UPSTREAM_BASE_URL
    UPSTREAM_TIMEOUT_SECONDS: float = 15.0

    @field_validator("SEARCH_RECENCY_DAYS", mode="before")
    @classmethod
    def _clamp_recency_days(cls, value: Any) -> int:
        """Unparseable or negative values disable the recency filter."""
        if value is None or value == "":
            return DEFAULT_SEARCH_RECENCY_DAYS
        if isinstance(value, bool):
            return 0
        try:
            days = int(str(value).strip())
        except ValueError:
            return 0
        return max(0, days)

    @field_validator("THENEWSAPI_TOKEN", mode="before")
    @classmethod
    def _blank_token_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


__all__ = ["DEFAULT_SEARCH_RECENCY_DAYS", "DEFAULT_UPSTREAM_BASE_URL", "ProxySettings"]
