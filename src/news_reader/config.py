"""Configuration persistence: load and save."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from news_reader.models import (
    CATEGORIES,
    CONFIG_APP_NAME,
    DEFAULT_CATEGORY,
    DEFAULT_PROXY_URL,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_REQUEST_TIMEOUT,
    SessionState,
    UserConfig,
)
from news_reader.storage import write_json_atomic

logger = logging.getLogger(__name__)

# ============================================================================
# Configuration Persistence
# ============================================================================
#
# Validation contract: _dict_to_config() guarantees valid output for any input:
#
#   Field                    Rule                         Handler
#   ───────────────────────  ───────────────────────────  ─────────────────────
#   request_timeout_seconds  1 ≤ x ≤ 120                  _coerce_timeout
#   default_category         in CATEGORIES                _coerce_category
#   session.category         in CATEGORIES                SessionState.__post_init__
#   scalar fields            type-checked via _safe_get   _dict_to_config
#
CONFIG_FILENAME = "config.json"
PROXY_URL_ENV = "NEWS_READER_PROXY_URL"


def get_config_path() -> Path:
    """Get the path to the configuration file.

    Uses platformdirs for cross-platform config directory:
    - Linux: ~/.config/news-reader/config.json
    - macOS: ~/Library/Application Support/news-reader/config.json
    - Windows: %APPDATA%/news-reader/config.json
    """
    return Path(user_config_dir(CONFIG_APP_NAME)) / CONFIG_FILENAME


def _safe_get(data: dict, key: str, default: Any, expected_type: type) -> Any:
    """Safely get a value from dict with type validation.

    Returns the default if key is missing or value has wrong type.
    """
    value = data.get(key, default)
    if not isinstance(value, expected_type) or (
        expected_type is int and isinstance(value, bool)
    ):
        return default
    return value


def _coerce_timeout(value: Any) -> int:
    """Validate and clamp the request timeout in seconds."""
    if not isinstance(value, int) or isinstance(value, bool):
        return DEFAULT_REQUEST_TIMEOUT
    return max(1, min(value, MAX_REQUEST_TIMEOUT))


def _coerce_category(value: Any) -> str:
    if isinstance(value, str) and value in CATEGORIES:
        return value
    return DEFAULT_CATEGORY


def _config_to_dict(config: UserConfig) -> dict[str, Any]:
    """Serialize UserConfig to a JSON-compatible dictionary."""
    return {
        "version": config.version,
        "proxy_url": config.proxy_url,
        "request_timeout_seconds": _coerce_timeout(config.request_timeout_seconds),
        "prefetch_enabled": config.prefetch_enabled,
        "default_category": config.default_category,
        "theme_name": config.theme_name,
        "session": {
            "category": config.session.category,
            "search": config.session.search,
        },
    }


def _parse_session_state(data: dict[str, Any]) -> SessionState:
    """Parse the session state section from config data."""
    session_data = data.get("session", {})
    if not isinstance(session_data, dict):
        session_data = {}
    return SessionState(
        category=_safe_get(session_data, "category", DEFAULT_CATEGORY, str),
        search=_safe_get(session_data, "search", "", str).strip(),
    )


def _dict_to_config(data: dict[str, Any]) -> UserConfig:
    """Deserialize a dictionary to UserConfig with type validation."""
    proxy_url = _safe_get(data, "proxy_url", DEFAULT_PROXY_URL, str).strip()
    return UserConfig(
        proxy_url=proxy_url or DEFAULT_PROXY_URL,
        request_timeout_seconds=_coerce_timeout(
            data.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT)
        ),
        prefetch_enabled=_safe_get(data, "prefetch_enabled", True, bool),
        default_category=_coerce_category(data.get("default_category")),
        theme_name=_safe_get(data, "theme_name", "monokai", str),
        session=_parse_session_state(data),
        version=_safe_get(data, "version", 1, int),
    )


def _apply_env_overrides(config: UserConfig) -> UserConfig:
    proxy_url = os.environ.get(PROXY_URL_ENV, "").strip()
    if proxy_url:
        config.proxy_url = proxy_url
    return config


def load_config() -> UserConfig:
    """Load configuration from disk.

    Returns default config if file doesn't exist or is corrupted.
    Logs specific errors to help diagnose config issues.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return _apply_env_overrides(UserConfig())

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            logger.warning("Config file root is not an object, using defaults")
            return _apply_env_overrides(UserConfig(config_defaulted=True))
        return _apply_env_overrides(_dict_to_config(data))
    except json.JSONDecodeError as e:
        logger.warning("Config file has invalid JSON, using defaults: %s", e)
        return _apply_env_overrides(UserConfig(config_defaulted=True))
    except OSError as e:
        logger.warning("Could not read config file, using defaults: %s", e)
        return _apply_env_overrides(UserConfig(config_defaulted=True))


def save_config(config: UserConfig) -> bool:
    """Save configuration to disk atomically. Returns True on success."""
    try:
        write_json_atomic(get_config_path(), _config_to_dict(config), prefix=".config-")
    except OSError as e:
        logger.error("Failed to save config: %s", e)
        return False
    return True


__all__ = [
    "CONFIG_APP_NAME",
    "CONFIG_FILENAME",
    "PROXY_URL_ENV",
    "get_config_path",
    "load_config",
    "save_config",
]
