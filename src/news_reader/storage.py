"""Durable key-value string storage backed by a single JSON file."""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path

from platformdirs import user_data_dir

from news_reader.models import CONFIG_APP_NAME

logger = logging.getLogger(__name__)

STORAGE_FILENAME = "storage.json"


def get_storage_path() -> Path:
    """Get the path to the local storage file.

    Uses platformdirs for the per-user data directory, e.g.
    ``~/.local/share/news-reader/storage.json`` on Linux.
    """
    return Path(user_data_dir(CONFIG_APP_NAME)) / STORAGE_FILENAME


def write_json_atomic(path: Path, data: object, *, prefix: str) -> None:
    """Replace ``path`` with ``data`` as JSON, never leaving a partial file.

    Raises OSError; the temporary file is removed on any failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix=prefix)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


class LocalStorage:
    """Key-value string storage that survives process restarts.

    Reads never raise: a missing, unreadable or malformed file behaves like
    empty storage. Writes are atomic and best-effort; failures are logged and
    reported through the return value.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else get_storage_path()
        self._items: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        if self._items is not None:
            return self._items
        self._items = {}
        if not self._path.exists():
            return self._items
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning("Storage file has invalid JSON, starting empty: %s", e)
            return self._items
        except UnicodeDecodeError as e:
            logger.warning("Storage file is not valid UTF-8, starting empty: %s", e)
            return self._items
        except OSError as e:
            logger.warning("Could not read storage file, starting empty: %s", e)
            return self._items
        if not isinstance(data, dict):
            logger.warning("Storage file root is %s, not an object; starting empty", type(data))
            return self._items
        self._items = {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}
        return self._items

    def get_item(self, key: str) -> str | None:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> bool:
        items = self._load()
        items[key] = value
        return self._flush(items)

    def remove_item(self, key: str) -> bool:
        items = self._load()
        if items.pop(key, None) is None:
            return True
        return self._flush(items)

    def _flush(self, items: dict[str, str]) -> bool:
        try:
            write_json_atomic(self._path, items, prefix=".storage-")
        except OSError as e:
            logger.error("Failed to write local storage: %s", e)
            return False
        return True


__all__ = ["STORAGE_FILENAME", "LocalStorage", "get_storage_path", "write_json_atomic"]
