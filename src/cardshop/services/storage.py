"""Key/value storage backends for saves."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Protocol

from cardshop import config

_SAFE_KEY = re.compile(r"[^A-Za-z0-9._-]")


class StorageLike(Protocol):
    """String key/value store; ``get_item`` returns None for missing keys."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage, mostly for tests and headless runs."""

    def __init__(self, items: Dict[str, str] | None = None) -> None:
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._items


class FileStorage:
    """Stores each key as ``<key>.json`` under a directory on disk."""

    def __init__(self, base_dir: Path | str | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_save_dir()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def get_item(self, key: str) -> str | None:
        try:
            return self._path(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def set_item(self, key: str, value: str) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def remove_item(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            return

    def _path(self, key: str) -> Path:
        if not key:
            raise ValueError("Storage key must not be empty.")
        return self._base_dir / f"{_SAFE_KEY.sub('_', key)}.json"
