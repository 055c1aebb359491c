"""Synchronous string key-value store persisted as a single JSON file.

This is the local-persistence fallback: there is no scoping or access
control, and whatever is stored (including plaintext passwords of the local
identity backend) is readable by anyone with access to the file.
"""
from __future__ import annotations

import json
from pathlib import Path
from threading import RLock
from typing import Iterator

from salary_ledger.core.errors import StoreError
from salary_ledger.core.logger import get_logger

LOGGER = get_logger(__name__)

AUTH_USER_KEY = "auth_user"
REGISTERED_USERS_KEY = "registered_users"


class LocalStorage:
    """``get_item``/``set_item``/``remove_item`` over string values.

    With ``path=None`` the data only lives in memory.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._lock = RLock()
        self._items: dict[str, str] = self._read()

    @property
    def path(self) -> Path | None:
        return self._path

    def _read(self) -> dict[str, str]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Unable to read local storage {self._path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise StoreError(f"Local storage {self._path} does not hold a JSON object")
        return {str(key): str(value) for key, value in raw.items()}

    def _write(self) -> None:
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(self._items, indent=2), encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise StoreError(f"Unable to write local storage {self._path}: {exc}") from exc

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            self._items[key] = value
            self._write()

    def remove_item(self, key: str) -> None:
        with self._lock:
            if self._items.pop(key, None) is not None:
                self._write()

    def keys(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._items))

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._write()


__all__ = ["AUTH_USER_KEY", "LocalStorage", "REGISTERED_USERS_KEY"]
