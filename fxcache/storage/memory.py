# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""In-memory key-value store."""
import threading

from fxcache.storage.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Thread-safe dictionary store. Contents are lost on restart."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [key for key in self._data if key.startswith(prefix)]
            for key in doomed:
                del self._data[key]
            return len(doomed)

    def items(self, prefix: str = "") -> list[tuple[str, str]]:
        with self._lock:
            return sorted(
                (key, value)
                for key, value in self._data.items()
                if key.startswith(prefix)
            )
