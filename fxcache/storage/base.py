# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Base class for key-value storage backends."""
from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Namespaced string-keyed storage.

    Implementations must replace values atomically so that readers never
    observe a partially written value.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None."""
        ...

    @abstractmethod
    def put(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any existing value."""
        ...

    @abstractmethod
    def delete_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``. Returns count removed."""
        ...

    @abstractmethod
    def items(self, prefix: str = "") -> list[tuple[str, str]]:
        """List ``(key, value)`` pairs whose key starts with ``prefix``."""
        ...

    def keys(self, prefix: str = "") -> list[str]:
        """List keys starting with ``prefix``."""
        return [key for key, _ in self.items(prefix)]
