# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Key-value storage backends."""

from fxcache.storage.base import KeyValueStore
from fxcache.storage.memory import InMemoryKeyValueStore
from fxcache.storage.sql import SqlKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "SqlKeyValueStore",
]
