# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""SQLAlchemy-backed key-value store."""

import logging

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from fxcache.exceptions import StorageError
from fxcache.models.kv_entry import KeyValueEntry
from fxcache.storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class SqlKeyValueStore(KeyValueStore):
    """Key-value store persisted in the ``kv_entries`` table.

    Every operation runs in its own short-lived session, so the store can be
    shared by concurrent callers. Values survive process restarts.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        """Initialize the store.

        Args:
            session_factory: Factory producing sessions bound to the database.
        """
        self._session_factory = session_factory

    def get(self, key: str) -> str | None:
        try:
            with self._session_factory() as session:
                entry = session.get(KeyValueEntry, key)
                return entry.value if entry is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to read key {key}: {e}")
            raise StorageError(f"Failed to read key {key}: {e}") from e

    def put(self, key: str, value: str) -> None:
        try:
            with self._session_factory() as session:
                session.merge(KeyValueEntry(key=key, value=value))
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to write key {key}: {e}")
            raise StorageError(f"Failed to write key {key}: {e}") from e

    def delete_prefix(self, prefix: str) -> int:
        try:
            with self._session_factory() as session:
                result = session.execute(
                    delete(KeyValueEntry).where(
                        KeyValueEntry.key.startswith(prefix, autoescape=True)
                    )
                )
                session.commit()
                return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete prefix {prefix}: {e}")
            raise StorageError(f"Failed to delete prefix {prefix}: {e}") from e

    def items(self, prefix: str = "") -> list[tuple[str, str]]:
        try:
            with self._session_factory() as session:
                rows = session.execute(
                    select(KeyValueEntry.key, KeyValueEntry.value)
                    .where(KeyValueEntry.key.startswith(prefix, autoescape=True))
                    .order_by(KeyValueEntry.key)
                ).all()
                return [(row.key, row.value) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list prefix {prefix}: {e}")
            raise StorageError(f"Failed to list prefix {prefix}: {e}") from e
