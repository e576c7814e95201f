"""
infrastructure.persistence.connection - Async SQLite connection manager.

Owns the single live aiosqlite connection of the process. Repositories
receive this object explicitly; nothing reaches for a global handle.
acquire() yields the connection inside a transaction scope that commits
on success and rolls back on exception.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiosqlite

from domain.exceptions import DomainError, NotInitializedError

logger = logging.getLogger(__name__)


class AsyncSQLiteConnection:
    """Async SQLite connection provider with auto-commit/rollback."""

    def __init__(self, db_path: str, foreign_keys: bool = True):
        self._db_path = db_path
        self._foreign_keys = foreign_keys
        self._conn: Optional[aiosqlite.Connection] = None
        # One transaction scope at a time on the shared connection.
        self._lock = asyncio.Lock()

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def handle(self) -> aiosqlite.Connection:
        """The live connection. Raises NotInitializedError when not open."""
        if self._conn is None:
            raise NotInitializedError(
                "Database is not initialized. Call initialize() first."
            )
        return self._conn

    async def open(self) -> None:
        """Open the connection with FK support. No-op when already open."""
        if self._conn is not None:
            return
        conn = await aiosqlite.connect(self._db_path)
        try:
            conn.row_factory = aiosqlite.Row
            if self._foreign_keys:
                await conn.execute("PRAGMA foreign_keys = ON")
        except Exception:
            await conn.close()
            raise
        self._conn = conn
        logger.info("Opened SQLite database at %s", self._db_path)

    async def close(self) -> None:
        """Close the connection. No-op when already closed."""
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        await conn.close()
        logger.info("Closed SQLite database at %s", self._db_path)

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield the live connection inside a transaction scope.

        Commits on success, rolls back on exception.
        """
        async with self._lock:
            conn = self.handle
            try:
                yield conn
                await conn.commit()
            except DomainError:
                await conn.rollback()
                raise
            except Exception:
                await conn.rollback()
                logger.exception("Database operation failed, transaction rolled back.")
                raise
