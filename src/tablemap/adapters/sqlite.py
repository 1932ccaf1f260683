# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQLite async adapter using aiosqlite."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

import aiosqlite

from ..logger import get_logger
from .base import DbAdapter, DbConnection, ResultSet

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger("tablemap.adapters.sqlite")


def convert_placeholders(query: str) -> str:
    """Convert $n tokens to SQLite numbered ?n parameters."""
    return re.sub(r"\$(\d+)", r"?\1", query)


class SqliteConnection(DbConnection):
    """One aiosqlite connection, opened per acquire().

    The connection runs with ``isolation_level=None`` so that only explicit
    BEGIN/COMMIT/ROLLBACK statements open and close transactions.
    """

    dialect = "sqlite"

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db: aiosqlite.Connection | None = db

    async def execute(self, query: str, params: Sequence[Any] = ()) -> ResultSet:
        sql = convert_placeholders(query)
        logger.debug("SQL: %s params=%r", sql, params)
        async with self._db.execute(sql, tuple(params)) as cursor:
            if cursor.description is None:
                return ResultSet(rows=[], rowcount=cursor.rowcount)
            rows = await cursor.fetchall()
            cols = [c[0] for c in cursor.description]
            return ResultSet(
                rows=[dict(zip(cols, row, strict=True)) for row in rows],
                rowcount=len(rows),
            )

    async def release(self) -> None:
        if self._db is None:
            return
        db, self._db = self._db, None
        await db.close()
        logger.debug("Connection closed")


class SqliteAdapter(DbAdapter):
    """SQLite async adapter. Opens one connection per acquire()."""

    dialect = "sqlite"

    def __init__(self, db_path: str):
        """Initialize SQLite adapter.

        Args:
            db_path: Path to SQLite file, or ":memory:" for in-memory DB.
                Each in-memory connection is a separate database.
        """
        self.db_path = db_path or ":memory:"

    async def connect(self) -> None:
        """SQLite connections are opened per-acquire, this is a no-op."""
        pass

    async def close(self) -> None:
        """SQLite connections are closed on release, this is a no-op."""
        pass

    async def acquire(self) -> SqliteConnection:
        db = await aiosqlite.connect(self.db_path, isolation_level=None)
        logger.debug("Connection opened on %s", self.db_path)
        return SqliteConnection(db)
