# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Invocation: typed CRUD and raw SQL over one checked-out connection.

An Invocation is one logical unit of work. Every statement it issues runs on
the same connection, so a transaction opened with ``begin()`` covers all
following ``query``/``execute`` calls and CRUD operations until ``commit()``
or ``rollback()``.

Usage:
    async with await db.invoke() as inv:
        await inv.begin()
        invoice = Invoice(customer="acme", total=10)
        await inv.create(invoice)          # invoice.id now set
        await inv.commit()

Errors:
    Metadata problems (no primary key, wrong key count, mixed batch types)
    raise before anything is sent. Driver errors propagate unchanged; an
    Invocation never retries and never rolls back on its own, except inside
    the opt-in ``transaction()`` block.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from . import statements
from .exceptions import InvocationClosedError, MixedTypeError, TransactionError
from .registry import registry as default_registry

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Iterator

    from .adapters.base import DbConnection, ResultSet
    from .column import Columns
    from .registry import MetadataRegistry

T = TypeVar("T")


class QueryResult:
    """Result of ``Invocation.query``.

    Attributes:
        results: The driver ResultSet.
    """

    def __init__(self, results: ResultSet) -> None:
        self.results = results

    @property
    def rows(self) -> list[dict[str, Any]]:
        return self.results.rows

    @property
    def rowcount(self) -> int:
        return self.results.rowcount

    def first(self) -> dict[str, Any] | None:
        return self.results.rows[0] if self.results.rows else None

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.results.rows)

    def __len__(self) -> int:
        return len(self.results.rows)


class Invocation:
    """Owns one connection for its lifetime.

    Not safe for concurrent use: tasks running at the same time must each
    use their own Invocation.
    """

    def __init__(
        self, connection: DbConnection, registry: MetadataRegistry | None = None
    ) -> None:
        self.connection: DbConnection | None = connection
        self.registry = registry or default_registry
        self._in_transaction = False

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    @property
    def closed(self) -> bool:
        return self.connection is None

    def _conn(self) -> DbConnection:
        if self.connection is None:
            raise InvocationClosedError("Invocation is closed")
        return self.connection

    async def _run(self, statement: statements.Statement) -> ResultSet:
        return await self._conn().execute(statement.sql, statement.params)

    def _metadata(self, record_type: Any) -> tuple[str, Columns]:
        return (
            self.registry.table_name_for(record_type),
            self.registry.columns_for(record_type),
        )

    # -------------------------------------------------------------------------
    # Raw SQL
    # -------------------------------------------------------------------------

    async def execute(self, sql: str, *params: Any) -> None:
        """Run a statement, discarding any result."""
        await self._conn().execute(sql, params)

    exec = execute

    async def query(self, sql: str, *params: Any) -> QueryResult:
        """Run a statement and return its rows."""
        return QueryResult(await self._conn().execute(sql, params))

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    async def begin(self) -> None:
        conn = self._conn()
        if self._in_transaction:
            raise TransactionError("A transaction is already in progress")
        await conn.begin()
        self._in_transaction = True

    async def commit(self) -> None:
        """Commit the open transaction; no-op when none is open."""
        conn = self._conn()
        if not self._in_transaction:
            return
        # The driver ends the transaction even when COMMIT fails.
        self._in_transaction = False
        await conn.commit()

    async def rollback(self) -> None:
        """Roll back the open transaction; no-op when none is open."""
        conn = self._conn()
        if not self._in_transaction:
            return
        self._in_transaction = False
        await conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Invocation]:
        """Run a block in a transaction: COMMIT on success, ROLLBACK on error."""
        await self.begin()
        try:
            yield self
        except BaseException:
            await self.rollback()
            raise
        await self.commit()

    async def close(self) -> None:
        """Release the connection. The Invocation cannot be used afterwards."""
        if self.connection is None:
            return
        conn, self.connection = self.connection, None
        self._in_transaction = False
        await conn.release()

    async def __aenter__(self) -> Invocation:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Typed operations
    # -------------------------------------------------------------------------

    def _bind(self, record_type: type[T], columns: Columns, row: dict[str, Any]) -> T:
        instance = record_type()
        for col in columns.not_read_only():
            col.set(instance, row.get(col.name))
        return instance

    async def get(self, record_type: type[T], *key_values: Any) -> T | None:
        """Fetch one record by primary key; None when no row matches."""
        table, columns = self._metadata(record_type)
        res = await self._run(statements.select_by_key(table, columns, key_values))
        if not res.rows:
            return None
        return self._bind(record_type, columns, res.rows[0])

    async def get_all(self, record_type: type[T]) -> list[T]:
        """Fetch every row of the type's table, in driver order."""
        table, columns = self._metadata(record_type)
        res = await self._run(statements.select_all(table, columns))
        return [self._bind(record_type, columns, row) for row in res.rows]

    def _assign_serial(self, columns: Columns, obj: Any, res: ResultSet) -> None:
        serials = columns.serial()
        if len(serials) == 0 or not res.rows:
            return
        serial = serials.first()
        serial.set(obj, res.rows[0][serial.name])

    async def create(self, obj: Any) -> None:
        """Insert obj; a generated serial value is written back onto it."""
        table, columns = self._metadata(obj)
        res = await self._run(statements.insert(table, columns, obj))
        self._assign_serial(columns, obj, res)

    async def create_many(self, objs: Iterable[Any]) -> None:
        """Insert several records of one type, in order."""
        objs = list(objs)
        if not objs:
            return
        record_type = type(objs[0])
        if any(type(obj) is not record_type for obj in objs):
            raise MixedTypeError("create_many requires the objects to all be of the same type")
        table, columns = self._metadata(record_type)
        for obj in objs:
            res = await self._run(statements.insert(table, columns, obj))
            self._assign_serial(columns, obj, res)

    async def update(self, obj: Any) -> None:
        """Update the row keyed by obj's primary key with obj's assigned columns."""
        table, columns = self._metadata(obj)
        statement = statements.update(table, columns, obj)
        if statement is None:
            return
        await self._run(statement)

    async def upsert(self, obj: Any) -> None:
        """Insert obj, or update its row when the primary key already exists."""
        table, columns = self._metadata(obj)
        res = await self._run(statements.upsert(table, columns, obj))
        self._assign_serial(columns, obj, res)

    async def delete(self, obj: Any) -> None:
        """Delete the row matching obj's primary key values."""
        table, columns = self._metadata(obj)
        await self._run(statements.delete(table, columns, obj))

    async def truncate(self, record_type: type) -> None:
        """Delete all rows; identity numbering restarts for serial columns."""
        conn = self._conn()
        table, columns = self._metadata(record_type)
        await self._run(statements.truncate(table, columns, conn.dialect))


__all__ = ["Invocation", "QueryResult"]
