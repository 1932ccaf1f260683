# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SQL statement generation from column metadata.

Every builder is a pure function returning a ``Statement``: SQL text with
positional ``$n`` tokens plus the parameter list bound to them. Column names,
tokens and values of one clause are always taken from the same ``Columns``
instance, so they stay in the same order.

Column identifiers are double-quoted; table names are emitted verbatim since
they may carry a schema prefix.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, NamedTuple

from .column import Columns
from .exceptions import ArgumentCountError, MappingError

if TYPE_CHECKING:
    from collections.abc import Sequence


class Statement(NamedTuple):
    sql: str
    params: list[Any]


def _sql_name(name: str) -> str:
    """Quote a column identifier (handles reserved words like 'user')."""
    return '"' + name.replace('"', '""') + '"'


def _column_list(cols: Columns) -> str:
    return ", ".join(_sql_name(name) for name in cols.names())


def _conditions(cols: Columns, start: int = 1) -> str:
    """``a = $1 AND b = $2`` over the given columns."""
    return " AND ".join(
        f"{_sql_name(name)} = {token}"
        for name, token in zip(cols.names(), cols.tokens(start), strict=True)
    )


def _assignments(cols: Columns, start: int = 1) -> str:
    """``a = $1, b = $2`` over the given columns."""
    return ", ".join(
        f"{_sql_name(name)} = {token}"
        for name, token in zip(cols.names(), cols.tokens(start), strict=True)
    )


def _require_primary_key(table: str, columns: Columns) -> Columns:
    pks = columns.primary_key()
    if len(pks) == 0:
        raise MappingError(f"invalid type for table '{table}'; no primary keys")
    return pks


def _returning(columns: Columns) -> str:
    serials = columns.serial()
    if len(serials) == 0:
        return ""
    return f" RETURNING {_sql_name(serials.first().name)}"


def select_by_key(table: str, columns: Columns, key_values: Sequence[Any]) -> Statement:
    """SELECT one row by primary key; key values follow primary key order."""
    pks = _require_primary_key(table, columns)
    if len(key_values) != len(pks):
        raise ArgumentCountError(
            f"table '{table}' has {len(pks)} primary key column(s), "
            f"got {len(key_values)} key value(s)"
        )
    read_cols = columns.not_read_only()
    sql = f"SELECT {_column_list(read_cols)} FROM {table} WHERE {_conditions(pks)}"
    return Statement(sql, list(key_values))


def select_all(table: str, columns: Columns) -> Statement:
    return Statement(f"SELECT {_column_list(columns.not_read_only())} FROM {table}", [])


def _insert_sql(table: str, write_cols: Columns) -> str:
    if len(write_cols) == 0:
        return f"INSERT INTO {table} DEFAULT VALUES"
    tokens = ", ".join(write_cols.tokens())
    return f"INSERT INTO {table} ({_column_list(write_cols)}) VALUES ({tokens})"


def insert(table: str, columns: Columns, obj: Any) -> Statement:
    """INSERT the insertable columns, returning the first serial column if any."""
    write_cols = columns.insert_columns()
    sql = _insert_sql(table, write_cols) + _returning(columns)
    return Statement(sql, write_cols.values_of(obj))


def update(table: str, columns: Columns, obj: Any) -> Statement | None:
    """UPDATE the assigned updatable columns of the row keyed by obj's primary key.

    Returns None when obj has no assigned column to write.
    """
    pks = _require_primary_key(table, columns)
    set_cols = columns.update_columns().assigned(obj)
    if len(set_cols) == 0:
        return None
    sql = (
        f"UPDATE {table} SET {_assignments(set_cols)} "
        f"WHERE {_conditions(pks, start=len(set_cols) + 1)}"
    )
    return Statement(sql, set_cols.values_of(obj) + pks.values_of(obj))


def upsert(table: str, columns: Columns, obj: Any) -> Statement:
    """Single-statement insert-or-update keyed on the primary key.

    Serial primary key columns already carrying a value are written too, so
    a record loaded from the table conflicts with its own row.

    On PostgreSQL an explicit serial value does not advance the column's
    sequence: upserting ``id=1`` into an empty table leaves the sequence at 1,
    so the next ``create()`` draws that id again and fails with a unique
    violation. Write explicit serial values only for rows that already exist.
    """
    pks = _require_primary_key(table, columns)
    insert_cols = columns.insert_columns()
    write_cols = Columns(
        col
        for col in columns
        if col.name in insert_cols
        or (col.primary_key and col.serial and col.get(obj) is not None)
    )
    set_cols = columns.update_columns().assigned(obj)
    if len(set_cols) == 0:
        action = "DO NOTHING"
    else:
        action = "DO UPDATE SET " + ", ".join(
            f"{_sql_name(name)} = EXCLUDED.{_sql_name(name)}" for name in set_cols.names()
        )
    sql = (
        f"{_insert_sql(table, write_cols)} ON CONFLICT ({_column_list(pks)}) {action}"
        f"{_returning(columns)}"
    )
    return Statement(sql, write_cols.values_of(obj))


def delete(table: str, columns: Columns, obj: Any) -> Statement:
    """DELETE the row matching all of obj's primary key values."""
    pks = _require_primary_key(table, columns)
    return Statement(f"DELETE FROM {table} WHERE {_conditions(pks)}", pks.values_of(obj))


def truncate(table: str, columns: Columns, dialect: str = "postgresql") -> Statement:
    """Remove every row, restarting identity numbering when a serial exists.

    SQLite has no TRUNCATE: an ``INTEGER PRIMARY KEY`` rowid restarts at 1
    on its own once the table is empty.
    """
    if dialect == "sqlite":
        return Statement(f"DELETE FROM {table}", [])
    sql = f"TRUNCATE {table}"
    if len(columns.serial()) > 0:
        sql += " RESTART IDENTITY"
    return Statement(sql, [])


__all__ = [
    "Statement",
    "select_by_key",
    "select_all",
    "insert",
    "update",
    "upsert",
    "delete",
    "truncate",
]
