# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Record types and a recording connection shared by the test suite."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from tablemap import Columns, MetadataRegistry, Record
from tablemap.adapters.base import DbConnection, ResultSet

models = MetadataRegistry()


# ============================================
# RECORD TYPES
# ============================================


@models.add
class Widget(Record):
    """Serial primary key plus plain columns."""

    table_name = "test_invocation"

    @classmethod
    def configure(cls, columns: Columns) -> None:
        columns.column("id", primary_key=True, serial=True)
        columns.column("name")
        columns.column("monies")


@models.add
class NamedWidget(Record):
    """Natural primary key with a non-key serial column."""

    table_name = "test_invocation_pk"

    @classmethod
    def configure(cls, columns: Columns) -> None:
        columns.column("id", serial=True)
        columns.column("name", primary_key=True)
        columns.column("monies")
        columns.column("test")


@models.add
class Gadget(Record):
    table_name = "test_different"

    @classmethod
    def configure(cls, columns: Columns) -> None:
        columns.column("id", primary_key=True, serial=True)
        columns.column("name")


@models.add
class Pair(Record):
    """Composite primary key (a, b)."""

    table_name = "pairs"

    @classmethod
    def configure(cls, columns: Columns) -> None:
        columns.column("a", primary_key=True)
        columns.column("b", primary_key=True)
        columns.column("label")


@models.add
class Reading(Record):
    """Serial key, a renamed attribute and a read-only computed column."""

    table_name = "readings"

    @classmethod
    def configure(cls, columns: Columns) -> None:
        columns.column("id", primary_key=True, serial=True)
        columns.column("sensor_name", attr="sensor")
        columns.column("value")
        columns.column("value_doubled", read_only=True)


@models.add
class LogLine(Record):
    """No primary key."""

    table_name = "log_lines"

    @classmethod
    def configure(cls, columns: Columns) -> None:
        columns.column("message")


class Unmapped(Record):
    table_name = "unmapped"


# ============================================
# SCHEMAS
# ============================================

SQLITE_SCHEMA = {
    "test_invocation": (
        "CREATE TABLE test_invocation ("
        "id INTEGER PRIMARY KEY, name VARCHAR(255), monies INTEGER)"
    ),
    "test_different": "CREATE TABLE test_different (id INTEGER PRIMARY KEY, name VARCHAR(255))",
    "pairs": (
        "CREATE TABLE pairs (a INTEGER NOT NULL, b INTEGER NOT NULL, label TEXT, "
        "PRIMARY KEY (a, b))"
    ),
    "readings": (
        "CREATE TABLE readings (id INTEGER PRIMARY KEY, sensor_name TEXT, value INTEGER)"
    ),
}

POSTGRES_SCHEMA = {
    "test_invocation": (
        "CREATE TABLE test_invocation ("
        "id SERIAL PRIMARY KEY, name VARCHAR(255), monies INT)"
    ),
    "test_invocation_pk": (
        "CREATE TABLE test_invocation_pk ("
        "id SERIAL NOT NULL, name VARCHAR(255) PRIMARY KEY, monies INT, test VARCHAR(32))"
    ),
    "pairs": (
        "CREATE TABLE pairs (a INT NOT NULL, b INT NOT NULL, label TEXT, "
        "PRIMARY KEY (a, b))"
    ),
}


# ============================================
# RECORDING CONNECTION
# ============================================


class RecordingConnection(DbConnection):
    """In-memory DbConnection that records every statement.

    ``responses`` are returned in order, one per execute(); once exhausted
    an empty ResultSet is returned.
    """

    def __init__(self, responses: Sequence[ResultSet] = (), dialect: str = "postgresql"):
        self.dialect = dialect
        self.responses = list(responses)
        self.calls: list[tuple[str, list[Any]]] = []
        self.released = False

    async def execute(self, query: str, params: Sequence[Any] = ()) -> ResultSet:
        self.calls.append((query, list(params)))
        if self.responses:
            return self.responses.pop(0)
        return ResultSet()

    async def release(self) -> None:
        self.released = True

    @property
    def statements(self) -> list[str]:
        return [sql for sql, _ in self.calls]


def make_widgets(n: int) -> list[Widget]:
    return [Widget(name=f"item{i + 1}", monies=i * 2) for i in range(n)]
