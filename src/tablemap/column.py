# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Column metadata for mapped record types.

A ``Columns`` instance is the ordered inventory of ``Column`` descriptors of
one record type. Registration order is significant: it is the order in which
column names, positional tokens and values are emitted for a statement.

Usage:
    columns = Columns()
    columns.column("id", primary_key=True, serial=True)
    columns.column("name")

    columns.insert_columns().names()   # ['name']
    columns.primary_key().tokens()     # ['$1']
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator


class Column:
    """Metadata and accessors for one column/attribute pairing.

    Attributes:
        name: SQL column name (read-only).
        attr: Attribute holding the value on record instances.
        primary_key: Column is part of the primary key.
        serial: Value is generated by the database on insert.
        read_only: Column is never written by insert or update.
    """

    __slots__ = ("_name", "attr", "primary_key", "serial", "read_only")

    def __init__(
        self,
        name: str,
        *,
        attr: str | None = None,
        primary_key: bool = False,
        serial: bool = False,
        read_only: bool = False,
    ) -> None:
        self._name = name
        self.attr = attr or name
        self.primary_key = primary_key
        self.serial = serial
        self.read_only = read_only

    @property
    def name(self) -> str:
        return self._name

    def get(self, instance: Any) -> Any:
        """Read the column value from a record instance (None if unassigned)."""
        if not self.attr:
            return None
        return getattr(instance, self.attr, None)

    def set(self, instance: Any, value: Any) -> None:
        """Write the column value onto a record instance."""
        if not self.attr:
            return
        setattr(instance, self.attr, value)

    def is_set(self, instance: Any) -> bool:
        """True if the attribute has been assigned on the instance."""
        return bool(self.attr) and hasattr(instance, self.attr)

    def __repr__(self) -> str:
        flags = [
            flag
            for flag, on in (
                ("primary_key", self.primary_key),
                ("serial", self.serial),
                ("read_only", self.read_only),
            )
            if on
        ]
        suffix = f" [{', '.join(flags)}]" if flags else ""
        return f"<Column {self._name!r}{suffix}>"


class Columns:
    """Ordered collection of Column descriptors for one record type.

    Filters (``primary_key()``, ``not_serial()``, ...) are pure: each returns
    a new Columns holding the matching descriptors in their original order.
    """

    def __init__(self, columns: Iterable[Column] | None = None) -> None:
        self.all: list[Column] = []
        self.lookup: dict[str, Column] = {}
        if columns is not None:
            self.add_many(columns)

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add(self, col: Column) -> Columns:
        """Append a column. Raises ValueError on a duplicate name."""
        if col.name in self.lookup:
            raise ValueError(f"Column '{col.name}' already defined")
        self.all.append(col)
        self.lookup[col.name] = col
        return self

    def add_many(self, cols: Iterable[Column]) -> Columns:
        for col in cols:
            self.add(col)
        return self

    def column(self, name: str, **flags: Any) -> Column:
        """Declare a column and return it (used inside ``configure()``)."""
        col = Column(name, **flags)
        self.add(col)
        return col

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.all)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.all)

    def __contains__(self, name: object) -> bool:
        return name in self.lookup

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Columns):
            return NotImplemented
        return self.all == other.all

    def __repr__(self) -> str:
        return f"<Columns {self.names()!r}>"

    def get(self, name: str) -> Column | None:
        return self.lookup.get(name)

    def values(self) -> Iterator[Column]:
        return iter(self.all)

    def first(self) -> Column:
        """First column, or a no-op descriptor when the set is empty."""
        if not self.all:
            return Column("")
        return self.all[0]

    # -------------------------------------------------------------------------
    # Statement parts
    # -------------------------------------------------------------------------

    def names(self) -> list[str]:
        return [col.name for col in self.all]

    def values_of(self, instance: Any) -> list[Any]:
        """Column values read from a record instance, in column order."""
        return [col.get(instance) for col in self.all]

    def tokens(self, start: int = 1) -> list[str]:
        """Positional placeholders ($1, $2, ...) matching column order."""
        return [f"${i}" for i in range(start, start + len(self.all))]

    def assigned(self, instance: Any) -> Columns:
        """Columns whose attribute is assigned on the instance."""
        return self._filter(lambda col: col.is_set(instance))

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    def _filter(self, predicate: Callable[[Column], bool]) -> Columns:
        filtered = Columns()
        for col in self.all:
            if predicate(col):
                filtered.all.append(col)
                filtered.lookup[col.name] = col
        return filtered

    def primary_key(self) -> Columns:
        return self._filter(lambda col: col.primary_key)

    def not_primary_key(self) -> Columns:
        return self._filter(lambda col: not col.primary_key)

    def serial(self) -> Columns:
        return self._filter(lambda col: col.serial)

    def not_serial(self) -> Columns:
        return self._filter(lambda col: not col.serial)

    def read_only(self) -> Columns:
        return self._filter(lambda col: col.read_only)

    def not_read_only(self) -> Columns:
        return self._filter(lambda col: not col.read_only)

    def insert_columns(self) -> Columns:
        """Columns written by an insert."""
        return self.not_read_only().not_serial()

    def update_columns(self) -> Columns:
        """Columns written by an update (primary key values are never re-assigned)."""
        return self.not_read_only().not_serial().not_primary_key()


__all__ = ["Column", "Columns"]
