# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Registry associating record types with their table and columns.

Registration is explicit and happens once per type, typically at import
time::

    registry.add(Invoice)                    # Record subclass with configure()
    registry.register(Point, "points", cols) # any class, prebuilt Columns

Lookups accept the class, an instance of it, or the class name.
"""

from __future__ import annotations

from typing import Any, TypeVar

from .column import Columns
from .exceptions import UnmappedTypeError

T = TypeVar("T", bound=type)


class MetadataRegistry:
    """Maps record types to (table name, Columns)."""

    def __init__(self) -> None:
        self._tables: dict[type, tuple[str, Columns]] = {}
        self._by_name: dict[str, type] = {}

    def register(self, record_type: type, table_name: str, columns: Columns) -> None:
        """Register a record type with its table name and columns."""
        if not table_name:
            raise ValueError(f"{record_type.__name__} must define 'table_name'")
        self._tables[record_type] = (table_name, columns)
        self._by_name[record_type.__name__] = record_type

    def add(self, record_type: T) -> T:
        """Register a type declaring ``table_name`` and ``configure()``.

        Returns the type itself so it can be used as a class decorator.
        """
        table_name = getattr(record_type, "table_name", None)
        if not table_name:
            raise ValueError(f"{record_type.__name__} must define 'table_name'")
        columns = Columns()
        record_type.configure(columns)
        self.register(record_type, table_name, columns)
        return record_type

    def _resolve(self, record_type: Any) -> tuple[str, Columns]:
        if isinstance(record_type, str):
            key = self._by_name.get(record_type)
            label = record_type
        elif isinstance(record_type, type):
            key = record_type
            label = record_type.__name__
        else:
            key = type(record_type)
            label = key.__name__
        entry = self._tables.get(key) if key is not None else None
        if entry is None:
            raise UnmappedTypeError(f"Type '{label}' is not registered")
        return entry

    def table_name_for(self, record_type: Any) -> str:
        return self._resolve(record_type)[0]

    def columns_for(self, record_type: Any) -> Columns:
        return self._resolve(record_type)[1]

    def is_registered(self, record_type: Any) -> bool:
        try:
            self._resolve(record_type)
        except UnmappedTypeError:
            return False
        return True

    def clear(self) -> None:
        self._tables.clear()
        self._by_name.clear()


registry = MetadataRegistry()


def table_name_for(record_type: Any) -> str:
    """Table name of a type in the default registry."""
    return registry.table_name_for(record_type)


def columns_for(record_type: Any) -> Columns:
    """Columns of a type in the default registry."""
    return registry.columns_for(record_type)


__all__ = ["MetadataRegistry", "registry", "table_name_for", "columns_for"]
