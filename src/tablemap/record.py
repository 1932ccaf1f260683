# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base class for mapped record types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .column import Columns


class Record:
    """Base class for record types mapped to a table.

    Subclasses set ``table_name`` and declare their columns in the
    ``configure()`` hook, then get registered once with
    ``MetadataRegistry.add``::

        @registry.add
        class Invoice(Record):
            table_name = "invoices"

            @classmethod
            def configure(cls, columns):
                columns.column("id", primary_key=True, serial=True)
                columns.column("customer")
                columns.column("total")

    Attributes not passed to the constructor stay unassigned, so partial
    updates only touch what the caller actually set.
    """

    table_name: str

    def __init__(self, **values: Any) -> None:
        for attr, value in values.items():
            setattr(self, attr, value)

    @classmethod
    def configure(cls, columns: Columns) -> None:
        """Override to define columns. Called once at registration."""
        pass

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


__all__ = ["Record"]
