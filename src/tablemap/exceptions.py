# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised by tablemap.

Driver failures (``psycopg.Error``, ``sqlite3.Error``) are never wrapped:
they reach the caller exactly as the driver raised them.
"""


class TableMapError(Exception):
    """Base class for all tablemap errors."""


class MappingError(TableMapError):
    """Record type metadata does not allow the requested operation."""


class UnmappedTypeError(MappingError):
    """Record type was never registered."""


class ArgumentCountError(TableMapError, ValueError):
    """Number of key values does not match the primary key columns."""


class MixedTypeError(TableMapError):
    """A batch operation received records of different types."""


class TransactionError(TableMapError):
    """Invalid transaction state transition."""


class InvocationClosedError(TableMapError):
    """Invocation used after close()."""


__all__ = [
    "TableMapError",
    "MappingError",
    "UnmappedTypeError",
    "ArgumentCountError",
    "MixedTypeError",
    "TransactionError",
    "InvocationClosedError",
]
