# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Base classes for async database backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence


@dataclass
class ResultSet:
    """Rows returned by the driver for one statement.

    Attributes:
        rows: Result rows as column-name → value dicts.
        rowcount: Rows returned (queries) or affected (DML).
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0


class DbConnection(ABC):
    """One connection checked out of an adapter.

    All queries use positional ``$1, $2, ...`` tokens; each backend converts
    them to its driver's placeholder style.
    """

    dialect: str

    @abstractmethod
    async def execute(self, query: str, params: Sequence[Any] = ()) -> ResultSet:
        """Execute a statement, return its rows and row count."""
        ...

    @abstractmethod
    async def release(self) -> None:
        """Return the connection to its adapter."""
        ...

    async def begin(self) -> None:
        await self.execute("BEGIN")

    async def commit(self) -> None:
        await self.execute("COMMIT")

    async def rollback(self) -> None:
        await self.execute("ROLLBACK")


class DbAdapter(ABC):
    """Abstract base class for async database adapters (connection sources)."""

    dialect: str

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection source (pool, file)."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Close the connection source."""
        ...

    @abstractmethod
    async def acquire(self) -> DbConnection:
        """Check out a connection; the caller must release() it."""
        ...
