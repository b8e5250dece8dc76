"""Database adapter protocol.

Every adapter module MUST implement this protocol so the Engine can stay
driver-agnostic.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from row_bind.core.connection import ConnectionConfig
from row_bind.core.result import TabularResult


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any:
        """Create a connection pool."""
        ...

    def acquire_connection(self, pool: Any) -> Any:
        """Acquire a connection from the pool."""
        ...

    def release_connection(self, connection: Any, pool: Any) -> None:
        """Release a connection back to the pool."""
        ...

    def close_pool(self, pool: Any) -> None:
        """Close the pool and release all connections."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | tuple[Any, ...] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor-like object."""
        ...

    def to_result(
        self,
        cursor: Any,
        column_types: Mapping[str, int] | None = None,
    ) -> TabularResult:
        """Wrap an executed cursor as a TabularResult.

        ``column_types`` overrides the SQL type code reported for the named
        columns.
        """
        ...
