"""SQLite adapter using stdlib sqlite3.

sqlite3 reports no column types in ``cursor.description``, so each column's
type is inferred from its non-null values. Columns whose values are all
NULL are reported as VARCHAR. Pass ``column_types`` to declare types
explicitly, e.g. BOOLEAN for 0/1 flags or TIMESTAMP for ISO text.
"""

from __future__ import annotations

import datetime
import sqlite3
from collections.abc import Mapping, Sequence
from typing import Any

from row_bind.core.connection import ConnectionConfig
from row_bind.core.enums import SqlType
from row_bind.core.exceptions import PoolError
from row_bind.core.result import ColumnDescriptor, RowsResult

# Checked in order: bool before int, datetime before date
_VALUE_TYPES: list[tuple[type, SqlType]] = [
    (bool, SqlType.BOOLEAN),
    (int, SqlType.BIGINT),
    (float, SqlType.DOUBLE),
    (str, SqlType.VARCHAR),
    (bytes, SqlType.BLOB),
    (datetime.datetime, SqlType.TIMESTAMP),
    (datetime.date, SqlType.DATE),
    (datetime.time, SqlType.TIME),
]

# Mixed value types that widen to a single column type
_WIDENINGS: dict[frozenset[SqlType], SqlType] = {
    frozenset({SqlType.BIGINT, SqlType.DOUBLE}): SqlType.DOUBLE,
    frozenset({SqlType.DATE, SqlType.TIMESTAMP}): SqlType.TIMESTAMP,
}


def _value_type(value: Any) -> SqlType:
    for python_type, sql_type in _VALUE_TYPES:
        if isinstance(value, python_type):
            return sql_type
    return SqlType.OTHER


def infer_type_code(rows: Sequence[Sequence[Any]], index: int) -> int:
    """SQL type code implied by the non-null values of a column.

    SQLite columns are dynamically typed, so every value is inspected.
    Integers mixed with reals widen to DOUBLE and dates mixed with
    timestamps widen to TIMESTAMP. Any other mix is reported as OTHER.
    """
    seen = {_value_type(row[index]) for row in rows if row[index] is not None}
    if not seen:
        return SqlType.VARCHAR
    if len(seen) == 1:
        return seen.pop()
    return _WIDENINGS.get(frozenset(seen), SqlType.OTHER)


class SqliteSyncAdapter:
    """Synchronous SQLite adapter using stdlib sqlite3."""

    @property
    def paramstyle(self) -> str:
        return "named"

    def create_pool(self, config: ConnectionConfig) -> list[sqlite3.Connection]:
        """Create a 'pool' (list of connections) for SQLite."""
        pool: list[sqlite3.Connection] = []
        for _ in range(config.pool_size):
            conn = sqlite3.connect(config.database, **config.extra)
            conn.execute("PRAGMA journal_mode=WAL")
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[sqlite3.Connection]) -> sqlite3.Connection:
        """Acquire a connection from the pool."""
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(
        self, connection: sqlite3.Connection, pool: list[sqlite3.Connection]
    ) -> None:
        """Release a connection back to the pool."""
        pool.append(connection)

    def close_pool(self, pool: list[sqlite3.Connection]) -> None:
        """Close all connections in the pool."""
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | tuple[Any, ...] | None = None,
    ) -> sqlite3.Cursor:
        """Execute SQL and return a cursor."""
        return connection.execute(sql, params if params is not None else ())

    def to_result(
        self,
        cursor: sqlite3.Cursor,
        column_types: Mapping[str, int] | None = None,
    ) -> RowsResult:
        """Fetch all rows and describe columns from their values."""
        try:
            if cursor.description is None:
                return RowsResult([], [])
            names = [desc[0] for desc in cursor.description]
            rows = [tuple(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

        overrides = column_types or {}
        columns = [
            ColumnDescriptor(name, overrides.get(name, infer_type_code(rows, i)))
            for i, name in enumerate(names)
        ]
        return RowsResult(columns, rows)
