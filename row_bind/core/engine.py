"""Query execution engine.

The Engine binds parameters, executes inline SQL through the adapter, and
either decodes the result with a RowDecoder or returns plain row dicts.
Named parameters use ``:name`` syntax regardless of driver; positional
parameters use the driver's own placeholder.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import closing
from typing import Any, TypeVar

from row_bind.core.connection import ConnectionConfig, ConnectionManager
from row_bind.core.exceptions import MultipleRowsError, ParameterBindingError
from row_bind.core.params import Params, normalize_params, prepare_params
from row_bind.core.result import TabularResult

T = TypeVar("T")


def _rows_to_dicts(result: TabularResult) -> list[dict[str, Any]]:
    """Read every row of ``result`` into a dict keyed by column name."""
    with closing(result):
        names = [column.name for column in result.columns]
        return [{name: row.get(i) for i, name in enumerate(names)} for row in result]


def _first_column(result: TabularResult) -> list[Any]:
    with closing(result):
        if not result.columns:
            return []
        return [row.get(0) for row in result]


class Engine:
    """Synchronous query execution engine."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._paramstyle = connection_manager.adapter.paramstyle

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Engine:
        """Create an Engine from a ConnectionConfig.

        Args:
            config: ConnectionConfig instance

        Returns:
            Engine instance
        """
        return cls(ConnectionManager(config))

    @property
    def connection_manager(self) -> ConnectionManager:
        return self._connection_manager

    def _prepare(self, sql: str, params: Any) -> tuple[str, Params]:
        prepared = prepare_params(params)
        if isinstance(prepared, dict):
            sql = normalize_params(sql, self._paramstyle)
        return sql, prepared

    def _execute(self, conn: Any, sql: str, params: Any) -> Any:
        prepared_sql, prepared = self._prepare(sql, params)
        try:
            return self._connection_manager.adapter.execute(conn, prepared_sql, prepared)
        except Exception as e:
            raise ParameterBindingError(sql, str(e)) from e

    def _query(
        self,
        conn: Any,
        sql: str,
        params: Any,
        column_types: Mapping[str, int] | None = None,
    ) -> TabularResult:
        cursor = self._execute(conn, sql, params)
        return self._connection_manager.adapter.to_result(cursor, column_types)

    def fetch_all(
        self,
        sql: str,
        params: Any = None,
        *,
        mapper: Any | None = None,
        column_types: Mapping[str, int] | None = None,
    ) -> list[Any]:
        """Fetch all rows, decoded by ``mapper`` or as dicts.

        Args:
            sql: SQL text.
            params: Dict of named parameters, or a sequence of positional ones.
            mapper: A RowDecoder; when omitted rows are returned as dicts.
            column_types: Per-column SQL type code overrides.
        """
        with self._connection_manager.get_connection() as conn:
            result = self._query(conn, sql, params, column_types)
            if mapper is not None:
                return list(mapper.decode(result))
            return _rows_to_dicts(result)

    def fetch_one(
        self,
        sql: str,
        params: Any = None,
        *,
        mapper: Any | None = None,
        column_types: Mapping[str, int] | None = None,
    ) -> Any:
        """Fetch a single row.

        Returns None if zero rows match.
        Raises MultipleRowsError if more than one row matches.
        """
        rows = self.fetch_all(sql, params, mapper=mapper, column_types=column_types)
        if len(rows) > 1:
            raise MultipleRowsError(sql, len(rows))
        return rows[0] if rows else None

    def fetch_scalar(self, sql: str, params: Any = None) -> Any:
        """Fetch a single scalar value (first column of the only row).

        Returns None if zero rows match.
        Raises MultipleRowsError if more than one row matches.
        """
        values = self.fetch_column(sql, params)
        if len(values) > 1:
            raise MultipleRowsError(sql, len(values))
        return values[0] if values else None

    def fetch_column(self, sql: str, params: Any = None) -> list[Any]:
        """Fetch the first column of every row."""
        with self._connection_manager.get_connection() as conn:
            return _first_column(self._query(conn, sql, params))

    def execute(self, sql: str, params: Any = None) -> int:
        """Execute a write query. Returns affected row count."""
        with self._connection_manager.get_connection() as conn:
            cursor = self._execute(conn, sql, params)
            try:
                conn.commit()
                return int(cursor.rowcount)
            finally:
                cursor.close()

    def close(self) -> None:
        """Close the underlying connection pool."""
        self._connection_manager.close_pool()
