"""PostgreSQL adapter using psycopg (v3+).

Column types come from the type OIDs psycopg reports in
``cursor.description``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from row_bind.core.connection import ConnectionConfig
from row_bind.core.enums import SqlType
from row_bind.core.exceptions import PoolError
from row_bind.core.result import ColumnDescriptor, CursorResult, RowsResult

_ARRAY_OIDS = frozenset(
    {
        1000,  # bool[]
        1005,  # int2[]
        1007,  # int4[]
        1016,  # int8[]
        1009,  # text[]
        1014,  # bpchar[]
        1015,  # varchar[]
        1021,  # float4[]
        1022,  # float8[]
        1231,  # numeric[]
        1182,  # date[]
        1183,  # time[]
        1115,  # timestamp[]
        1185,  # timestamptz[]
    }
)

_OID_TYPES: dict[int, SqlType] = {
    16: SqlType.BOOLEAN,
    21: SqlType.SMALLINT,
    23: SqlType.INTEGER,
    20: SqlType.BIGINT,
    19: SqlType.VARCHAR,  # name
    25: SqlType.LONGVARCHAR,  # text
    1042: SqlType.VARCHAR,  # bpchar
    1043: SqlType.VARCHAR,
    700: SqlType.REAL,
    701: SqlType.DOUBLE,
    1700: SqlType.NUMERIC,
    1083: SqlType.TIME,
    1266: SqlType.TIME_WITH_TIMEZONE,
    1114: SqlType.TIMESTAMP,
    1184: SqlType.TIMESTAMP_WITH_TIMEZONE,
    1082: SqlType.DATE,
    17: SqlType.BINARY,  # bytea
    **{oid: SqlType.ARRAY for oid in _ARRAY_OIDS},
}


def sql_type_for_oid(oid: int | None) -> int:
    """SQL type code for a PostgreSQL type OID; OTHER when unknown."""
    if oid is None:
        return SqlType.OTHER
    return _OID_TYPES.get(oid, SqlType.OTHER)


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    return " ".join(parts)


class PostgresqlSyncAdapter:
    """Synchronous PostgreSQL adapter using psycopg (v3+)."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        import psycopg

        conninfo = _build_conninfo(config)
        pool: list[Any] = []
        for _ in range(config.pool_size):
            conn = psycopg.connect(conninfo, **config.extra)
            pool.append(conn)
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | tuple[Any, ...] | None = None,
    ) -> Any:
        return connection.execute(sql, params)

    def to_result(
        self,
        cursor: Any,
        column_types: Mapping[str, int] | None = None,
    ) -> CursorResult | RowsResult:
        if cursor.description is None:
            cursor.close()
            return RowsResult([], [])
        overrides = column_types or {}
        columns = [
            ColumnDescriptor(desc[0], overrides.get(desc[0], sql_type_for_oid(desc[1])))
            for desc in cursor.description
        ]
        return CursorResult(cursor, columns)
