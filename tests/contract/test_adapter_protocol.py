"""Contract tests for adapter protocol compliance."""

from __future__ import annotations

import datetime
from collections import namedtuple
from typing import Annotated, Any

import pytest

from row_bind.adapters.postgresql import PostgresqlSyncAdapter, sql_type_for_oid
from row_bind.adapters.protocol import SyncAdapter
from row_bind.adapters.sqlite import SqliteSyncAdapter, infer_type_code
from row_bind.core.connection import ConnectionConfig, ConnectionManager
from row_bind.core.engine import Engine
from row_bind.core.enums import SqlType
from row_bind.core.exceptions import AdapterError, PoolError
from row_bind.core.result import ColumnDescriptor, CursorResult, RowsResult, TabularResult
from row_bind.mapping.annotations import Column, entity
from row_bind.mapping.decoder import RowDecoder

PgColumn = namedtuple("PgColumn", "name type_code display_size internal_size precision scale null_ok")


@entity
class Price:
    price: Annotated[float | None, Column("price")] = None


class FakePgCursor:
    def __init__(self, description: list[PgColumn] | None, rows: list[Any]) -> None:
        self.description = description
        self._rows = list(rows)
        self.closed = False

    def fetchone(self) -> Any:
        return self._rows.pop(0) if self._rows else None

    def close(self) -> None:
        self.closed = True


def _pg_column(name: str, oid: int) -> PgColumn:
    return PgColumn(name, oid, None, None, None, None, None)


class TestSqliteSyncAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        assert isinstance(SqliteSyncAdapter(), SyncAdapter)

    def test_paramstyle(self) -> None:
        assert SqliteSyncAdapter().paramstyle == "named"

    def test_lifecycle(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteSyncAdapter()
        pool = adapter.create_pool(sqlite_config)
        assert len(pool) == 1

        conn = adapter.acquire_connection(pool)
        assert conn is not None

        result = adapter.to_result(adapter.execute(conn, "SELECT 1 AS val"))
        assert isinstance(result, TabularResult)
        assert result.columns == (ColumnDescriptor("val", SqlType.BIGINT),)
        assert [row.get(0) for row in result] == [1]

        adapter.release_connection(conn, pool)
        assert len(pool) == 1

        adapter.close_pool(pool)
        assert len(pool) == 0

    def test_empty_pool(self) -> None:
        with pytest.raises(PoolError):
            SqliteSyncAdapter().acquire_connection([])

    def test_column_types_override(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteSyncAdapter()
        pool = adapter.create_pool(sqlite_config)
        conn = adapter.acquire_connection(pool)
        cursor = adapter.execute(conn, "SELECT 1 AS flag, '2024-01-01' AS day")
        result = adapter.to_result(cursor, {"flag": SqlType.BOOLEAN})
        assert [c.type_code for c in result.columns] == [SqlType.BOOLEAN, SqlType.VARCHAR]
        adapter.close_pool([conn])

    def test_statement_without_result(self, sqlite_config: ConnectionConfig) -> None:
        adapter = SqliteSyncAdapter()
        pool = adapter.create_pool(sqlite_config)
        conn = adapter.acquire_connection(pool)
        result = adapter.to_result(adapter.execute(conn, "CREATE TABLE t (x INTEGER)"))
        assert result.columns == ()
        assert list(result) == []
        adapter.close_pool([conn])


class TestSqliteTypeInference:
    def test_nulls_are_skipped(self) -> None:
        rows = [(None, None, None), (1, 2.5, "a")]
        assert infer_type_code(rows, 0) == SqlType.BIGINT
        assert infer_type_code(rows, 1) == SqlType.DOUBLE
        assert infer_type_code(rows, 2) == SqlType.VARCHAR

    def test_all_null_column_is_varchar(self) -> None:
        assert infer_type_code([(None,), (None,)], 0) == SqlType.VARCHAR

    def test_blob_is_reported(self) -> None:
        assert infer_type_code([(b"\x00",)], 0) == SqlType.BLOB

    def test_unknown_value_type(self) -> None:
        assert infer_type_code([(object(),)], 0) == SqlType.OTHER

    def test_int_and_float_widen_to_double(self) -> None:
        assert infer_type_code([(10,), (None,), (10.5,)], 0) == SqlType.DOUBLE

    def test_date_and_timestamp_widen_to_timestamp(self) -> None:
        rows = [(datetime.date(2024, 1, 1),), (datetime.datetime(2024, 1, 1, 12, 0),)]
        assert infer_type_code(rows, 0) == SqlType.TIMESTAMP

    def test_conflicting_types_are_other(self) -> None:
        assert infer_type_code([(1,), ("a",)], 0) == SqlType.OTHER

    def test_mixed_numeric_column_decodes(self, engine: Engine) -> None:
        prices = engine.fetch_all(
            "SELECT 10 AS price UNION ALL SELECT 10.5", mapper=RowDecoder(Price)
        )
        assert [p.price for p in prices] == [10.0, 10.5]


class TestPostgresqlSyncAdapterProtocol:
    def test_implements_sync_protocol(self) -> None:
        assert isinstance(PostgresqlSyncAdapter(), SyncAdapter)

    def test_paramstyle(self) -> None:
        assert PostgresqlSyncAdapter().paramstyle == "pyformat"

    @pytest.mark.parametrize(
        ("oid", "expected"),
        [
            (16, SqlType.BOOLEAN),
            (21, SqlType.SMALLINT),
            (23, SqlType.INTEGER),
            (20, SqlType.BIGINT),
            (1043, SqlType.VARCHAR),
            (25, SqlType.LONGVARCHAR),
            (700, SqlType.REAL),
            (701, SqlType.DOUBLE),
            (1700, SqlType.NUMERIC),
            (1083, SqlType.TIME),
            (1184, SqlType.TIMESTAMP_WITH_TIMEZONE),
            (1082, SqlType.DATE),
            (1007, SqlType.ARRAY),
            (3802, SqlType.OTHER),
            (None, SqlType.OTHER),
        ],
    )
    def test_oid_mapping(self, oid: int | None, expected: SqlType) -> None:
        assert sql_type_for_oid(oid) == expected

    def test_to_result_wraps_cursor(self) -> None:
        cursor = FakePgCursor(
            [_pg_column("id", 23), _pg_column("tags", 1009)],
            [{"id": 1, "tags": ["a", "b"]}],
        )
        result = PostgresqlSyncAdapter().to_result(cursor, {"id": SqlType.BIGINT})
        assert isinstance(result, CursorResult)
        assert result.columns == (
            ColumnDescriptor("id", SqlType.BIGINT),
            ColumnDescriptor("tags", SqlType.ARRAY),
        )
        (row,) = list(result)
        assert row.get(1) == ["a", "b"]
        result.close()
        assert cursor.closed

    def test_to_result_without_description(self) -> None:
        cursor = FakePgCursor(None, [])
        result = PostgresqlSyncAdapter().to_result(cursor)
        assert isinstance(result, RowsResult)
        assert cursor.closed


class TestAdapterLoading:
    def test_unsupported_driver(self) -> None:
        with pytest.raises(AdapterError, match="Unsupported"):
            ConnectionManager(ConnectionConfig(driver="db2", database="x"))

    def test_driver_name_case_insensitive(self) -> None:
        manager = ConnectionManager(ConnectionConfig(driver="SQLite", database=":memory:"))
        assert isinstance(manager.adapter, SqliteSyncAdapter)
