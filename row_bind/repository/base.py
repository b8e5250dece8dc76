"""Repository base class.

Thin wrapper over Engine + RowDecoder for DDD-oriented usage. Subclasses
write their SQL and delegate loading to the ``load_*`` helpers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from row_bind.core.exceptions import EmptyResultError, MultipleRowsError
from row_bind.mapping.decoder import RowDecoder

T = TypeVar("T")
V = TypeVar("V")


def head(iterable: Iterable[V], sql: str | None = None) -> V:
    """First element of ``iterable``.

    Raises:
        EmptyResultError: If ``iterable`` is empty.
    """
    for item in iterable:
        return item
    raise EmptyResultError(sql)


class Repository(Generic[T]):
    """Base repository class for DDD-oriented usage.

    Args:
        engine: An Engine (or anything with the same fetch/execute methods).
        target_class: Default class rows are decoded into.
        mapper: A ready RowDecoder; takes precedence over ``target_class``.
    """

    def __init__(
        self,
        engine: Any,
        target_class: type[T] | None = None,
        mapper: RowDecoder[T] | None = None,
    ) -> None:
        self.engine = engine
        if mapper is not None:
            self.mapper: RowDecoder[T] | None = mapper
        elif target_class is not None:
            self.mapper = RowDecoder(target_class)
        else:
            self.mapper = None

    def _decoder(self, target_class: type[Any] | None) -> RowDecoder[Any]:
        if target_class is not None:
            return RowDecoder(target_class)
        if self.mapper is None:
            raise TypeError(
                f"{type(self).__name__} has no default target class; pass target_class"
            )
        return self.mapper

    def load_list(
        self,
        sql: str,
        params: Any = None,
        *,
        target_class: type[Any] | None = None,
        column_types: Mapping[str, int] | None = None,
    ) -> list[Any]:
        """Decode every row of the query into the target class."""
        return self.engine.fetch_all(
            sql, params, mapper=self._decoder(target_class), column_types=column_types
        )

    def load_object(
        self,
        sql: str,
        params: Any = None,
        *,
        target_class: type[Any] | None = None,
        column_types: Mapping[str, int] | None = None,
    ) -> Any:
        """Decode the first row of the query.

        Raises:
            EmptyResultError: If the query returned no rows.
        """
        rows = self.load_list(sql, params, target_class=target_class, column_types=column_types)
        return head(rows, sql)

    def load_rows(self, sql: str, params: Any = None) -> list[dict[str, Any]]:
        """Every row as a dict keyed by column name."""
        return self.engine.fetch_all(sql, params)

    def load_row(self, sql: str, params: Any = None) -> dict[str, Any]:
        """The first row as a dict.

        Raises:
            EmptyResultError: If the query returned no rows.
        """
        return head(self.load_rows(sql, params), sql)

    def load_column(self, sql: str, params: Any = None) -> list[Any]:
        """The first column of every row."""
        return self.engine.fetch_column(sql, params)

    def load_scalar(self, sql: str, params: Any = None) -> Any:
        """The single value of a one-row query.

        Unlike ``Engine.fetch_scalar``, a query with no rows is an error.

        Raises:
            EmptyResultError: If the query returned no rows.
            MultipleRowsError: If it returned more than one.
        """
        values = self.engine.fetch_column(sql, params)
        if len(values) > 1:
            raise MultipleRowsError(sql, len(values))
        return head(values, sql)

    def execute(self, sql: str, params: Any = None) -> int:
        """Run a write statement and return the affected row count."""
        return self.engine.execute(sql, params)
