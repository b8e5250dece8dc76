"""Tabular result abstraction.

The decoder reads query output through the ``TabularResult`` protocol:
ordered column descriptors plus a forward-only sequence of rows exposing a
positional accessor and a per-cell null predicate.

``RowsResult`` wraps rows already held in memory. ``CursorResult`` wraps a
DB-API cursor and closes it when the result is closed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from row_bind.core.enums import type_name


@dataclass(frozen=True)
class ColumnDescriptor:
    """Name and SQL type code of one result column."""

    name: str
    type_code: int

    @property
    def type_name(self) -> str:
        return type_name(self.type_code)


@runtime_checkable
class ResultRow(Protocol):
    """One row of a tabular result."""

    def get(self, index: int) -> Any:
        """Raw driver value of the cell at 0-based ``index``."""
        ...

    def was_null(self, index: int) -> bool:
        """Whether the cell at ``index`` holds SQL NULL."""
        ...


@runtime_checkable
class TabularResult(Protocol):
    """Column-described, forward-only result of an executed query."""

    @property
    def columns(self) -> Sequence[ColumnDescriptor]:
        """Ordered column descriptors."""
        ...

    def __iter__(self) -> Iterator[ResultRow]:
        """Iterate rows in the order the query produced them."""
        ...

    def close(self) -> None:
        """Release the underlying cursor or buffer."""
        ...


class Row:
    """Tuple-backed ``ResultRow``. A cell is null when its value is ``None``."""

    __slots__ = ("_values",)

    def __init__(self, values: Sequence[Any]) -> None:
        self._values = tuple(values)

    def get(self, index: int) -> Any:
        return self._values[index]

    def was_null(self, index: int) -> bool:
        return self._values[index] is None

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Row{self._values!r}"


def _to_row(raw: Any, names: Sequence[str]) -> Row:
    """Normalize a driver row (tuple-like or dict-like) to a ``Row``."""
    if isinstance(raw, Row):
        return raw
    if isinstance(raw, Mapping):
        return Row([raw[name] for name in names])
    return Row(raw)


class _SinglePassResult:
    """Shared single-pass iteration and close bookkeeping."""

    def __init__(self, columns: Sequence[ColumnDescriptor]) -> None:
        self._columns = tuple(columns)
        self._names = [c.name for c in self._columns]
        self._consumed = False
        self._closed = False

    @property
    def columns(self) -> tuple[ColumnDescriptor, ...]:
        return self._columns

    @property
    def closed(self) -> bool:
        return self._closed

    def _source(self) -> Iterable[Any]:
        raise NotImplementedError

    def __iter__(self) -> Iterator[Row]:
        if self._closed:
            raise ValueError("Cannot iterate a closed result")
        if self._consumed:
            raise ValueError("Result rows can only be iterated once")
        self._consumed = True
        for raw in self._source():
            yield _to_row(raw, self._names)

    def close(self) -> None:
        self._closed = True

    def __enter__(self) -> _SinglePassResult:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class RowsResult(_SinglePassResult):
    """In-memory tabular result.

    Args:
        columns: Column descriptors, or ``(name, type_code)`` pairs.
        rows: Rows as sequences of values in column order, or mappings
              keyed by column name.
    """

    def __init__(
        self,
        columns: Sequence[ColumnDescriptor | tuple[str, int]],
        rows: Iterable[Sequence[Any] | Mapping[str, Any]],
    ) -> None:
        super().__init__(
            [c if isinstance(c, ColumnDescriptor) else ColumnDescriptor(*c) for c in columns]
        )
        self._rows = rows

    def _source(self) -> Iterable[Any]:
        return self._rows


class CursorResult(_SinglePassResult):
    """Tabular result over an executed DB-API cursor.

    Rows are pulled from the cursor one at a time. Closing the result
    closes the cursor.

    Args:
        cursor: An executed cursor with a non-empty ``description``.
        columns: Column descriptors built by the adapter from the
                 cursor description.
    """

    def __init__(self, cursor: Any, columns: Sequence[ColumnDescriptor]) -> None:
        super().__init__(columns)
        self._cursor = cursor

    def _source(self) -> Iterable[Any]:
        while True:
            raw = self._cursor.fetchone()
            if raw is None:
                return
            yield raw

    def close(self) -> None:
        if not self._closed:
            try:
                self._cursor.close()
            finally:
                super().close()
