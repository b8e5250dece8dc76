"""Row decoder.

Turns a ``TabularResult`` into a list of target-class instances using a
resolved ``BindingMetadata``. The column index is rebuilt from the live
result on every call, so bindings whose columns a query does not select are
skipped and keep their class defaults.

Decoding is all-or-nothing: the first failure aborts the call and no
partial list is returned.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator, Sequence
from contextlib import closing
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from row_bind.core.enums import SqlType
from row_bind.core.exceptions import (
    ArrayBindingError,
    ColumnConversionError,
    NullRequiredFieldError,
    NullRequiredParameterError,
    RowMappingError,
    UnsupportedColumnTypeError,
)
from row_bind.core.result import ColumnDescriptor, ResultRow, TabularResult
from row_bind.mapping.convert import Converter, convert_cell, converter_for
from row_bind.mapping.metadata import BindingMetadata, FieldBinding, MethodBinding, metadata_for

logger = logging.getLogger(__name__)

T = TypeVar("T")

Binding = FieldBinding | MethodBinding


def build_column_index(columns: Sequence[ColumnDescriptor]) -> dict[str, int]:
    """Map column names to 0-based positions.

    Names are matched case-sensitively. When a name repeats, the first
    occurrence wins.
    """
    index: dict[str, int] = {}
    for position, column in enumerate(columns):
        index.setdefault(column.name, position)
    return index


@dataclass(frozen=True)
class _BoundColumn:
    binding: Binding
    index: int
    converter: Converter


def _plan(
    metadata: BindingMetadata[Any],
    columns: Sequence[ColumnDescriptor],
    column_index: dict[str, int],
    bindings: Sequence[Binding],
) -> list[_BoundColumn]:
    """Pair each present binding with its column position and converter."""
    planned: list[_BoundColumn] = []
    for binding in bindings:
        position = column_index.get(binding.column)
        if position is None:
            logger.debug(
                "Column '%s' for %s.%s not in result, skipping",
                binding.column,
                metadata.target_name,
                binding.name,
            )
            continue

        column = columns[position]
        converter = converter_for(column.type_code)
        if converter is None:
            raise UnsupportedColumnTypeError(metadata.target_name, column.name, column.type_name)
        if column.type_code == SqlType.ARRAY and binding.sequence_type is None:
            raise ArrayBindingError(metadata.target_name, binding.name, column.name)
        planned.append(_BoundColumn(binding, position, converter))
    return planned


def _apply(
    metadata: BindingMetadata[Any],
    instance: Any,
    row: ResultRow,
    row_index: int,
    planned: list[_BoundColumn],
    null_error: Callable[[str, str, str, int], RowMappingError],
) -> None:
    target = metadata.target_name
    for bound in planned:
        binding = bound.binding
        try:
            value = convert_cell(bound.converter, row, bound.index, binding.sequence_type)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ColumnConversionError(
                target, str(e), column=binding.column, row_index=row_index
            ) from e
        except Exception as e:
            raise RowMappingError(
                target,
                f"cannot read cell: {type(e).__name__}: {e}",
                column=binding.column,
                row_index=row_index,
            ) from e

        if value is None and binding.required:
            raise null_error(target, binding.name, binding.column, row_index)

        try:
            binding.apply(instance, value)
        except Exception as e:
            raise RowMappingError(
                target,
                f"cannot apply '{binding.name}': {type(e).__name__}: {e}",
                column=binding.column,
                row_index=row_index,
            ) from e


def _read_rows(target: str, result: TabularResult) -> Iterator[tuple[int, ResultRow]]:
    """Number the rows of ``result``, wrapping failures to fetch a row."""
    rows = iter(result)
    for row_index in itertools.count():
        try:
            row = next(rows)
        except StopIteration:
            return
        except Exception as e:
            raise RowMappingError(
                target, f"cannot read row: {type(e).__name__}: {e}", row_index=row_index
            ) from e
        yield row_index, row


def decode(metadata: BindingMetadata[T], result: TabularResult) -> list[T]:
    """Decode every row of ``result`` into a new ``metadata.target_class``.

    The result is closed on every exit path. Rows are returned in the
    order the result produced them.

    Raises:
        UnsupportedColumnTypeError: A bound column has an unsupported type.
        ArrayBindingError: An ARRAY column is bound to a scalar binding.
        NullRequiredFieldError: A required field received NULL.
        NullRequiredParameterError: A required setter parameter received NULL.
        ColumnConversionError: A cell value does not fit its column type.
        RowMappingError: Reading a row, instantiation or assignment failed.
    """
    target = metadata.target_name
    instances: list[T] = []

    with closing(result):
        columns = list(result.columns)
        column_index = build_column_index(columns)
        fields = _plan(metadata, columns, column_index, metadata.field_bindings)
        methods = _plan(metadata, columns, column_index, metadata.method_bindings)

        for row_index, row in _read_rows(target, result):
            try:
                instance = metadata.target_class()
            except Exception as e:
                raise RowMappingError(
                    target, f"constructor failed: {type(e).__name__}: {e}", row_index=row_index
                ) from e
            _apply(metadata, instance, row, row_index, fields, NullRequiredFieldError)
            _apply(metadata, instance, row, row_index, methods, NullRequiredParameterError)
            instances.append(instance)

    logger.debug("Decoded %d %s instance(s)", len(instances), target)
    return instances


class RowDecoder(Generic[T]):
    """Decoder bound to one target class.

    Metadata is resolved on construction (and cached per class), so
    definition errors surface here rather than on first decode.

    Args:
        target_class: An ``@entity`` or ``@mapped_base`` class.
    """

    def __init__(self, target_class: type[T]) -> None:
        self._metadata = metadata_for(target_class)

    @property
    def metadata(self) -> BindingMetadata[T]:
        return self._metadata

    @property
    def target_class(self) -> type[T]:
        return self._metadata.target_class

    def decode(self, result: TabularResult) -> list[T]:
        """Decode all rows of ``result``."""
        return decode(self._metadata, result)

    def decode_one(self, result: TabularResult) -> T | None:
        """Decode ``result`` and return the first instance, or None if empty."""
        instances = decode(self._metadata, result)
        return instances[0] if instances else None

    def __repr__(self) -> str:
        return f"RowDecoder({self._metadata.target_name})"
