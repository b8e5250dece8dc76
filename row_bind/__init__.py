"""RowBind - decode SQL result rows into annotated Python classes."""

from __future__ import annotations

from row_bind.core.connection import ConnectionConfig, ConnectionManager
from row_bind.core.engine import Engine
from row_bind.core.enums import DatabaseBackend, SqlType
from row_bind.core.exceptions import (
    AdapterError,
    ArrayBindingError,
    ColumnConversionError,
    ConnectionError,  # noqa: A004
    EmptyResultError,
    ExecutionError,
    MappingDefinitionError,
    MultipleRowsError,
    NoDefaultConstructorError,
    NullRequiredFieldError,
    NullRequiredParameterError,
    ParameterBindingError,
    PoolError,
    RowBindError,
    RowMappingError,
    SetterArityError,
    UnsupportedColumnTypeError,
)
from row_bind.core.result import ColumnDescriptor, CursorResult, RowsResult, TabularResult
from row_bind.mapping import (
    BindingMetadata,
    Column,
    NotNull,
    RowDecoder,
    column_setter,
    decode,
    entity,
    mapped_base,
    metadata_for,
    resolve_metadata,
)
from row_bind.repository import Repository

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Engine
    "Engine",
    # Results
    "ColumnDescriptor",
    "TabularResult",
    "RowsResult",
    "CursorResult",
    # Mapping
    "entity",
    "mapped_base",
    "Column",
    "NotNull",
    "column_setter",
    "BindingMetadata",
    "resolve_metadata",
    "metadata_for",
    "decode",
    "RowDecoder",
    # Repository
    "Repository",
    # Enums
    "DatabaseBackend",
    "SqlType",
    # Exceptions
    "RowBindError",
    "MappingDefinitionError",
    "NoDefaultConstructorError",
    "SetterArityError",
    "ArrayBindingError",
    "RowMappingError",
    "NullRequiredFieldError",
    "NullRequiredParameterError",
    "UnsupportedColumnTypeError",
    "ColumnConversionError",
    "ExecutionError",
    "ParameterBindingError",
    "EmptyResultError",
    "MultipleRowsError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
