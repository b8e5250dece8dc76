"""RowBind exception hierarchy.

Definition errors describe a class that can never be mapped and fail the
same way on every call. Data errors depend on the rows being decoded and
abort only the current decode call.
"""

from __future__ import annotations


class RowBindError(Exception):
    """Base exception for all RowBind errors."""


# --- Mapping definition ---


class MappingDefinitionError(RowBindError):
    """Raised when a class is not usable as a mapping target."""

    def __init__(self, target_class: str, detail: str) -> None:
        self.target_class = target_class
        self.detail = detail
        super().__init__(f"Cannot map {target_class}: {detail}")


class NoDefaultConstructorError(MappingDefinitionError):
    """Raised when the target class cannot be instantiated without arguments."""

    def __init__(self, target_class: str, required_params: list[str]) -> None:
        self.required_params = required_params
        super().__init__(
            target_class,
            f"constructor requires arguments {required_params}; "
            "a zero-argument constructor is needed",
        )


class SetterArityError(MappingDefinitionError):
    """Raised when a column setter does not take exactly one parameter."""

    def __init__(self, target_class: str, method_name: str, param_count: int) -> None:
        self.method_name = method_name
        self.param_count = param_count
        super().__init__(
            target_class,
            f"column setter '{method_name}' must take exactly one parameter, "
            f"takes {param_count}",
        )


class ArrayBindingError(MappingDefinitionError):
    """Raised when an ARRAY column is bound to a non-sequence field or parameter."""

    def __init__(self, target_class: str, binding_name: str, column: str) -> None:
        self.binding_name = binding_name
        self.column = column
        super().__init__(
            target_class,
            f"ARRAY column '{column}' is bound to '{binding_name}', "
            "which is not declared as a sequence type",
        )


# --- Row mapping (data) ---


class RowMappingError(RowBindError):
    """Raised when rows cannot be decoded into the target class.

    Unexpected failures (constructor, setter or assignment errors) are
    raised as this class with the original exception chained as the cause.
    """

    def __init__(
        self,
        target_class: str,
        detail: str,
        *,
        column: str | None = None,
        row_index: int | None = None,
    ) -> None:
        self.target_class = target_class
        self.detail = detail
        self.column = column
        self.row_index = row_index
        location = []
        if column is not None:
            location.append(f"column '{column}'")
        if row_index is not None:
            location.append(f"row {row_index}")
        where = f" ({', '.join(location)})" if location else ""
        super().__init__(f"Failed to map {target_class}{where}: {detail}")


class NullRequiredFieldError(RowMappingError):
    """Raised when a required field binding receives a null value."""

    def __init__(self, target_class: str, field_name: str, column: str, row_index: int) -> None:
        self.field_name = field_name
        super().__init__(
            target_class,
            f"null value for required field '{field_name}'",
            column=column,
            row_index=row_index,
        )


class NullRequiredParameterError(RowMappingError):
    """Raised when a required setter parameter receives a null value."""

    def __init__(self, target_class: str, method_name: str, column: str, row_index: int) -> None:
        self.method_name = method_name
        super().__init__(
            target_class,
            f"null value for required parameter of '{method_name}'",
            column=column,
            row_index=row_index,
        )


class UnsupportedColumnTypeError(RowMappingError):
    """Raised when a bound column has a SQL type outside the conversion table."""

    def __init__(self, target_class: str, column: str, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(
            target_class,
            f"unsupported column type {type_name}",
            column=column,
        )


class ColumnConversionError(RowMappingError):
    """Raised when a cell value cannot be converted to its column's Python type."""


# --- Execution ---


class ExecutionError(RowBindError):
    """Base for query execution errors."""


class ParameterBindingError(ExecutionError):
    """Raised on parameter binding or statement execution failures."""

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        super().__init__(f"Parameter binding error for '{sql}': {detail}")


class EmptyResultError(ExecutionError):
    """Raised when a single row was expected and the query returned none."""

    def __init__(self, sql: str | None = None) -> None:
        self.sql = sql
        target = f" for '{sql}'" if sql is not None else ""
        super().__init__(f"Query{target} returned no rows (expected at least 1)")


class MultipleRowsError(ExecutionError):
    """Raised when a scalar query returns more than one row."""

    def __init__(self, sql: str, row_count: int) -> None:
        self.sql = sql
        self.row_count = row_count
        super().__init__(f"Query '{sql}' returned {row_count} rows (expected 0 or 1)")


# --- Adapter ---


class AdapterError(RowBindError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
