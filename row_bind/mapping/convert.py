"""SQL type conversion table.

A closed mapping from ``SqlType`` code to a ``Converter``. Each converter
turns one raw, non-null driver value into the Python value its SQL type
implies. Null detection is done by the caller through the row's
``was_null`` predicate so legitimate zero values (``0``, ``False``, ``""``)
are never mistaken for NULL.
"""

from __future__ import annotations

import datetime
import decimal
import struct
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from row_bind.core.enums import SqlType
from row_bind.core.result import ResultRow


@dataclass(frozen=True)
class Converter:
    """Conversion rule for a family of SQL type codes."""

    python_type: type
    convert: Callable[[Any], Any]
    nullable: bool = True
    # Value produced for a null cell when the type has no null state
    null_value: Any = None


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("t", "true", "1", "y", "yes"):
            return True
        if lowered in ("f", "false", "0", "n", "no"):
            return False
    raise ValueError(f"cannot interpret {value!r} as a boolean")


def _int_converter(bits: int) -> Callable[[Any], int]:
    low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1

    def convert(value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"boolean {value!r} is not an integer")
        if isinstance(value, (float, decimal.Decimal)):
            if value != int(value):
                raise ValueError(f"{value!r} is not integral")
            value = int(value)
        result = int(value)
        if not low <= result <= high:
            raise ValueError(f"{result} is out of range for a {bits}-bit integer")
        return result

    return convert


def _to_str(value: Any) -> str:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8")
    return str(value)


def _to_float32(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"boolean {value!r} is not a number")
    return struct.unpack("f", struct.pack("f", float(value)))[0]


def _to_float64(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError(f"boolean {value!r} is not a number")
    return float(value)


def _to_time(value: Any) -> datetime.time:
    if isinstance(value, datetime.datetime):
        return value.timetz()
    if isinstance(value, datetime.time):
        return value
    if isinstance(value, datetime.timedelta):
        # MySQL drivers report TIME columns as durations since midnight
        seconds = value.total_seconds()
        if not 0 <= seconds < 86400:
            raise ValueError(f"duration {value} is not a time of day")
        return (datetime.datetime.min + value).time()
    if isinstance(value, str):
        return datetime.time.fromisoformat(value)
    raise ValueError(f"cannot interpret {value!r} as a time of day")


def _to_datetime(value: Any) -> datetime.datetime:
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if isinstance(value, str):
        return datetime.datetime.fromisoformat(value)
    raise ValueError(f"cannot interpret {value!r} as a timestamp")


def _to_list(value: Any) -> list[Any]:
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Iterable):
        raise ValueError(f"cannot interpret {value!r} as an array")
    return list(value)


_BOOLEAN = Converter(bool, _to_bool, nullable=False, null_value=False)
_STRING = Converter(str, _to_str)
_FLOAT32 = Converter(float, _to_float32)
_FLOAT64 = Converter(float, _to_float64)
_TIME = Converter(datetime.time, _to_time)
_TIMESTAMP = Converter(datetime.datetime, _to_datetime)

_CONVERTERS: dict[SqlType, Converter] = {
    SqlType.BOOLEAN: _BOOLEAN,
    SqlType.SMALLINT: Converter(int, _int_converter(16)),
    SqlType.INTEGER: Converter(int, _int_converter(32)),
    SqlType.BIGINT: Converter(int, _int_converter(64)),
    SqlType.VARCHAR: _STRING,
    SqlType.LONGVARCHAR: _STRING,
    SqlType.LONGNVARCHAR: _STRING,
    SqlType.FLOAT: _FLOAT32,
    SqlType.REAL: _FLOAT32,
    SqlType.NUMERIC: _FLOAT64,
    SqlType.DECIMAL: _FLOAT64,
    SqlType.DOUBLE: _FLOAT64,
    SqlType.TIME: _TIME,
    SqlType.TIME_WITH_TIMEZONE: _TIME,
    SqlType.TIMESTAMP: _TIMESTAMP,
    SqlType.TIMESTAMP_WITH_TIMEZONE: _TIMESTAMP,
    SqlType.DATE: _TIMESTAMP,
    SqlType.ARRAY: Converter(list, _to_list),
}

SUPPORTED_SQL_TYPES: frozenset[SqlType] = frozenset(
    {
        SqlType.BOOLEAN,
        SqlType.SMALLINT,
        SqlType.INTEGER,
        SqlType.BIGINT,
        SqlType.VARCHAR,
        SqlType.LONGVARCHAR,
        SqlType.LONGNVARCHAR,
        SqlType.FLOAT,
        SqlType.REAL,
        SqlType.NUMERIC,
        SqlType.DECIMAL,
        SqlType.DOUBLE,
        SqlType.TIME,
        SqlType.TIME_WITH_TIMEZONE,
        SqlType.TIMESTAMP,
        SqlType.TIMESTAMP_WITH_TIMEZONE,
        SqlType.DATE,
        SqlType.ARRAY,
    }
)

if set(_CONVERTERS) != SUPPORTED_SQL_TYPES:
    raise RuntimeError(
        "SQL conversion table out of sync: "
        f"{sorted(t.name for t in set(_CONVERTERS) ^ SUPPORTED_SQL_TYPES)}"
    )


def converter_for(type_code: int) -> Converter | None:
    """Converter for a SQL type code, or None if the type is unsupported."""
    try:
        return _CONVERTERS.get(SqlType(type_code))
    except ValueError:
        return None


def convert_cell(
    converter: Converter,
    row: ResultRow,
    index: int,
    sequence_type: type | None = list,
) -> Any:
    """Convert the cell at ``index`` of ``row``.

    Returns ``None`` for a null cell of a nullable type. ARRAY values are
    rebuilt as ``sequence_type`` (list or tuple).

    Raises:
        ValueError, TypeError: If the raw value does not fit the type.
    """
    if row.was_null(index):
        return None if converter.nullable else converter.null_value
    value = converter.convert(row.get(index))
    if converter.python_type is list and sequence_type is tuple:
        return tuple(value)
    return value
