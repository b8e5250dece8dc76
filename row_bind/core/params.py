"""SQL parameter preparation.

Converts `:name` parameter syntax to driver-specific format and normalizes
parameter containers before they reach the driver.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

# Matches :name but not ::typecast and not inside words
# Negative lookbehind for : (handles ::), \w (handles mid-word colons)
_PARAM_PATTERN = re.compile(r"(?<![:\w]):([a-zA-Z_]\w*)")

# Matches single-quoted string literals (with escaped quotes handled)
_STRING_LITERAL_PATTERN = re.compile(r"'(?:[^'\\]|\\.)*'")

Params = dict[str, Any] | tuple[Any, ...] | None


def normalize_params(sql: str, paramstyle: str) -> str:
    """Convert :name parameters to the target param style.

    Args:
        sql: SQL string with :name parameters.
        paramstyle: Target style - 'named' (no conversion) or 'pyformat' (%(name)s).

    Returns:
        SQL with parameters converted to the target style.
    """
    if paramstyle == "named":
        return sql
    return _convert_to_pyformat(sql)


@lru_cache(maxsize=256)
def _convert_to_pyformat(sql: str) -> str:
    """Convert :name params to %(name)s, preserving string literals."""
    parts: list[str] = []
    last_end = 0

    for match in _STRING_LITERAL_PATTERN.finditer(sql):
        start, end = match.span()
        if start > last_end:
            parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:start]))
        parts.append(match.group())
        last_end = end

    if last_end < len(sql):
        parts.append(_PARAM_PATTERN.sub(r"%(\1)s", sql[last_end:]))

    return "".join(parts)


def coerce_params(params: Mapping[str, Any] | Iterable[Any] | Any) -> Params:
    """Normalize *params* to a dict, tuple, or None.

    * ``None`` / mapping → dict (named parameter binding).
    * ``tuple`` / ``list`` → ``tuple`` (positional binding).
    * Any other scalar → wrapped in a single-element tuple.
    """
    if params is None:
        return None
    if isinstance(params, Mapping):
        return dict(params)
    if isinstance(params, (tuple, list)):
        return tuple(params)
    return (params,)


def _prepare_value(value: Any) -> Any:
    """Materialize collection values as lists so drivers bind them as arrays."""
    if isinstance(value, (str, bytes, bytearray, memoryview, Mapping)):
        return value
    if isinstance(value, Iterable):
        return list(value)
    return value


def prepare_params(params: Mapping[str, Any] | Iterable[Any] | Any) -> Params:
    """Coerce *params* and convert collection-valued entries to lists.

    Sets, tuples and generators passed as a single parameter value would
    otherwise be rejected or stringified by most drivers.
    """
    coerced = coerce_params(params)
    if coerced is None:
        return None
    if isinstance(coerced, dict):
        return {key: _prepare_value(value) for key, value in coerced.items()}
    return tuple(_prepare_value(value) for value in coerced)
