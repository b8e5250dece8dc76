"""Mapping layer - decode tabular results into annotated classes."""

from __future__ import annotations

from row_bind.mapping.annotations import Column, NotNull, column_setter, entity, mapped_base
from row_bind.mapping.convert import SUPPORTED_SQL_TYPES, Converter, converter_for
from row_bind.mapping.decoder import RowDecoder, build_column_index, decode
from row_bind.mapping.metadata import (
    BindingMetadata,
    FieldBinding,
    MethodBinding,
    metadata_for,
    resolve_metadata,
)

__all__ = [
    "entity",
    "mapped_base",
    "Column",
    "NotNull",
    "column_setter",
    "BindingMetadata",
    "FieldBinding",
    "MethodBinding",
    "resolve_metadata",
    "metadata_for",
    "RowDecoder",
    "decode",
    "build_column_index",
    "Converter",
    "converter_for",
    "SUPPORTED_SQL_TYPES",
]
