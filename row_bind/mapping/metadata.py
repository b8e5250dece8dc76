"""Binding metadata resolution.

Walks a target class's MRO once, validates marker placement and binding
shape, and produces an immutable ``BindingMetadata``. ``metadata_for``
caches the result per class so the inspection cost is paid once.

Ordering convention: the target class's own bindings come first, then each
mapped base's, walking toward ``object``. Within a class, bindings keep
their declaration order. When a derived class re-declares a bound name,
only the most-derived binding is kept.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import inspect
import logging
import types
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Annotated, Any, Generic, TypeVar, get_args, get_origin

from row_bind.core.exceptions import (
    MappingDefinitionError,
    NoDefaultConstructorError,
    SetterArityError,
)
from row_bind.mapping.annotations import (
    ENTITY,
    MAPPED_BASE,
    Column,
    is_not_null,
    kind_of,
    setter_column,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SEQUENCE_ORIGINS = (
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
)


@dataclass(frozen=True)
class FieldBinding:
    """A class attribute assigned directly from a column."""

    attribute: str
    column: str
    required: bool
    declared_in: type
    annotation: Any = Any
    # list or tuple when an ARRAY column may be unwrapped into this binding
    sequence_type: type | None = list

    @property
    def name(self) -> str:
        return self.attribute

    def apply(self, instance: Any, value: Any) -> None:
        setattr(instance, self.attribute, value)


@dataclass(frozen=True)
class MethodBinding:
    """A single-argument setter called with a column's value."""

    method: str
    column: str
    required: bool
    declared_in: type
    annotation: Any = Any
    sequence_type: type | None = list
    # Bound through a property setter: applied by attribute assignment
    via_property: bool = False

    @property
    def name(self) -> str:
        return self.method

    def apply(self, instance: Any, value: Any) -> None:
        if self.via_property:
            setattr(instance, self.method, value)
        else:
            getattr(instance, self.method)(value)


@dataclass(frozen=True)
class BindingMetadata(Generic[T]):
    """Resolved bindings of one target class."""

    target_class: type[T]
    field_bindings: tuple[FieldBinding, ...] = ()
    method_bindings: tuple[MethodBinding, ...] = ()

    @property
    def target_name(self) -> str:
        return self.target_class.__qualname__

    @property
    def columns(self) -> list[str]:
        """Every bound column name, fields first."""
        return [b.column for b in self.field_bindings] + [b.column for b in self.method_bindings]


def _strip_optional(tp: Any) -> Any:
    if get_origin(tp) in (typing.Union, types.UnionType):
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _sequence_type(annotation: Any) -> type | None:
    """Container an ARRAY value is unwrapped into, or None for scalar types.

    Unannotated and ``Any`` bindings accept arrays as lists.
    """
    tp = _strip_optional(annotation)
    if tp is Any or tp is inspect.Parameter.empty:
        return list
    origin = get_origin(tp) or tp
    if not isinstance(origin, type) or issubclass(origin, (str, bytes, bytearray)):
        return None
    if issubclass(origin, tuple):
        return tuple
    if origin in _SEQUENCE_ORIGINS or issubclass(origin, list):
        return list
    return None


def _split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Return ``(base_type, metadata)`` for an ``Annotated`` hint."""
    if get_origin(hint) is Annotated:
        base, *extras = get_args(hint)
        return base, tuple(extras)
    return hint, ()


def _own_annotations(klass: type) -> dict[str, Any]:
    try:
        return inspect.get_annotations(klass, eval_str=True)
    except Exception as e:
        raise MappingDefinitionError(
            klass.__qualname__, f"cannot evaluate field annotations: {e}"
        ) from e


def _check_constructor(target_class: type) -> None:
    if dataclasses.is_dataclass(target_class) and target_class.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        raise MappingDefinitionError(
            target_class.__qualname__, "frozen dataclasses cannot be populated field by field"
        )
    try:
        sig = inspect.signature(target_class)
    except (ValueError, TypeError):
        # No introspectable signature; instantiation is checked at decode time.
        return
    required = [
        name
        for name, param in sig.parameters.items()
        if param.default is inspect.Parameter.empty
        and param.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]
    if required:
        raise NoDefaultConstructorError(target_class.__qualname__, required)


def _field_bindings(klass: type, seen: set[str]) -> list[FieldBinding]:
    bindings: list[FieldBinding] = []
    for attribute, hint in _own_annotations(klass).items():
        base, extras = _split_annotated(hint)
        column = next((m for m in extras if isinstance(m, Column)), None)
        if column is None or attribute in seen:
            continue
        seen.add(attribute)
        bindings.append(
            FieldBinding(
                attribute=attribute,
                column=column.name,
                required=any(is_not_null(m) for m in extras),
                declared_in=klass,
                annotation=base,
                sequence_type=_sequence_type(base),
            )
        )
    return bindings


def _method_binding(
    target_class: type,
    klass: type,
    name: str,
    func: Any,
    column: Column,
    via_property: bool = False,
) -> MethodBinding:
    params = list(inspect.signature(func).parameters.values())[1:]  # drop self
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    if len(params) != 1 or params[0].kind not in positional:
        raise SetterArityError(target_class.__qualname__, name, len(params))

    try:
        hints = typing.get_type_hints(func, include_extras=True)
    except Exception as e:
        raise MappingDefinitionError(
            target_class.__qualname__, f"cannot evaluate annotations of setter '{name}': {e}"
        ) from e
    base, extras = _split_annotated(hints.get(params[0].name, inspect.Parameter.empty))
    return MethodBinding(
        method=name,
        column=column.name,
        required=any(is_not_null(m) for m in extras),
        declared_in=klass,
        annotation=Any if base is inspect.Parameter.empty else base,
        sequence_type=_sequence_type(base),
        via_property=via_property,
    )


def _method_bindings(target_class: type, klass: type, seen: set[str]) -> list[MethodBinding]:
    bindings: list[MethodBinding] = []
    for name, member in vars(klass).items():
        if isinstance(member, (staticmethod, classmethod)):
            if setter_column(member) or setter_column(member.__func__):
                raise MappingDefinitionError(
                    target_class.__qualname__,
                    f"column setter '{name}' must be an instance method, "
                    f"not a {type(member).__name__}",
                )
            continue

        via_property = isinstance(member, property)
        if via_property:
            marked = [f for f in (member.fset, member.fget) if setter_column(f) is not None]
            if not marked:
                continue
            func = marked[0]
        elif inspect.isfunction(member):
            func = member
        else:
            continue

        column = setter_column(func)
        if column is None or name in seen:
            continue
        seen.add(name)
        bindings.append(_method_binding(target_class, klass, name, func, column, via_property))
    return bindings


def resolve_metadata(target_class: type[T]) -> BindingMetadata[T]:
    """Collect and validate the column bindings of ``target_class``.

    Raises:
        MappingDefinitionError: If the class or one of its ancestors is not
            marked, or a binding cannot be evaluated.
        NoDefaultConstructorError: If the class needs constructor arguments.
        SetterArityError: If a column setter does not take one parameter.
    """
    name = target_class.__qualname__
    if kind_of(target_class) not in (ENTITY, MAPPED_BASE):
        raise MappingDefinitionError(
            name, "class is not marked with @entity or @mapped_base"
        )

    field_bindings: list[FieldBinding] = []
    method_bindings: list[MethodBinding] = []
    seen_fields: set[str] = set()
    seen_methods: set[str] = set()

    for klass in target_class.__mro__:
        if klass is object:
            break
        if klass is not target_class and kind_of(klass) != MAPPED_BASE:
            raise MappingDefinitionError(
                name, f"ancestor {klass.__qualname__} is not marked with @mapped_base"
            )
        field_bindings.extend(_field_bindings(klass, seen_fields))
        method_bindings.extend(_method_bindings(target_class, klass, seen_methods))

    _check_constructor(target_class)

    metadata = BindingMetadata(
        target_class=target_class,
        field_bindings=tuple(field_bindings),
        method_bindings=tuple(method_bindings),
    )
    logger.debug(
        "Resolved %s: fields=%s methods=%s",
        name,
        [b.attribute for b in metadata.field_bindings],
        [b.method for b in metadata.method_bindings],
    )
    return metadata


@lru_cache(maxsize=None)
def metadata_for(target_class: type[T]) -> BindingMetadata[T]:
    """Cached ``resolve_metadata``. Failures are not cached.

    The cache keeps a strong reference to every resolved class. Code that
    creates mapped classes at runtime should call ``metadata_for.cache_clear()``
    to release them.
    """
    return resolve_metadata(target_class)
