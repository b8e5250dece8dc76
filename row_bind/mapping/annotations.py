"""Declarative binding surface.

Classes opt in with ``@entity`` (a decode target) or ``@mapped_base`` (an
ancestor whose bindings entities inherit). Fields bind with
``Annotated[T, Column("name")]``; single-argument setters bind with
``@column_setter("name")``. A ``NotNull()`` marker in the field's or the
setter parameter's ``Annotated`` metadata makes the binding required::

    @mapped_base
    class Audited:
        created_at: Annotated[datetime | None, Column("created_at")] = None

    @entity
    class User(Audited):
        id: Annotated[int, Column("id"), NotNull()] = 0

        @column_setter("full_name")
        def set_full_name(self, value: Annotated[str, NotNull()]) -> None:
            self.first, _, self.last = value.partition(" ")
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

C = TypeVar("C", bound=type)
F = TypeVar("F", bound=Callable[..., Any])

ENTITY = "entity"
MAPPED_BASE = "mapped_base"

_KIND_ATTR = "__row_bind_kind__"
_SETTER_ATTR = "__row_bind_column__"


class Column:
    """Binds a field or setter to a result column by name."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        if not name:
            raise ValueError("Column name must be a non-empty string")
        self.name = name

    def __repr__(self) -> str:
        return f"Column({self.name!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Column) and other.name == self.name

    def __hash__(self) -> int:
        return hash((Column, self.name))


class NotNull:
    """Marks a binding as required: a null cell fails the decode."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "NotNull()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NotNull)

    def __hash__(self) -> int:
        return hash(NotNull)


def entity(cls: C) -> C:
    """Mark a class as a directly instantiable mapping target."""
    setattr(cls, _KIND_ATTR, ENTITY)
    return cls


def mapped_base(cls: C) -> C:
    """Mark a class as a base whose bindings are inherited by entities."""
    setattr(cls, _KIND_ATTR, MAPPED_BASE)
    return cls


def column_setter(name: str) -> Callable[[F], F]:
    """Bind a single-argument method to a result column.

    The decoder calls the method with the converted cell value.
    """
    column = Column(name)

    def decorator(func: F) -> F:
        setattr(func, _SETTER_ATTR, column)
        return func

    return decorator


def kind_of(cls: type) -> str | None:
    """Marker declared directly on ``cls``. Markers are not inherited."""
    return cls.__dict__.get(_KIND_ATTR)


def setter_column(member: Any) -> Column | None:
    """Column bound to a class-body member by ``@column_setter``, if any."""
    return getattr(member, _SETTER_ATTR, None) if callable(member) else None


def is_not_null(marker: Any) -> bool:
    return isinstance(marker, NotNull) or marker is NotNull
