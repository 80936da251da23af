"""Attribute mapping primitives shared by the catalog and the resolvers."""

from __future__ import annotations

import types
from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Union, get_args, get_origin

from .tags import Parsed


def substitute_null(value: str | None) -> str | None:
    """
    Apply the null-escaping convention of ``default_null_read/write``.

    ``"null"`` means None, ``"'null'"`` means the literal text ``null``,
    anything else is returned unchanged.
    """
    if value == "null":
        return None
    if value == "'null'":
        return "null"
    return value


def unwrap_annotation(hint: Any) -> tuple[Any, bool, tuple[Any, ...]]:
    """
    Split a type hint into (declared type, nullable, metadata objects).

    ``Annotated`` wrappers are stripped (their metadata collected) and
    ``X | None`` is reported as ``X`` with ``nullable=True``.
    """
    metadata: tuple[Any, ...] = ()
    if get_origin(hint) is Annotated:
        metadata = tuple(hint.__metadata__)
        hint = get_args(hint)[0]

    nullable = False
    if get_origin(hint) in (Union, types.UnionType):
        args = get_args(hint)
        non_null = tuple(a for a in args if a is not type(None))
        nullable = len(non_null) < len(args)
        if len(non_null) == 1:
            hint = non_null[0]
            if get_origin(hint) is Annotated:
                metadata += tuple(hint.__metadata__)
                hint = get_args(hint)[0]

    return hint, nullable, metadata


@dataclass(frozen=True)
class NullPolicy:
    """Substitutions applied when a token is absent or a value is None."""

    read: str | None = None
    write: str | None = None

    @classmethod
    def from_tag(cls, parsed: Parsed | None) -> NullPolicy:
        if parsed is None:
            return cls()
        return cls(
            read=substitute_null(parsed.default_null_read),
            write=substitute_null(parsed.default_null_write),
        )


@dataclass(frozen=True)
class PropertyAccessor:
    """Getter/setter pair discovered on a record class."""

    name: str
    getter: Callable[[Any], Any] | None = None
    setter: Callable[[Any, Any], None] | None = None

    @property
    def readable(self) -> bool:
        return self.getter is not None

    @property
    def writable(self) -> bool:
        return self.setter is not None


@dataclass(frozen=True, eq=False)
class Member:
    """A declared attribute of a record class."""

    name: str
    declaring_class: type
    declared_type: Any
    nullable: bool = False
    tags: tuple[Any, ...] = ()
    annotation: Any = field(default=None, repr=False)

    @classmethod
    def from_hint(cls, name: str, declaring_class: type, hint: Any) -> Member:
        declared_type, nullable, metadata = unwrap_annotation(hint)
        return cls(
            name=name,
            declaring_class=declaring_class,
            declared_type=declared_type,
            nullable=nullable,
            tags=metadata,
            annotation=hint,
        )

    @property
    def qualified_name(self) -> str:
        return f"{self.declaring_class.__qualname__}.{self.name}"


@dataclass(frozen=True)
class AttributeMapping:
    """A member paired with its optional property accessor."""

    member: Member
    accessor: PropertyAccessor | None = None

    @property
    def name(self) -> str:
        return self.member.name
