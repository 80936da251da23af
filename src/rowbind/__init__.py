"""
Package façade – one import gives callers the tags and the helpers that
resolve conversions and headers for record classes.

Design
------
* Thin wrappers around the process default BindingEngine.
* Callers that need isolated settings build their own BindingEngine.
"""

from __future__ import annotations

from collections.abc import Sequence
from types import ModuleType
from typing import Any, TypeVar

from .conversions import Conversion
from .core.binding import BindingEngine, get_default_engine, set_default_engine
from .exceptions import (
    BindingError,
    ConfigurationError,
    ConstructionError,
    SettingsLoadError,
    StructuralError,
)
from .models import (
    BooleanString,
    Convert,
    EnumOptions,
    EnumSelector,
    Format,
    Headers,
    LowerCase,
    Member,
    NullPolicy,
    NullString,
    Parsed,
    PropertyAccessor,
    Replace,
    Tag,
    Trim,
    UpperCase,
    tagged,
)

__all__ = [
    "BindingEngine",
    "BindingError",
    "BooleanString",
    "ConfigurationError",
    "ConstructionError",
    "Convert",
    "EnumOptions",
    "EnumSelector",
    "Format",
    "Headers",
    "LowerCase",
    "NullString",
    "Parsed",
    "Replace",
    "SettingsLoadError",
    "StructuralError",
    "Tag",
    "Trim",
    "UpperCase",
    "all_index_based",
    "all_members",
    "all_name_based",
    "apply_formatter_settings",
    "derive_header_names",
    "find_headers_tag",
    "find_meta_tag",
    "find_tags_in_namespace",
    "get_default_engine",
    "resolve_conversion",
    "resolve_default_conversion",
    "selected_indexes",
    "set_default_engine",
    "tagged",
]

_K = TypeVar("_K")


def resolve_conversion(target: Member | Any, tag: Any) -> Conversion | None:
    """
    Conversion requested by ``tag``.

    Parameters
    ----------
    target
        A :class:`~rowbind.models.Member` (its ``Parsed`` null policy is
        honoured) or a bare type.
    tag
        Any tag instance; tags that request no conversion give None.
    """
    return get_default_engine().resolve_conversion(target, tag)


def resolve_default_conversion(
    target: Member | Any, null_policy: NullPolicy | None = None
) -> Conversion | None:
    """Type-based conversion of a member or a bare type (None for ``str``)."""
    return get_default_engine().resolve_default_conversion(target, null_policy)


def apply_formatter_settings(formatter: Any, settings: Sequence[str | None]) -> None:
    """Apply ``key=value`` settings to the properties of a formatter object."""
    get_default_engine().apply_formatter_settings(formatter, settings)


def all_members(cls: type) -> dict[Member, PropertyAccessor | None]:
    return get_default_engine().all_members(cls)


def find_meta_tag(declaration: Any, kind: type[_K] | None) -> _K | None:
    return get_default_engine().find_meta_tag(declaration, kind)


def find_tags_in_namespace(declaration: Any, namespace: str | ModuleType) -> list[Any]:
    return get_default_engine().find_tags_in_namespace(declaration, namespace)


def all_index_based(cls: type) -> bool:
    return get_default_engine().all_index_based(cls)


def all_name_based(cls: type) -> bool:
    return get_default_engine().all_name_based(cls)


def selected_indexes(cls: type) -> list[int]:
    return get_default_engine().selected_indexes(cls)


def derive_header_names(cls: type) -> list[str]:
    return get_default_engine().derive_header_names(cls)


def find_headers_tag(cls: type) -> Headers | None:
    return get_default_engine().find_headers_tag(cls)
