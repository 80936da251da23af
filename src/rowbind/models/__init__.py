"""Tag snapshots and attribute mapping models."""

from .mapping import (
    AttributeMapping,
    Member,
    NullPolicy,
    PropertyAccessor,
    substitute_null,
    unwrap_annotation,
)
from .tags import (
    UNSET_INDEX,
    BooleanString,
    Convert,
    EnumOptions,
    EnumSelector,
    Format,
    Headers,
    LowerCase,
    NullString,
    Parsed,
    Replace,
    Tag,
    Trim,
    UpperCase,
    tagged,
)

__all__ = [
    "UNSET_INDEX",
    "AttributeMapping",
    "BooleanString",
    "Convert",
    "EnumOptions",
    "EnumSelector",
    "Format",
    "Headers",
    "LowerCase",
    "Member",
    "NullPolicy",
    "NullString",
    "Parsed",
    "PropertyAccessor",
    "Replace",
    "Tag",
    "Trim",
    "UpperCase",
    "substitute_null",
    "tagged",
    "unwrap_annotation",
]
