"""
tags.py – declarative metadata tags
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Immutable snapshots of the tags a record class attaches to its attributes
(through ``typing.Annotated``) or to itself and to other tags (through
:func:`tagged`).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNSET_INDEX: int = -1

_T = TypeVar("_T", bound=type)

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class EnumSelector(str, Enum):
    """How an enum constant is matched against (and written as) text."""

    NAME = "name"
    ORDINAL = "ordinal"
    STRING = "string"
    CUSTOM_FIELD = "custom_field"
    CUSTOM_METHOD = "custom_method"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class Tag(BaseModel):
    """Base class of every metadata tag. Tag kind == concrete subclass."""

    model_config = ConfigDict(frozen=True, extra="forbid")


def tagged(*tags: Any) -> Callable[[_T], _T]:
    """
    Attach tags to a class: a record class, or a tag class (meta-tag).

    Tags are kept in declaration order and are *not* inherited by
    subclasses.
    """

    def decorate(cls: _T) -> _T:
        setattr(cls, "__tags__", tuple(tags))
        return cls

    return decorate


# ---------------------------------------------------------------------------
# Column mapping
# ---------------------------------------------------------------------------


class Parsed(Tag):
    """Maps an attribute to a column, by header name or by position."""

    field: str = Field(
        "", description="Header name override; empty means the member name."
    )
    index: int = Field(
        UNSET_INDEX,
        ge=UNSET_INDEX,
        description="Column position; -1 signifies *name based*.",
    )
    default_null_read: str = Field(
        "null", description="Value used when the incoming token is absent."
    )
    default_null_write: str = Field(
        "null", description="Text written when the attribute value is None."
    )
    apply_default_conversion: bool = Field(
        True, description="Fall back to the type-based conversion."
    )


class Headers(Tag):
    """Class-level header sequence used when reading or writing records."""

    sequence: tuple[str, ...] = ()
    extract: bool = False
    write: bool = True


# ---------------------------------------------------------------------------
# Conversion requests
# ---------------------------------------------------------------------------


class NullString(Tag):
    """Tokens that must be read as None."""

    nulls: tuple[str, ...] = ()


class EnumOptions(Tag):
    """Selectors used to match enum constants against text."""

    selectors: tuple[EnumSelector, ...] = (EnumSelector.NAME,)
    custom_element: str = ""

    @field_validator("selectors")
    @classmethod
    def _not_empty(cls, v: tuple[EnumSelector, ...]) -> tuple[EnumSelector, ...]:
        if not v:
            raise ValueError("EnumOptions.selectors must not be empty")
        return v


class Trim(Tag):
    """Strip surrounding whitespace, optionally truncating to ``length``."""

    length: int = Field(-1, ge=-1, description="-1 signifies *unbounded*.")


class LowerCase(Tag):
    """Lower-case the text."""


class UpperCase(Tag):
    """Upper-case the text."""


class Replace(Tag):
    """Regular-expression replacement applied to the text."""

    expression: str
    replacement: str


class BooleanString(Tag):
    """Explicit sets of tokens read as True and False."""

    true_strings: tuple[str, ...]
    false_strings: tuple[str, ...]


class Format(Tag):
    """Format patterns and ``key=value`` formatter options."""

    formats: tuple[str, ...] = ()
    options: tuple[str, ...] = ()


class Convert(Tag):
    """Reference to a custom conversion class and its constructor arguments."""

    conversion_class: type[Any]
    args: tuple[str, ...] = ()
