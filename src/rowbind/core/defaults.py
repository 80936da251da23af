"""Type-based conversion used when no tag requests one explicitly."""

from __future__ import annotations

import logging
from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import Any

from rowbind.conversions import (
    BooleanConversion,
    Char,
    CharConversion,
    Conversion,
    DecimalConversion,
    EnumConversion,
    FloatConversion,
    IntegerConversion,
    NullableConversion,
)
from rowbind.exceptions import ConfigurationError
from rowbind.models.mapping import Member, NullPolicy, unwrap_annotation
from rowbind.models.tags import Parsed

from .introspection import AnnotationIntrospector

logger = logging.getLogger(__name__)


def _parse_bool(text: str) -> bool:
    return text.strip().lower() == "true"


def _parse_char(text: str) -> str:
    if len(text) != 1:
        raise ConfigurationError(
            f"Invalid default value for character '{text}'. "
            "It should contain one character only."
        )
    return text[0]


_DEFAULTS: dict[Any, tuple[Callable[[], NullableConversion], Callable[[str], Any]]] = {
    bool: (BooleanConversion, _parse_bool),
    Char: (CharConversion, _parse_char),
    int: (IntegerConversion, int),
    float: (FloatConversion, float),
    Decimal: (DecimalConversion, Decimal),
}


class DefaultConversionResolver:
    """Maps a declared type to the library's standard conversion."""

    def __init__(self, introspector: AnnotationIntrospector | None = None) -> None:
        self._introspector = introspector or AnnotationIntrospector()
        self._logger = logger.getChild(self.__class__.__name__)

    def resolve(
        self, declared_type: Any, null_policy: NullPolicy | None = None
    ) -> Conversion | None:
        """
        Return the standard conversion of ``declared_type``, or None when the
        type has none (plain ``str`` and object-valued attributes).
        """
        policy = null_policy or NullPolicy()
        declared_type, _, _ = unwrap_annotation(declared_type)

        entry = _DEFAULTS.get(declared_type)
        if entry is None and isinstance(declared_type, type) and issubclass(
            declared_type, Enum
        ):
            enum_type = declared_type
            entry = (lambda: EnumConversion(enum_type), lambda text: enum_type[text])
        if entry is None:
            return None

        factory, parse_null = entry
        value_if_null = None
        if policy.read is not None:
            try:
                value_if_null = parse_null(policy.read)
            except (ValueError, KeyError, ArithmeticError) as exc:
                raise ConfigurationError(
                    f"Invalid default value '{policy.read}' for type "
                    f"{getattr(declared_type, '__name__', declared_type)}"
                ) from exc

        conversion = factory()
        conversion.value_if_text_is_null = value_if_null
        conversion.text_if_value_is_null = policy.write
        self._logger.debug(
            f"Default conversion for {getattr(declared_type, '__name__', declared_type)}: "
            f"{conversion!r}"
        )
        return conversion

    def resolve_for_member(self, member: Member) -> Conversion | None:
        """Same as :meth:`resolve`, reading the member's ``Parsed`` tag."""
        parsed = self._introspector.find_tag(member, Parsed)
        return self.resolve(member.declared_type, NullPolicy.from_tag(parsed))
