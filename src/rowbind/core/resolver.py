"""Builds the conversion requested by an explicit tag."""

from __future__ import annotations

import inspect
import logging
import numbers
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from rowbind.conversions import (
    BooleanConversion,
    Conversion,
    DateConversion,
    DateTimeConversion,
    EnumConversion,
    FormattedDecimalConversion,
    LowerCaseConversion,
    NullStringConversion,
    NumericConversion,
    RegexReplaceConversion,
    TrimConversion,
    UpperCaseConversion,
)
from rowbind.exceptions import BindingError, ConfigurationError, ConstructionError
from rowbind.models.mapping import Member, NullPolicy, unwrap_annotation
from rowbind.models.tags import (
    BooleanString,
    Convert,
    EnumOptions,
    Format,
    LowerCase,
    NullString,
    Parsed,
    Replace,
    Trim,
    UpperCase,
)
from rowbind.protocols import FormattedConversion

from .formatter_config import FormatterConfigurator
from .introspection import AnnotationIntrospector

logger = logging.getLogger(__name__)


def _type_name(declared_type: Any) -> str:
    return getattr(declared_type, "__qualname__", None) or repr(declared_type)


class ConversionResolver:
    """
    Resolves the conversion a tag requests for a declared type.

    Tags that request no conversion (``Parsed``, ``Headers``, custom tags)
    resolve to None; the caller then falls back to the
    :class:`~rowbind.core.defaults.DefaultConversionResolver`.
    """

    def __init__(
        self,
        introspector: AnnotationIntrospector | None = None,
        formatter_configurator: FormatterConfigurator | None = None,
        now_keyword: str = "now",
    ) -> None:
        self._introspector = introspector or AnnotationIntrospector()
        self._formatters = formatter_configurator or FormatterConfigurator()
        self._now_keyword = now_keyword.lower()
        self._logger = logger.getChild(self.__class__.__name__)

    def resolve(self, declared_type: Any, tag: Any) -> Conversion | None:
        """Resolve ``tag`` for a bare type, without null substitutions."""
        return self._resolve(declared_type, None, tag)

    def resolve_for_member(self, member: Member, tag: Any) -> Conversion | None:
        """Resolve ``tag`` for a member, honouring its ``Parsed`` null policy."""
        return self._resolve(member.declared_type, member, tag)

    def _resolve(self, declared_type: Any, member: Member | None, tag: Any) -> Conversion | None:
        try:
            parsed = None if member is None else self._introspector.find_tag(member, Parsed)
            conversion = self._build(declared_type, member, tag, NullPolicy.from_tag(parsed))
        except BindingError:
            raise
        except Exception as exc:
            if member is None:
                raise ConfigurationError(
                    f"Unexpected error identifying conversions to apply over type "
                    f"{_type_name(declared_type)}"
                ) from exc
            raise ConfigurationError(
                f"Unexpected error identifying conversions to apply over attribute "
                f"'{member.name}' of class {member.declaring_class.__qualname__}"
            ) from exc

        if conversion is not None:
            self._logger.debug(f"{type(tag).__name__} resolved to {conversion!r}")
        return conversion

    def _build(
        self, declared_type: Any, member: Member | None, tag: Any, policy: NullPolicy
    ) -> Conversion | None:
        declared_type, nullable, _ = unwrap_annotation(declared_type)
        if member is not None:
            nullable = nullable or member.nullable

        match tag:
            case NullString(nulls=nulls):
                return NullStringConversion(nulls)
            case EnumOptions():
                return self._enum_conversion(declared_type, member, tag, policy)
            case Trim(length=length):
                return TrimConversion() if length == -1 else TrimConversion(length)
            case LowerCase():
                return LowerCaseConversion()
            case UpperCase():
                return UpperCaseConversion()
            case Replace(expression=expression, replacement=replacement):
                return RegexReplaceConversion(expression, replacement)
            case BooleanString():
                return self._boolean_conversion(declared_type, nullable, member, tag, policy)
            case Format():
                return self._formatted_conversion(declared_type, tag, policy)
            case Convert():
                return self._custom_conversion(tag)
            case _:
                return None

    # ------------------------------------------------------------------ #
    # per tag kind
    # ------------------------------------------------------------------ #

    def _enum_conversion(
        self, declared_type: Any, member: Member | None, tag: EnumOptions, policy: NullPolicy
    ) -> EnumConversion:
        if not (isinstance(declared_type, type) and issubclass(declared_type, Enum)):
            if member is None:
                raise ConfigurationError(
                    f"Invalid EnumOptions instance for converting class "
                    f"{_type_name(declared_type)}. Not an enum type."
                )
            raise ConfigurationError(
                f"Invalid EnumOptions tag on attribute '{member.name}' of type "
                f"{_type_name(declared_type)}. Attribute must be an enum type."
            )

        element = tag.custom_element.strip() or None
        null_value = None if policy.read is None else declared_type[policy.read]
        return EnumConversion(declared_type, null_value, policy.write, element, tag.selectors)

    def _boolean_conversion(
        self,
        declared_type: Any,
        nullable: bool,
        member: Member | None,
        tag: BooleanString,
        policy: NullPolicy,
    ) -> BooleanConversion:
        if declared_type is not bool:
            if member is None:
                raise ConfigurationError(
                    f"Invalid usage of BooleanString. Got type "
                    f"{_type_name(declared_type)} instead of bool."
                )
            raise ConfigurationError(
                f"Invalid tag: attribute '{member.name}' has type "
                f"{_type_name(declared_type)} instead of bool."
            )

        value_for_null = BooleanConversion.get_boolean(
            policy.read, tag.true_strings, tag.false_strings
        )
        if value_for_null is None and not nullable:
            value_for_null = False

        return BooleanConversion(
            value_for_null, policy.write, tag.true_strings, tag.false_strings
        )

    def _formatted_conversion(
        self, declared_type: Any, tag: Format, policy: NullPolicy
    ) -> Conversion | None:
        formats = tag.formats
        conversion: Conversion

        if declared_type is Decimal:
            default = None if policy.read is None else Decimal(policy.read)
            conversion = FormattedDecimalConversion(default, policy.write, formats)
        elif (
            isinstance(declared_type, type)
            and issubclass(declared_type, numbers.Number)
            and declared_type is not bool
        ):
            numeric = NumericConversion(formats)
            numeric.number_type = declared_type
            conversion = numeric
        elif declared_type is datetime:
            moment = self._null_moment(policy.read, formats)
            conversion = DateTimeConversion(moment, policy.write, formats)
        elif declared_type is date:
            moment = self._null_moment(policy.read, formats)
            conversion = DateConversion(
                None if moment is None else moment.date(), policy.write, formats
            )
        else:
            return None

        if tag.options:
            if not isinstance(conversion, FormattedConversion):
                raise ConfigurationError(
                    f"Options {list(tag.options)} not supported by conversion of type "
                    f"'{type(conversion).__qualname__}'. It must provide formatter objects."
                )
            for formatter in conversion.formatter_objects():
                self._formatters.apply(formatter, tag.options)
        return conversion

    def _null_moment(self, null_read: str | None, formats: tuple[str, ...]) -> datetime | None:
        if null_read is None:
            return None
        if null_read.lower() == self._now_keyword:
            return datetime.now()
        if not formats:
            raise ConfigurationError("No format defined")
        return datetime.strptime(null_read, formats[0])

    @staticmethod
    def _custom_conversion(tag: Convert) -> Conversion:
        conversion_class = tag.conversion_class
        described = (
            f"'{getattr(conversion_class, '__name__', conversion_class)}' "
            f"({getattr(conversion_class, '__module__', '?')}."
            f"{getattr(conversion_class, '__qualname__', conversion_class)})"
        )
        if not (isinstance(conversion_class, type) and issubclass(conversion_class, Conversion)):
            raise ConfigurationError(f"Not a valid conversion class: {described}")

        try:
            inspect.signature(conversion_class).bind(tag.args)
        except (TypeError, ValueError) as exc:
            raise ConstructionError(
                f"Could not find a constructor accepting the string arguments "
                f"{list(tag.args)} in custom conversion class {described}"
            ) from exc

        try:
            return conversion_class(tag.args)
        except Exception as exc:
            raise ConstructionError(
                f"Unexpected error instantiating custom conversion class {described}"
            ) from exc
