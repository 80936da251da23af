"""Applies ``key=value`` option strings to formatter helper objects."""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rowbind.conversions.formatters import Char, CurrencyCode, DateSymbols, currency_code
from rowbind.exceptions import ConfigurationError
from rowbind.models.mapping import unwrap_annotation

logger = logging.getLogger(__name__)

DECIMAL_SYMBOLS_PROPERTY = "decimal_format_symbols"


def parse_formatter_settings(settings: Sequence[str | None]) -> dict[str, str]:
    """
    Turn ``["key=value", ...]`` into a mapping.

    Each entry must contain exactly one ``=`` separating a non-empty key
    from a non-empty value; later entries override earlier ones.
    """
    values: dict[str, str] = {}
    for setting in settings:
        if setting is None:
            raise ConfigurationError(f"Illegal format among: {list(settings)}")
        key, _, value = setting.partition("=")
        if setting.count("=") != 1 or not key or not value:
            raise ConfigurationError(
                f"Illegal format setting '{setting}' among: {list(settings)}"
            )
        values[key] = value
    return values


@dataclass(frozen=True)
class FormatterProperty:
    """A configurable property of a formatter class."""

    name: str
    value_type: Any
    setter: Callable[[Any, Any], None] | None


def discover_properties(formatter_type: type) -> list[FormatterProperty]:
    """
    Enumerate the public properties of ``formatter_type``, sorted by name.

    The value type of a property is its getter's return annotation.
    """
    found: list[FormatterProperty] = []
    for name, prop in inspect.getmembers(
        formatter_type, lambda v: isinstance(v, property)
    ):
        if name.startswith("_"):
            continue
        hints = typing.get_type_hints(prop.fget) if prop.fget else {}
        value_type, _, _ = unwrap_annotation(hints.get("return", str))
        found.append(FormatterProperty(name, value_type, prop.fset))
    return found


class FormatterConfigurator:
    """
    Sets formatter properties from option strings.

    Supported value types: ``str``, ``int``, ``Char``, ``bool``,
    ``CurrencyCode``, ``tzinfo`` and ``DateSymbols``. The
    ``decimal_format_symbols`` property is special: options naming one of
    its nested properties are applied to a fresh symbol table which then
    replaces the formatter's own.
    """

    def __init__(self) -> None:
        self._logger = logger.getChild(self.__class__.__name__)

    def apply(self, formatter: Any, settings: Sequence[str | None]) -> None:
        if not settings:
            return

        values = parse_formatter_settings(settings)

        for prop in self._discover(type(formatter)):
            value = values.pop(prop.name, None)
            if value is not None:
                self._invoke_setter(formatter, prop, value)

            if prop.name == DECIMAL_SYMBOLS_PROPERTY:
                self._apply_nested_symbols(formatter, prop, values)

        if values:
            raise ConfigurationError(
                f"Cannot find properties in formatter of type "
                f"'{type(formatter).__qualname__}': {values}"
            )

    def _discover(self, formatter_type: type) -> list[FormatterProperty]:
        try:
            return discover_properties(formatter_type)
        except Exception as e:
            self._logger.warning(
                f"Cannot enumerate properties of {formatter_type.__qualname__}: {e}"
            )
            return []

    def _apply_nested_symbols(
        self, formatter: Any, prop: FormatterProperty, values: dict[str, str]
    ) -> None:
        symbols = prop.value_type()
        modified = False
        try:
            for nested in self._discover(type(symbols)):
                value = values.pop(nested.name, None)
                if value is not None:
                    self._invoke_setter(symbols, nested, value)
                    modified = True

            if modified:
                if prop.setter is None:
                    raise ConfigurationError(
                        f"No setter defined for property {prop.name} of formatter "
                        f"'{type(formatter).__qualname__}'"
                    )
                prop.setter(formatter, symbols)
        except ConfigurationError:
            raise
        except Exception as exc:
            raise ConfigurationError(
                f"Error trying to configure decimal symbols of formatter "
                f"'{type(formatter).__qualname__}'"
            ) from exc

    def _invoke_setter(self, formatter: Any, prop: FormatterProperty, value: str) -> None:
        owner = type(formatter).__qualname__
        if prop.setter is None:
            raise ConfigurationError(
                f"Cannot set property '{prop.name}' of formatter '{owner}' "
                "to '{value}'. No setter defined",
                value=value,
            )

        parameter_value = self._coerce(owner, prop, value)
        try:
            prop.setter(formatter, parameter_value)
        except Exception as exc:
            raise ConfigurationError(
                f"Error setting property '{prop.name}' of formatter '{owner}' "
                "with '{parameter_value}' (converted from '{value}')",
                parameter_value=parameter_value,
                value=value,
            ) from exc

        self._logger.debug(f"Set {owner}.{prop.name} = {parameter_value!r}")

    @staticmethod
    def _coerce(owner: str, prop: FormatterProperty, value: str) -> Any:
        target = prop.value_type
        try:
            if target is str:
                return value
            if target is int:
                return int(value)
            if target is Char:
                return Char(value[0])
            if target is bool:
                return value.strip().lower() == "true"
            if target is CurrencyCode:
                return currency_code(value)
            if isinstance(target, type) and issubclass(target, tzinfo):
                return ZoneInfo(value)
            if target is DateSymbols:
                return DateSymbols.for_locale(value)
        except (ValueError, ZoneInfoNotFoundError) as exc:
            raise ConfigurationError(
                f"Cannot set property '{prop.name}' of formatter '{owner}'. "
                f"Invalid value '{{value}}' for {getattr(target, '__name__', target)}",
                value=value,
            ) from exc

        raise ConfigurationError(
            f"Cannot set property '{prop.name}' of formatter '{owner}'. "
            f"Cannot convert '{{value}}' to instance of "
            f"{getattr(target, '__name__', target)}",
            value=value,
        )
