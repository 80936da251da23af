"""Conversions between text and scalar Python values."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from rowbind.models.tags import EnumSelector

from .base import NullableConversion


class BooleanConversion(NullableConversion):
    """Reads booleans from explicit, case-insensitive token sets."""

    def __init__(
        self,
        value_if_text_is_null: bool | None = None,
        text_if_value_is_null: str | None = None,
        true_strings: Sequence[str] = ("true",),
        false_strings: Sequence[str] = ("false",),
    ) -> None:
        super().__init__(value_if_text_is_null, text_if_value_is_null)
        if not true_strings or not false_strings:
            raise ValueError("Both true and false token sets must be provided")
        self.true_strings = tuple(true_strings)
        self.false_strings = tuple(false_strings)

    @staticmethod
    def get_boolean(
        text: str | None, true_strings: Iterable[str], false_strings: Iterable[str]
    ) -> bool | None:
        """
        Resolve ``text`` against the token sets.

        Returns None for None input; raises ValueError when the text belongs
        to neither set.
        """
        if text is None:
            return None
        true_strings = tuple(true_strings)
        false_strings = tuple(false_strings)
        normalized = text.strip().lower()
        if normalized in {s.strip().lower() for s in true_strings}:
            return True
        if normalized in {s.strip().lower() for s in false_strings}:
            return False
        raise ValueError(
            f"Unable to convert '{text}' to boolean. "
            f"Expected one of {list(true_strings)} or {list(false_strings)}"
        )

    def _from_text(self, text: str) -> bool | None:
        return self.get_boolean(text, self.true_strings, self.false_strings)

    def _to_text(self, value: Any) -> str:
        return self.true_strings[0] if value else self.false_strings[0]


class CharConversion(NullableConversion):
    def _from_text(self, text: str) -> str:
        if len(text) != 1:
            raise ValueError(f"Expected a single character, got '{text}'")
        return text


class IntegerConversion(NullableConversion):
    def _from_text(self, text: str) -> int:
        return int(text.strip())


class FloatConversion(NullableConversion):
    def _from_text(self, text: str) -> float:
        return float(text.strip())


class DecimalConversion(NullableConversion):
    def _from_text(self, text: str) -> Decimal:
        try:
            return Decimal(text.strip())
        except InvalidOperation as exc:
            raise ValueError(f"Unparseable decimal '{text}'") from exc


class EnumConversion(NullableConversion):
    """
    Matches enum constants by name, ordinal, ``str()`` or a custom element.

    Every selector contributes keys to the lookup; the first selector
    decides what is written back.
    """

    def __init__(
        self,
        enum_type: type[Enum],
        value_if_text_is_null: Enum | None = None,
        text_if_value_is_null: str | None = None,
        custom_element: str | None = None,
        selectors: Sequence[EnumSelector] = (EnumSelector.NAME,),
    ) -> None:
        super().__init__(value_if_text_is_null, text_if_value_is_null)
        if not (isinstance(enum_type, type) and issubclass(enum_type, Enum)):
            raise ValueError(f"{enum_type!r} is not an enum type")

        self.enum_type = enum_type
        self.custom_element = custom_element
        self.selectors = tuple(selectors) or (EnumSelector.NAME,)

        custom = {EnumSelector.CUSTOM_FIELD, EnumSelector.CUSTOM_METHOD}
        if custom.intersection(self.selectors) and not custom_element:
            raise ValueError(
                f"A custom element name is required to use selectors "
                f"{[s.value for s in self.selectors]} with {enum_type.__name__}"
            )

        self._constants = list(enum_type)
        self._lookup: dict[str, Enum] = {}
        for selector in self.selectors:
            for position, constant in enumerate(self._constants):
                self._lookup.setdefault(self._key(selector, position, constant), constant)

    def _key(self, selector: EnumSelector, position: int, constant: Enum) -> str:
        if selector is EnumSelector.NAME:
            return constant.name
        if selector is EnumSelector.ORDINAL:
            return str(position)
        if selector is EnumSelector.STRING:
            return str(constant)
        element = getattr(constant, self.custom_element or "")
        if selector is EnumSelector.CUSTOM_METHOD:
            element = element()
        return str(element)

    def _from_text(self, text: str) -> Enum:
        try:
            return self._lookup[text]
        except KeyError:
            raise ValueError(
                f"Cannot convert '{text}' to {self.enum_type.__name__}. "
                f"Valid values: {sorted(self._lookup)}"
            ) from None

    def _to_text(self, value: Any) -> str:
        position = self._constants.index(value)
        return self._key(self.selectors[0], position, value)
