"""Abstract base classes for text <-> value conversions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Conversion(ABC):
    """
    Bidirectional conversion between a text token and a typed value.

    Custom conversions referenced through the ``Convert`` tag must derive
    from this class and accept the tag's argument strings as a single tuple.
    """

    @abstractmethod
    def parse(self, text: str | None) -> Any:
        """Convert a token read from a record into a value."""
        pass

    @abstractmethod
    def format(self, value: Any) -> str | None:
        """Convert a value into the token written to a record."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class NullableConversion(Conversion):
    """
    Conversion with null substitutions on both directions.

    An absent or empty token parses to ``value_if_text_is_null``; a None
    value formats to ``text_if_value_is_null``.
    """

    def __init__(
        self,
        value_if_text_is_null: Any = None,
        text_if_value_is_null: str | None = None,
    ) -> None:
        self.value_if_text_is_null = value_if_text_is_null
        self.text_if_value_is_null = text_if_value_is_null

    def parse(self, text: str | None) -> Any:
        if text is None or text == "":
            return self.value_if_text_is_null
        return self._from_text(text)

    def format(self, value: Any) -> str | None:
        if value is None:
            return self.text_if_value_is_null
        return self._to_text(value)

    @abstractmethod
    def _from_text(self, text: str) -> Any:
        pass

    def _to_text(self, value: Any) -> str:
        return str(value)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"value_if_text_is_null={self.value_if_text_is_null!r}, "
            f"text_if_value_is_null={self.text_if_value_is_null!r})"
        )
