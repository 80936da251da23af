"""Conversions that operate on text only."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .base import Conversion


class NullStringConversion(Conversion):
    """Reads any of the given tokens as None; writes None as the first one."""

    def __init__(self, nulls: Iterable[str]) -> None:
        self.nulls = tuple(nulls)
        self._lookup = frozenset(self.nulls)

    def parse(self, text: str | None) -> str | None:
        if text is None or text in self._lookup:
            return None
        return text

    def format(self, value: str | None) -> str | None:
        if value is None:
            return self.nulls[0] if self.nulls else None
        return value


class TrimConversion(Conversion):
    """Strips whitespace and, when ``length >= 0``, truncates the text."""

    def __init__(self, length: int = -1) -> None:
        self.length = length

    def _trim(self, text: str | None) -> str | None:
        if text is None:
            return None
        text = text.strip()
        if self.length >= 0:
            text = text[: self.length]
        return text

    def parse(self, text: str | None) -> str | None:
        return self._trim(text)

    def format(self, value: str | None) -> str | None:
        return self._trim(value)


class LowerCaseConversion(Conversion):
    def parse(self, text: str | None) -> str | None:
        return None if text is None else text.lower()

    def format(self, value: str | None) -> str | None:
        return None if value is None else value.lower()


class UpperCaseConversion(Conversion):
    def parse(self, text: str | None) -> str | None:
        return None if text is None else text.upper()

    def format(self, value: str | None) -> str | None:
        return None if value is None else value.upper()


class RegexReplaceConversion(Conversion):
    """
    Applies ``re.sub(expression, replacement, text)`` in both directions.

    The replacement uses Python syntax for group references (``\\1``).
    """

    def __init__(self, expression: str, replacement: str) -> None:
        self.expression = expression
        self.replacement = replacement
        self._pattern = re.compile(expression)

    def parse(self, text: str | None) -> str | None:
        return None if text is None else self._pattern.sub(self.replacement, text)

    def format(self, value: str | None) -> str | None:
        return self.parse(value)
