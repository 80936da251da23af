"""Conversions driven by format patterns and formatter helper objects."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from .base import NullableConversion
from .formatters import DateFormatter, DecimalFormatter

DEFAULT_DATE_PATTERN = "%Y-%m-%d"


class _PatternConversion(NullableConversion):
    """Tries each formatter in turn when parsing; formats with the first."""

    def __init__(
        self,
        value_if_text_is_null: Any,
        text_if_value_is_null: str | None,
        formats: Sequence[str],
        factory: Callable[[str], Any],
        default_pattern: str,
    ) -> None:
        super().__init__(value_if_text_is_null, text_if_value_is_null)
        patterns = tuple(formats) or (default_pattern,)
        self._formatters = tuple(factory(p) for p in patterns)

    def formatter_objects(self) -> tuple[Any, ...]:
        return self._formatters

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(f.pattern for f in self._formatters)

    def _from_text(self, text: str) -> Any:
        errors: list[str] = []
        for formatter in self._formatters:
            try:
                return formatter.parse(text)
            except ValueError as exc:
                errors.append(str(exc))
        raise ValueError(
            f"Cannot parse '{text}' using any of the patterns {list(self.patterns)}: "
            + "; ".join(errors)
        )

    def _to_text(self, value: Any) -> str:
        return self._formatters[0].format(value)


class FormattedDecimalConversion(_PatternConversion):
    def __init__(
        self,
        value_if_text_is_null: Decimal | None = None,
        text_if_value_is_null: str | None = None,
        formats: Sequence[str] = (),
    ) -> None:
        super().__init__(
            value_if_text_is_null, text_if_value_is_null, formats, DecimalFormatter, ""
        )


class NumericConversion(_PatternConversion):
    """Parses formatted numbers into ``number_type`` (Decimal when unset)."""

    def __init__(self, formats: Sequence[str] = ()) -> None:
        super().__init__(None, None, formats, DecimalFormatter, "")
        self.number_type: type | None = None

    def _from_text(self, text: str) -> Any:
        number = super()._from_text(text)
        if self.number_type is None:
            return number
        return self.number_type(number)


class DateTimeConversion(_PatternConversion):
    def __init__(
        self,
        value_if_text_is_null: datetime | None = None,
        text_if_value_is_null: str | None = None,
        formats: Sequence[str] = (),
    ) -> None:
        super().__init__(
            value_if_text_is_null,
            text_if_value_is_null,
            formats,
            DateFormatter,
            DEFAULT_DATE_PATTERN,
        )


class DateConversion(NullableConversion):
    """Wraps a :class:`DateTimeConversion`, exposing ``datetime.date`` values."""

    def __init__(
        self,
        value_if_text_is_null: date | None = None,
        text_if_value_is_null: str | None = None,
        formats: Sequence[str] = (),
    ) -> None:
        super().__init__(value_if_text_is_null, text_if_value_is_null)
        self._datetime = DateTimeConversion(None, text_if_value_is_null, formats)

    def formatter_objects(self) -> tuple[Any, ...]:
        return self._datetime.formatter_objects()

    def _from_text(self, text: str) -> date:
        return self._datetime.parse(text).date()

    def _to_text(self, value: Any) -> str:
        return self._datetime.format(datetime.combine(value, time()))
