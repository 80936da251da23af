"""
Formatter helpers configured through ``key=value`` options.

Every public ``property`` below is a configurable option; its getter's
return annotation is the type the option text is coerced to.
"""

from __future__ import annotations

import re
from datetime import datetime, tzinfo
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import NewType

Char = NewType("Char", str)
CurrencyCode = NewType("CurrencyCode", str)

_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def currency_code(value: str) -> CurrencyCode:
    """Validate an ISO 4217 style currency code."""
    if not _CURRENCY_RE.match(value):
        raise ValueError(f"Invalid currency code '{value}'")
    return CurrencyCode(value)


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


class DecimalSymbols:
    """Symbol table used to localise formatted numbers."""

    def __init__(self) -> None:
        self._decimal_separator = Char(".")
        self._grouping_separator = Char(",")
        self._minus_sign = Char("-")
        self._currency_symbol = ""

    @property
    def decimal_separator(self) -> Char:
        return self._decimal_separator

    @decimal_separator.setter
    def decimal_separator(self, value: Char) -> None:
        self._decimal_separator = value

    @property
    def grouping_separator(self) -> Char:
        return self._grouping_separator

    @grouping_separator.setter
    def grouping_separator(self, value: Char) -> None:
        self._grouping_separator = value

    @property
    def minus_sign(self) -> Char:
        return self._minus_sign

    @minus_sign.setter
    def minus_sign(self, value: Char) -> None:
        self._minus_sign = value

    @property
    def currency_symbol(self) -> str:
        return self._currency_symbol

    @currency_symbol.setter
    def currency_symbol(self, value: str) -> None:
        self._currency_symbol = value

    def __repr__(self) -> str:
        return (
            f"DecimalSymbols(decimal={self._decimal_separator!r}, "
            f"grouping={self._grouping_separator!r}, minus={self._minus_sign!r})"
        )


class DecimalFormatter:
    """Formats and parses numbers with a Python format-spec pattern."""

    def __init__(self, pattern: str = "") -> None:
        self._pattern = pattern
        self._grouping_used = True
        self._maximum_fraction_digits = -1
        self._currency: CurrencyCode | None = None
        self._symbols = DecimalSymbols()

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def grouping_used(self) -> bool:
        return self._grouping_used

    @grouping_used.setter
    def grouping_used(self, value: bool) -> None:
        self._grouping_used = value

    @property
    def maximum_fraction_digits(self) -> int:
        return self._maximum_fraction_digits

    @maximum_fraction_digits.setter
    def maximum_fraction_digits(self, value: int) -> None:
        self._maximum_fraction_digits = value

    @property
    def currency(self) -> CurrencyCode | None:
        return self._currency

    @currency.setter
    def currency(self, value: CurrencyCode) -> None:
        self._currency = value

    @property
    def decimal_format_symbols(self) -> DecimalSymbols:
        return self._symbols

    @decimal_format_symbols.setter
    def decimal_format_symbols(self, value: DecimalSymbols) -> None:
        self._symbols = value

    def _currency_prefix(self) -> str:
        if self._currency is None:
            return ""
        return self._symbols.currency_symbol or self._currency

    def format(self, value: Decimal | int | float) -> str:
        if self._maximum_fraction_digits >= 0 and not isinstance(value, int):
            exponent = Decimal(1).scaleb(-self._maximum_fraction_digits)
            value = Decimal(str(value)).quantize(exponent, ROUND_HALF_EVEN)

        text = format(value, self._pattern)
        if not self._grouping_used:
            text = text.replace(",", "")

        symbols = self._symbols
        text = text.translate(
            str.maketrans(
                {
                    ",": symbols.grouping_separator,
                    ".": symbols.decimal_separator,
                    "-": symbols.minus_sign,
                }
            )
        )
        return self._currency_prefix() + text

    def parse(self, text: str) -> Decimal:
        symbols = self._symbols
        normalized = text.strip()

        prefix = self._currency_prefix()
        if prefix and normalized.startswith(prefix):
            normalized = normalized[len(prefix) :].strip()

        percent = normalized.endswith("%") and self._pattern.endswith("%")
        if percent:
            normalized = normalized[:-1]

        normalized = (
            normalized.replace(symbols.grouping_separator, "")
            .replace(symbols.decimal_separator, ".")
            .replace(symbols.minus_sign, "-")
        )
        try:
            number = Decimal(normalized)
        except InvalidOperation as exc:
            raise ValueError(
                f"Unparseable number '{text}' (pattern '{self._pattern}')"
            ) from exc
        return number / 100 if percent else number


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_LOCALE_NAMES: dict[str, tuple[tuple[str, ...], ...]] = {
    "en": (
        ("January", "February", "March", "April", "May", "June", "July",
         "August", "September", "October", "November", "December"),
        ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep",
         "Oct", "Nov", "Dec"),
        ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
         "Sunday"),
        ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
    ),
    "fr": (
        ("janvier", "février", "mars", "avril", "mai", "juin", "juillet",
         "août", "septembre", "octobre", "novembre", "décembre"),
        ("janv.", "févr.", "mars", "avr.", "mai", "juin", "juil.", "août",
         "sept.", "oct.", "nov.", "déc."),
        ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi",
         "dimanche"),
        ("lun.", "mar.", "mer.", "jeu.", "ven.", "sam.", "dim."),
    ),
    "de": (
        ("Januar", "Februar", "März", "April", "Mai", "Juni", "Juli",
         "August", "September", "Oktober", "November", "Dezember"),
        ("Jan.", "Feb.", "März", "Apr.", "Mai", "Juni", "Juli", "Aug.",
         "Sept.", "Okt.", "Nov.", "Dez."),
        ("Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag",
         "Samstag", "Sonntag"),
        ("Mo.", "Di.", "Mi.", "Do.", "Fr.", "Sa.", "So."),
    ),
    "es": (
        ("enero", "febrero", "marzo", "abril", "mayo", "junio", "julio",
         "agosto", "septiembre", "octubre", "noviembre", "diciembre"),
        ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept",
         "oct", "nov", "dic"),
        ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado",
         "domingo"),
        ("lun", "mar", "mié", "jue", "vie", "sáb", "dom"),
    ),
}

_NAME_DIRECTIVE = re.compile(r"%[%BbAa]")


class DateSymbols:
    """Month and weekday names for one language."""

    def __init__(self, language: str = "en") -> None:
        if language not in _LOCALE_NAMES:
            raise ValueError(
                f"Unsupported locale '{language}'. "
                f"Available: {', '.join(sorted(_LOCALE_NAMES))}"
            )
        self.language = language
        self.months, self.short_months, self.weekdays, self.short_weekdays = (
            _LOCALE_NAMES[language]
        )

    @classmethod
    def for_locale(cls, locale_code: str) -> DateSymbols:
        """Build the symbols of a locale code such as ``fr`` or ``de_DE``."""
        language = re.split(r"[_\-]", locale_code.strip(), maxsplit=1)[0]
        return cls(language.lower())

    def name_for(self, directive: str, value: datetime) -> str:
        if directive == "%B":
            return self.months[value.month - 1]
        if directive == "%b":
            return self.short_months[value.month - 1]
        if directive == "%A":
            return self.weekdays[value.weekday()]
        return self.short_weekdays[value.weekday()]

    def to_english(self, text: str, ignore_case: bool = False) -> str:
        """Replace this locale's names in ``text`` with English ones."""
        if self.language == "en":
            return text
        english = _LOCALE_NAMES["en"]
        pairs: list[tuple[str, str]] = []
        for own, eng in zip(
            (self.months, self.short_months, self.weekdays, self.short_weekdays),
            english,
        ):
            pairs.extend(zip(own, eng))
        # longest first so that full names win over their abbreviations
        for own_name, eng_name in sorted(pairs, key=lambda p: -len(p[0])):
            flags = re.IGNORECASE if ignore_case else 0
            text = re.sub(re.escape(own_name), eng_name, text, flags=flags)
        return text

    def __repr__(self) -> str:
        return f"DateSymbols({self.language!r})"


class DateFormatter:
    """Formats and parses datetimes with a ``strftime`` pattern."""

    def __init__(self, pattern: str) -> None:
        self._pattern = pattern
        self._lenient = False
        self._time_zone: tzinfo | None = None
        self._symbols = DateSymbols()

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def lenient(self) -> bool:
        return self._lenient

    @lenient.setter
    def lenient(self, value: bool) -> None:
        self._lenient = value

    @property
    def time_zone(self) -> tzinfo | None:
        return self._time_zone

    @time_zone.setter
    def time_zone(self, value: tzinfo) -> None:
        self._time_zone = value

    @property
    def date_format_symbols(self) -> DateSymbols:
        return self._symbols

    @date_format_symbols.setter
    def date_format_symbols(self, value: DateSymbols) -> None:
        self._symbols = value

    def format(self, value: datetime) -> str:
        if self._time_zone is not None and value.tzinfo is not None:
            value = value.astimezone(self._time_zone)

        def expand(match: re.Match[str]) -> str:
            directive = match.group(0)
            if directive == "%%":
                return directive
            return self._symbols.name_for(directive, value)

        return value.strftime(_NAME_DIRECTIVE.sub(expand, self._pattern))

    def parse(self, text: str) -> datetime:
        if self._lenient:
            text = " ".join(text.split())
        text = self._symbols.to_english(text, ignore_case=self._lenient)
        parsed = datetime.strptime(text, self._pattern)
        if self._time_zone is not None and parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self._time_zone)
        return parsed
