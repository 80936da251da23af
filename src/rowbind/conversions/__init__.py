"""Concrete conversions built by the resolvers."""

from .base import Conversion, NullableConversion
from .formatted import (
    DateConversion,
    DateTimeConversion,
    FormattedDecimalConversion,
    NumericConversion,
)
from .formatters import (
    Char,
    CurrencyCode,
    DateFormatter,
    DateSymbols,
    DecimalFormatter,
    DecimalSymbols,
)
from .text import (
    LowerCaseConversion,
    NullStringConversion,
    RegexReplaceConversion,
    TrimConversion,
    UpperCaseConversion,
)
from .values import (
    BooleanConversion,
    CharConversion,
    DecimalConversion,
    EnumConversion,
    FloatConversion,
    IntegerConversion,
)

__all__ = [
    "BooleanConversion",
    "Char",
    "CharConversion",
    "Conversion",
    "CurrencyCode",
    "DateConversion",
    "DateFormatter",
    "DateSymbols",
    "DateTimeConversion",
    "DecimalConversion",
    "DecimalFormatter",
    "DecimalSymbols",
    "EnumConversion",
    "FloatConversion",
    "FormattedDecimalConversion",
    "IntegerConversion",
    "LowerCaseConversion",
    "NullStringConversion",
    "NullableConversion",
    "NumericConversion",
    "RegexReplaceConversion",
    "TrimConversion",
    "UpperCaseConversion",
]
