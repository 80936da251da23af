"""Unit tests for DefaultConversionResolver (rowbind/core/defaults.py)."""

from decimal import Decimal
from enum import Enum
from typing import Annotated

import pytest

from rowbind.conversions import (
    BooleanConversion,
    Char,
    CharConversion,
    DecimalConversion,
    EnumConversion,
    FloatConversion,
    IntegerConversion,
)
from rowbind.core.defaults import DefaultConversionResolver
from rowbind.exceptions import ConfigurationError
from rowbind.models.mapping import Member, NullPolicy
from rowbind.models.tags import Parsed, Tag, tagged


class Status(Enum):
    ACTIVE = 1
    CLOSED = 2


class Row:
    pass


@tagged(Parsed(default_null_read="-1"))
class MinusOneWhenBlank(Tag):
    pass


@pytest.fixture
def defaults() -> DefaultConversionResolver:
    return DefaultConversionResolver()


class TestTypeTable:
    @pytest.mark.parametrize(
        "declared_type, expected",
        [
            (bool, BooleanConversion),
            (Char, CharConversion),
            (int, IntegerConversion),
            (float, FloatConversion),
            (Decimal, DecimalConversion),
            (Status, EnumConversion),
            (int | None, IntegerConversion),
        ],
    )
    def test_mapped_types(
        self, defaults: DefaultConversionResolver, declared_type, expected
    ) -> None:
        conversion = defaults.resolve(declared_type)
        assert type(conversion) is expected
        assert conversion.value_if_text_is_null is None
        assert conversion.text_if_value_is_null is None

    @pytest.mark.parametrize("declared_type", [str, list, object])
    def test_unmapped_types(self, defaults: DefaultConversionResolver, declared_type) -> None:
        assert defaults.resolve(declared_type) is None


class TestNullPolicy:
    @pytest.mark.parametrize(
        "declared_type, read, expected",
        [
            (int, "0", 0),
            (float, "1.5", 1.5),
            (Decimal, "2.50", Decimal("2.50")),
            (bool, "TRUE", True),
            (bool, "yes", False),
            (Char, "x", "x"),
            (Status, "CLOSED", Status.CLOSED),
        ],
    )
    def test_null_read_parsed(
        self, defaults: DefaultConversionResolver, declared_type, read, expected
    ) -> None:
        conversion = defaults.resolve(declared_type, NullPolicy(read=read, write="-"))
        assert conversion.value_if_text_is_null == expected
        assert conversion.text_if_value_is_null == "-"
        assert conversion.parse(None) == expected

    def test_char_with_several_characters(
        self, defaults: DefaultConversionResolver
    ) -> None:
        with pytest.raises(ConfigurationError, match="one character only"):
            defaults.resolve(Char, NullPolicy(read="ab"))

    def test_char_without_characters(
        self, defaults: DefaultConversionResolver
    ) -> None:
        with pytest.raises(ConfigurationError, match="one character only"):
            defaults.resolve(Char, NullPolicy(read=""))

    def test_char_member_with_empty_null_read(
        self, defaults: DefaultConversionResolver
    ) -> None:
        hint = Annotated[Char, Parsed(default_null_read="")]
        with pytest.raises(ConfigurationError, match="one character only"):
            defaults.resolve_for_member(Member.from_hint("flag", Row, hint))

    @pytest.mark.parametrize(
        "declared_type, read",
        [(int, "abc"), (Decimal, "1,5"), (Status, "UNKNOWN")],
    )
    def test_unparseable_null_read(
        self, defaults: DefaultConversionResolver, declared_type, read
    ) -> None:
        with pytest.raises(ConfigurationError, match="Invalid default value"):
            defaults.resolve(declared_type, NullPolicy(read=read))


class TestMemberForm:
    def test_reads_parsed_tag(self, defaults: DefaultConversionResolver) -> None:
        hint = Annotated[int, Parsed(default_null_read="7", default_null_write="'null'")]
        conversion = defaults.resolve_for_member(Member.from_hint("qty", Row, hint))
        assert conversion.value_if_text_is_null == 7
        assert conversion.text_if_value_is_null == "null"

    def test_reads_parsed_through_meta_tag(
        self, defaults: DefaultConversionResolver
    ) -> None:
        hint = Annotated[int, MinusOneWhenBlank()]
        conversion = defaults.resolve_for_member(Member.from_hint("qty", Row, hint))
        assert conversion.parse("") == -1

    def test_string_member(self, defaults: DefaultConversionResolver) -> None:
        hint = Annotated[str, Parsed()]
        assert defaults.resolve_for_member(Member.from_hint("name", Row, hint)) is None
