"""
Unit tests for attribute mapping primitives (rowbind/models/mapping.py)
"""

from typing import Annotated, Optional, Union

import pytest

from rowbind.models.mapping import (
    AttributeMapping,
    Member,
    NullPolicy,
    PropertyAccessor,
    substitute_null,
    unwrap_annotation,
)
from rowbind.models.tags import Parsed, Trim


class Invoice:
    pass


class TestSubstituteNull:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("null", None),
            ("'null'", "null"),
            ("N/A", "N/A"),
            ("", ""),
            ("NULL", "NULL"),
            (None, None),
        ],
    )
    def test_convention(self, value, expected) -> None:
        assert substitute_null(value) == expected


class TestUnwrapAnnotation:
    def test_bare_type_is_not_nullable(self) -> None:
        assert unwrap_annotation(int) == (int, False, ())

    def test_optional_is_nullable(self) -> None:
        assert unwrap_annotation(int | None) == (int, True, ())
        assert unwrap_annotation(Optional[int]) == (int, True, ())

    def test_annotated_metadata_collected(self) -> None:
        hint = Annotated[int | None, Parsed(index=0), Trim()]
        declared, nullable, metadata = unwrap_annotation(hint)
        assert declared is int
        assert nullable is True
        assert metadata == (Parsed(index=0), Trim())

    def test_annotated_inside_optional(self) -> None:
        hint = Optional[Annotated[str, Trim()]]
        assert unwrap_annotation(hint) == (str, True, (Trim(),))

    def test_wider_union_left_untouched(self) -> None:
        declared, nullable, metadata = unwrap_annotation(Union[int, str])
        assert declared == Union[int, str]
        assert nullable is False
        assert metadata == ()


class TestNullPolicy:
    def test_without_tag(self) -> None:
        assert NullPolicy.from_tag(None) == NullPolicy(None, None)

    def test_defaults_mean_absent(self) -> None:
        assert NullPolicy.from_tag(Parsed()) == NullPolicy(None, None)

    def test_escaped_and_plain_values(self) -> None:
        policy = NullPolicy.from_tag(
            Parsed(default_null_read="'null'", default_null_write="N/A")
        )
        assert policy.read == "null"
        assert policy.write == "N/A"


class TestMember:
    def test_from_hint(self) -> None:
        m = Member.from_hint("total", Invoice, Annotated[int | None, Parsed()])
        assert m.name == "total"
        assert m.declaring_class is Invoice
        assert m.declared_type is int
        assert m.nullable is True
        assert m.tags == (Parsed(),)
        assert m.qualified_name == "Invoice.total"

    def test_identity_semantics(self) -> None:
        a = Member.from_hint("x", Invoice, int)
        b = Member.from_hint("x", Invoice, int)
        assert a != b
        assert len({a, b}) == 2

    def test_attribute_mapping_name(self) -> None:
        m = Member.from_hint("x", Invoice, int)
        assert AttributeMapping(m).name == "x"


class TestPropertyAccessor:
    def test_read_only(self) -> None:
        acc = PropertyAccessor("x", getter=lambda obj: 1)
        assert acc.readable
        assert not acc.writable

    def test_empty(self) -> None:
        acc = PropertyAccessor("x")
        assert not acc.readable
        assert not acc.writable
