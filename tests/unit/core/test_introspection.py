"""Unit tests for meta-tag aware lookup (rowbind/core/introspection.py)."""

import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from typing import Annotated

import pytest

from rowbind.core.introspection import (
    AnnotationIntrospector,
    TagKindClassifier,
    declared_tags,
)
from rowbind.models import tags as tag_models
from rowbind.models.mapping import AttributeMapping, Member
from rowbind.models.tags import Format, Headers, Parsed, Tag, Trim, tagged

# -------------------- Tag kinds / helpers --------------------


@tagged(Parsed(field="AMOUNT"), Format(formats=(",.2f",)))
class Amount(Tag):
    """Custom tag carrying a column mapping and a format."""


@tagged(Amount())
class PriceColumn(Tag):
    """Custom tag two levels away from Parsed."""


class Ping(Tag):
    pass


class Pong(Tag):
    pass


tagged(Pong())(Ping)
tagged(Ping())(Pong)


@tagged(Headers(sequence=("a", "b")))
class Report:
    pass


class SubReport(Report):
    pass


class Invoice:
    pass


def member(hint) -> Member:
    return Member.from_hint("value", Invoice, hint)


@pytest.fixture
def introspector() -> AnnotationIntrospector:
    return AnnotationIntrospector(TagKindClassifier())


# --------------------------- Tests ---------------------------


class TestDeclaredTags:
    def test_member_and_mapping(self) -> None:
        m = member(Annotated[int, Trim()])
        assert declared_tags(m) == (Trim(),)
        assert declared_tags(AttributeMapping(m)) == (Trim(),)

    def test_class_tags_not_inherited(self) -> None:
        assert declared_tags(Report) == (Headers(sequence=("a", "b")),)
        assert declared_tags(SubReport) == ()

    def test_untagged(self) -> None:
        assert declared_tags(Invoice) == ()
        assert declared_tags(object()) == ()


class TestTagKindClassifier:
    def test_builtin_namespaces_are_reserved(self) -> None:
        classifier = TagKindClassifier()
        assert classifier.is_custom("plain metadata") is False
        assert classifier.is_custom(Trim()) is True
        assert classifier.is_custom(Amount()) is True

    def test_configured_namespace(self) -> None:
        classifier = TagKindClassifier(reserved_namespaces=("rowbind",))
        assert classifier.is_custom(Parsed()) is False
        assert classifier.is_custom(Amount()) is True

    def test_first_classification_wins(self) -> None:
        classifier = TagKindClassifier()
        assert classifier.is_custom(Trim()) is True
        classifier.reserved_namespaces = ("rowbind",)
        assert classifier.is_custom(Trim()) is True
        assert Trim in classifier
        assert len(classifier) == 1

    def test_concurrent_callers_agree(self) -> None:
        classifier = TagKindClassifier()
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: classifier.is_custom(Amount()), range(64)))
        assert set(results) == {True}
        assert len(classifier) == 1

    def test_caches_are_not_shared(self) -> None:
        first = TagKindClassifier()
        second = TagKindClassifier()
        first.is_custom(Trim())
        assert Trim not in second


class TestFindTag:
    def test_direct_tag(self, introspector: AnnotationIntrospector) -> None:
        m = member(Annotated[int, Parsed(index=3)])
        assert introspector.find_tag(m, Parsed) == Parsed(index=3)

    def test_direct_tag_wins_over_meta_tag(
        self, introspector: AnnotationIntrospector
    ) -> None:
        m = member(Annotated[Decimal, Amount(), Parsed(field="DIRECT")])
        assert introspector.find_tag(m, Parsed) == Parsed(field="DIRECT")

    def test_meta_tag(self, introspector: AnnotationIntrospector) -> None:
        m = member(Annotated[Decimal, Amount()])
        assert introspector.find_tag(m, Parsed) == Parsed(field="AMOUNT")

    def test_nested_meta_tag(
        self, introspector: AnnotationIntrospector, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG)
        m = member(Annotated[Decimal, PriceColumn()])
        assert introspector.find_tag(m, Format) == Format(formats=(",.2f",))
        assert any("through meta-tag" in r.message for r in caplog.records)

    def test_cycle_terminates(self, introspector: AnnotationIntrospector) -> None:
        m = member(Annotated[int, Ping()])
        assert introspector.find_tag(m, Parsed) is None

    def test_cycle_still_finds_tag_kind_in_cycle(
        self, introspector: AnnotationIntrospector
    ) -> None:
        m = member(Annotated[int, Ping()])
        assert introspector.find_tag(m, Pong) == Pong()

    def test_missing_kind(self, introspector: AnnotationIntrospector) -> None:
        m = member(Annotated[int, Parsed()])
        assert introspector.find_tag(m, None) is None
        assert introspector.find_tag(m, Headers) is None

    def test_class_declaration(self, introspector: AnnotationIntrospector) -> None:
        assert introspector.find_tag(Report, Headers) == Headers(sequence=("a", "b"))
        assert introspector.find_tag(SubReport, Headers) is None

    def test_reserved_kinds_are_not_entered(self) -> None:
        reserved = AnnotationIntrospector(TagKindClassifier((__name__,)))
        m = member(Annotated[Decimal, Amount()])
        assert reserved.find_tag(m, Parsed) is None


class TestFindTagsInNamespace:
    def test_direct_and_meta_tags_in_order(
        self, introspector: AnnotationIntrospector
    ) -> None:
        m = member(Annotated[Decimal, Amount(), Trim()])
        found = introspector.find_tags_in_namespace(m, tag_models)
        assert found == [Parsed(field="AMOUNT"), Format(formats=(",.2f",)), Trim()]

    def test_namespace_by_name(self, introspector: AnnotationIntrospector) -> None:
        m = member(Annotated[Decimal, PriceColumn()])
        assert introspector.find_tags_in_namespace(m, __name__) == [PriceColumn(), Amount()]

    def test_same_instance_reported_once(
        self, introspector: AnnotationIntrospector
    ) -> None:
        shared = Amount()
        m = member(Annotated[Decimal, shared, shared])
        assert introspector.find_tags_in_namespace(m, __name__) == [shared]

    def test_cycle_terminates(self, introspector: AnnotationIntrospector) -> None:
        m = member(Annotated[int, Ping()])
        found = introspector.find_tags_in_namespace(m, __name__)
        assert [type(t) for t in found] == [Ping, Pong, Ping]

    def test_nothing_in_namespace(self, introspector: AnnotationIntrospector) -> None:
        m = member(Annotated[int, Trim()])
        assert introspector.find_tags_in_namespace(m, "json") == []
