"""Unit tests for BindingEngine and the package level helpers."""

import logging
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
from enum import Enum
from typing import Annotated

import pytest

import rowbind
from rowbind.config import BindingSettings
from rowbind.conversions import (
    EnumConversion,
    FormattedDecimalConversion,
    IntegerConversion,
    TrimConversion,
    UpperCaseConversion,
)
from rowbind.core.binding import BindingEngine, get_default_engine, set_default_engine
from rowbind.models.mapping import Member, NullPolicy
from rowbind.models.tags import (
    EnumOptions,
    Format,
    Headers,
    Parsed,
    Tag,
    Trim,
    UpperCase,
    tagged,
)

# -------------------- Sample record classes --------------------


class Status(Enum):
    OPEN = 1
    PAID = 2


@tagged(Parsed(field="TOTAL", default_null_read="0"), Format(formats=(",.2f",)))
class Money(Tag):
    pass


@tagged(Headers(sequence=("QTY", "CODE")))
class Line:
    qty: Annotated[int, Trim(), Parsed(index=0, field="QTY")]
    code: Annotated[str, Parsed(index=1, field="CODE"), Trim(), UpperCase()]
    raw: Annotated[int, Parsed(apply_default_conversion=False), Trim()]
    status: Annotated[Status, Parsed(), EnumOptions()]
    total: Annotated[Decimal, Money()]
    comment: str


@pytest.fixture
def engine() -> BindingEngine:
    return BindingEngine()


@pytest.fixture
def members(engine: BindingEngine) -> dict[str, Member]:
    return {m.name: m for m in engine.all_members(Line)}


@pytest.fixture
def default_engine(engine: BindingEngine):
    set_default_engine(engine)
    yield engine
    set_default_engine(None)


# --------------------------- Tests ---------------------------


class TestConversionsFor:
    def test_explicit_then_default(
        self, engine: BindingEngine, members: dict[str, Member]
    ) -> None:
        conversions = engine.conversions_for(members["qty"])
        assert [type(c) for c in conversions] == [TrimConversion, IntegerConversion]

    def test_string_has_no_default(
        self, engine: BindingEngine, members: dict[str, Member]
    ) -> None:
        conversions = engine.conversions_for(members["code"])
        assert [type(c) for c in conversions] == [TrimConversion, UpperCaseConversion]

    def test_default_disabled(
        self, engine: BindingEngine, members: dict[str, Member]
    ) -> None:
        assert [type(c) for c in engine.conversions_for(members["raw"])] == [TrimConversion]

    def test_typed_tag_replaces_default(
        self, engine: BindingEngine, members: dict[str, Member]
    ) -> None:
        assert [type(c) for c in engine.conversions_for(members["status"])] == [
            EnumConversion
        ]

    def test_meta_tag_requests(
        self, engine: BindingEngine, members: dict[str, Member]
    ) -> None:
        conversions = engine.conversions_for(members["total"])
        assert [type(c) for c in conversions] == [FormattedDecimalConversion]
        assert conversions[0].value_if_text_is_null == Decimal("0")

    def test_unmapped_member(
        self, engine: BindingEngine, members: dict[str, Member]
    ) -> None:
        assert engine.conversions_for(members["comment"]) == []


class TestEngine:
    def test_dispatch_on_member_or_type(
        self, engine: BindingEngine, members: dict[str, Member]
    ) -> None:
        assert isinstance(engine.resolve_conversion(int, Trim()), TrimConversion)
        assert isinstance(
            engine.resolve_conversion(members["status"], EnumOptions()), EnumConversion
        )
        default = engine.resolve_default_conversion(int, NullPolicy(read="3"))
        assert default.value_if_text_is_null == 3

    def test_headers_and_classification(self, engine: BindingEngine) -> None:
        assert engine.find_headers_tag(Line) == Headers(sequence=("QTY", "CODE"))
        assert engine.selected_indexes(Line) == [0, 1]
        assert engine.all_index_based(Line) is False
        assert engine.all_name_based(Line) is False
        assert engine.derive_header_names(Line) == ["QTY", "CODE", "raw", "status", "TOTAL"]

    def test_mappings(self, engine: BindingEngine) -> None:
        assert [m.name for m in engine.mappings(Line)][:2] == ["qty", "code"]

    def test_meta_lookup(self, engine: BindingEngine, members: dict[str, Member]) -> None:
        parsed = engine.find_meta_tag(members["total"], Parsed)
        assert parsed.field == "TOTAL"
        found = engine.find_tags_in_namespace(members["total"], __name__)
        assert found == [Money()]

    def test_settings_reach_components(self) -> None:
        settings = BindingSettings(reserved_namespaces=(__name__,), now_keyword="today")
        engine = BindingEngine(settings)
        assert engine.classifier.reserved_namespaces == (__name__,)
        total = {m.name: m for m in engine.all_members(Line)}["total"]
        assert engine.find_meta_tag(total, Parsed) is None
        assert engine.conversions_for(total) == []

    def test_engines_do_not_share_classification(self) -> None:
        first, second = BindingEngine(), BindingEngine()
        first.find_meta_tag(Line, Parsed)
        assert len(first.classifier) == 1
        assert len(second.classifier) == 0

    def test_lifecycle_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO)
        BindingEngine()
        assert any("Binding engine ready" in r.message for r in caplog.records)


class TestDefaultEngine:
    def test_lazily_built(self) -> None:
        set_default_engine(None)
        try:
            engine = get_default_engine()
            assert engine is get_default_engine()
        finally:
            set_default_engine(None)

    def test_concurrent_first_callers_share_one_engine(self) -> None:
        set_default_engine(None)
        try:
            with ThreadPoolExecutor(max_workers=8) as pool:
                engines = list(pool.map(lambda _: get_default_engine(), range(32)))
            assert len({id(e) for e in engines}) == 1
        finally:
            set_default_engine(None)

    def test_package_helpers_delegate(self, default_engine: BindingEngine) -> None:
        assert get_default_engine() is default_engine
        assert rowbind.derive_header_names(Line) == default_engine.derive_header_names(Line)
        assert rowbind.selected_indexes(Line) == [0, 1]
        assert rowbind.all_index_based(Line) is False
        assert rowbind.all_name_based(Line) is False
        assert rowbind.find_headers_tag(Line) == Headers(sequence=("QTY", "CODE"))
        assert len(rowbind.all_members(Line)) == 6
        assert isinstance(rowbind.resolve_conversion(str, UpperCase()), UpperCaseConversion)
        assert isinstance(rowbind.resolve_default_conversion(int), IntegerConversion)

    def test_package_namespace_exports_no_logger(self) -> None:
        assert "logger" not in vars(rowbind)
        assert "logging" not in vars(rowbind)

    def test_package_meta_helpers(self, default_engine: BindingEngine) -> None:
        total = {m.name: m for m in rowbind.all_members(Line)}["total"]
        assert rowbind.find_meta_tag(total, Format) == Format(formats=(",.2f",))
        assert rowbind.find_tags_in_namespace(total, "rowbind.models.tags")[0].field == "TOTAL"

    def test_package_formatter_settings(self, default_engine: BindingEngine) -> None:
        from rowbind.conversions import DecimalFormatter

        formatter = DecimalFormatter()
        rowbind.apply_formatter_settings(formatter, ["grouping_used=false"])
        assert formatter.grouping_used is False
