"""Engine wiring every resolution and introspection component together."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from types import ModuleType
from typing import Any, TypeVar

from rowbind.config import BindingSettings
from rowbind.conversions import Conversion
from rowbind.models import tags as tag_models
from rowbind.models.mapping import AttributeMapping, Member, NullPolicy, PropertyAccessor
from rowbind.models.tags import BooleanString, Convert, EnumOptions, Format, Headers, Parsed
from rowbind.protocols import BeanIntrospector

from .catalog import MemberCatalog
from .defaults import DefaultConversionResolver
from .formatter_config import FormatterConfigurator
from .headers import HeaderDerivation
from .introspection import AnnotationIntrospector, TagKindClassifier
from .resolver import ConversionResolver

logger = logging.getLogger(__name__)

_K = TypeVar("_K")

# tags whose conversion already yields the attribute's value type
_TYPED_TAGS = (EnumOptions, BooleanString, Format, Convert)


class BindingEngine:
    """
    Facade over the catalog, introspector, resolvers and header derivation.

    The engine owns its tag-kind classification cache; two engines never
    share classification state.
    """

    def __init__(
        self,
        settings: BindingSettings | None = None,
        bean_introspector: BeanIntrospector | None = None,
    ) -> None:
        self.settings = settings or BindingSettings()
        self.classifier = TagKindClassifier(self.settings.reserved_namespaces)
        self.introspector = AnnotationIntrospector(self.classifier)
        self.catalog = MemberCatalog(bean_introspector)
        self.formatters = FormatterConfigurator()
        self.resolver = ConversionResolver(
            self.introspector, self.formatters, self.settings.now_keyword
        )
        self.defaults = DefaultConversionResolver(self.introspector)
        self.headers = HeaderDerivation(self.catalog, self.introspector)
        self._logger = logger.getChild(self.__class__.__name__)
        self._logger.info(
            f"Binding engine ready (reserved namespaces: "
            f"{', '.join(self.settings.reserved_namespaces)})"
        )

    # --- conversions ---

    def resolve_conversion(self, target: Member | Any, tag: Any) -> Conversion | None:
        """Conversion requested by ``tag`` for a member or a bare type."""
        if isinstance(target, Member):
            return self.resolver.resolve_for_member(target, tag)
        return self.resolver.resolve(target, tag)

    def resolve_default_conversion(
        self, target: Member | Any, null_policy: NullPolicy | None = None
    ) -> Conversion | None:
        """Type-based conversion for a member or a bare type."""
        if isinstance(target, Member):
            return self.defaults.resolve_for_member(target)
        return self.defaults.resolve(target, null_policy)

    def conversions_for(self, member: Member) -> list[Conversion]:
        """
        Every conversion applied to a ``Parsed`` member: the explicitly
        requested ones in declaration order, then the default conversion
        unless disabled or already provided by a typed tag.
        """
        parsed = self.introspector.find_tag(member, Parsed)
        if parsed is None:
            return []

        conversions: list[Conversion] = []
        typed = False
        for tag in self.introspector.find_tags_in_namespace(member, tag_models):
            conversion = self.resolver.resolve_for_member(member, tag)
            if conversion is not None:
                conversions.append(conversion)
                typed = typed or isinstance(tag, _TYPED_TAGS)

        if parsed.apply_default_conversion and not typed:
            default = self.defaults.resolve_for_member(member)
            if default is not None:
                conversions.append(default)
        return conversions

    def apply_formatter_settings(self, formatter: Any, settings: Sequence[str | None]) -> None:
        self.formatters.apply(formatter, settings)

    # --- introspection ---

    def all_members(self, cls: type) -> dict[Member, PropertyAccessor | None]:
        return self.catalog.all_members(cls)

    def mappings(self, cls: type) -> list[AttributeMapping]:
        return self.catalog.mappings(cls)

    def find_meta_tag(self, declaration: Any, kind: type[_K] | None) -> _K | None:
        return self.introspector.find_tag(declaration, kind)

    def find_tags_in_namespace(
        self, declaration: Any, namespace: str | ModuleType
    ) -> list[Any]:
        return self.introspector.find_tags_in_namespace(declaration, namespace)

    # --- headers ---

    def all_index_based(self, cls: type) -> bool:
        return self.headers.all_index_based(cls)

    def all_name_based(self, cls: type) -> bool:
        return self.headers.all_name_based(cls)

    def selected_indexes(self, cls: type) -> list[int]:
        return self.headers.selected_indexes(cls)

    def derive_header_names(self, cls: type) -> list[str]:
        return self.headers.derive_header_names(cls)

    def find_headers_tag(self, cls: type) -> Headers | None:
        return self.headers.find_headers_tag(cls)


# Process default engine, built on first use
_default_engine: BindingEngine | None = None
_default_engine_lock = threading.Lock()


def get_default_engine() -> BindingEngine:
    """Get the process default engine instance."""
    global _default_engine
    if _default_engine is None:
        with _default_engine_lock:
            if _default_engine is None:
                _default_engine = BindingEngine()
    return _default_engine


def set_default_engine(engine: BindingEngine | None) -> None:
    """Replace the process default engine (None rebuilds it on next use)."""
    global _default_engine
    with _default_engine_lock:
        _default_engine = engine
