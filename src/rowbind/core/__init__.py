"""Resolution and introspection components."""

from .binding import BindingEngine, get_default_engine, set_default_engine
from .catalog import MemberCatalog, PropertyIntrospector
from .defaults import DefaultConversionResolver
from .formatter_config import FormatterConfigurator, parse_formatter_settings
from .headers import HeaderDerivation
from .introspection import AnnotationIntrospector, TagKindClassifier, declared_tags
from .resolver import ConversionResolver

__all__ = [
    "AnnotationIntrospector",
    "BindingEngine",
    "ConversionResolver",
    "DefaultConversionResolver",
    "FormatterConfigurator",
    "HeaderDerivation",
    "MemberCatalog",
    "PropertyIntrospector",
    "TagKindClassifier",
    "declared_tags",
    "get_default_engine",
    "parse_formatter_settings",
    "set_default_engine",
]
