"""Enumeration of the declared attributes of a record class hierarchy."""

from __future__ import annotations

import inspect
import logging
import typing
from typing import Any, ClassVar

from rowbind.models.mapping import AttributeMapping, Member, PropertyAccessor
from rowbind.protocols import BeanIntrospector

logger = logging.getLogger(__name__)


class PropertyIntrospector(BeanIntrospector):
    """Discovers ``property`` objects; subclasses override their ancestors."""

    def accessors(self, cls: type) -> dict[str, PropertyAccessor]:
        found: dict[str, PropertyAccessor] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                if isinstance(value, property):
                    found[name] = PropertyAccessor(name, value.fget, value.fset)
        return found


class MemberCatalog:
    """
    Lists the annotated members of a class and of its ancestors.

    Each member name appears once: a member declared in a more derived
    class shadows the one of the same name declared by an ancestor.
    Declaration order is preserved, most derived class first.
    """

    def __init__(self, introspector: BeanIntrospector | None = None) -> None:
        self._introspector = introspector or PropertyIntrospector()
        self._logger = logger.getChild(self.__class__.__name__)

    def all_members(self, cls: type) -> dict[Member, PropertyAccessor | None]:
        try:
            accessors = self._introspector.accessors(cls)
        except Exception as e:
            # accessors are optional; fall back to plain members
            self._logger.debug(f"Property discovery failed for {cls.__name__}: {e}")
            accessors = {}

        used: set[str] = set()
        out: dict[Member, PropertyAccessor | None] = {}

        for klass in cls.__mro__:
            if klass is object:
                continue
            for name, hint in self._declared_hints(klass).items():
                if name in used:
                    continue
                used.add(name)
                member = Member.from_hint(name, klass, hint)
                out[member] = self._accessor_for(name, accessors)

        self._logger.debug(f"Catalogued {len(out)} member(s) of {cls.__name__}")
        return out

    def mappings(self, cls: type) -> list[AttributeMapping]:
        """Same as :meth:`all_members`, as a list of attribute mappings."""
        return [
            AttributeMapping(member, accessor)
            for member, accessor in self.all_members(cls).items()
        ]

    @staticmethod
    def _accessor_for(
        name: str, accessors: dict[str, PropertyAccessor]
    ) -> PropertyAccessor | None:
        accessor = accessors.get(name)
        if accessor is None and name.startswith("_"):
            # private storage exposed through a public property
            accessor = accessors.get(name.lstrip("_"))
        return accessor

    def _declared_hints(self, klass: type) -> dict[str, Any]:
        own = inspect.get_annotations(klass)
        if not own:
            return {}

        try:
            resolved = typing.get_type_hints(klass, include_extras=True)
        except Exception as e:
            self._logger.warning(
                f"Cannot resolve annotations of {klass.__qualname__}, "
                f"using them unevaluated: {e}"
            )
            resolved = {}

        hints: dict[str, Any] = {}
        for name, raw in own.items():
            hint = resolved.get(name, raw)
            if hint is ClassVar or typing.get_origin(hint) is ClassVar:
                continue
            hints[name] = hint
        return hints
