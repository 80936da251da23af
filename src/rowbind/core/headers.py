"""Column header names and index classification of record classes."""

from __future__ import annotations

import logging

from rowbind.exceptions import StructuralError
from rowbind.models.mapping import Member
from rowbind.models.tags import UNSET_INDEX, Headers, Parsed

from .catalog import MemberCatalog
from .introspection import AnnotationIntrospector

logger = logging.getLogger(__name__)


class HeaderDerivation:
    """
    Reads the ``Parsed`` tags of a class's members (catalog order) to
    classify the class as index or name based and to derive its headers.

    A class mixing index-based and name-based members is neither "all
    index based" nor "all name based", yet header derivation accepts it.
    """

    def __init__(
        self,
        catalog: MemberCatalog | None = None,
        introspector: AnnotationIntrospector | None = None,
    ) -> None:
        self._catalog = catalog or MemberCatalog()
        self._introspector = introspector or AnnotationIntrospector()
        self._logger = logger.getChild(self.__class__.__name__)

    def _parsed_members(self, cls: type) -> list[tuple[Member, Parsed]]:
        found: list[tuple[Member, Parsed]] = []
        for member in self._catalog.all_members(cls):
            parsed = self._introspector.find_tag(member, Parsed)
            if parsed is not None:
                found.append((member, parsed))
        return found

    def _all_index_or_name_based(self, cls: type, search_name: bool) -> bool:
        has_tag = False
        for _, parsed in self._parsed_members(cls):
            has_tag = True
            index_based = parsed.index != UNSET_INDEX
            if index_based == search_name:
                return False
        return has_tag

    def all_index_based(self, cls: type) -> bool:
        """True when at least one member is tagged and every tagged member has an index."""
        return self._all_index_or_name_based(cls, search_name=False)

    def all_name_based(self, cls: type) -> bool:
        """True when at least one member is tagged and no tagged member has an index."""
        return self._all_index_or_name_based(cls, search_name=True)

    def selected_indexes(self, cls: type) -> list[int]:
        """Explicit column indexes of the class, in catalog order."""
        indexes: list[int] = []
        for member, parsed in self._parsed_members(cls):
            if parsed.index == UNSET_INDEX:
                continue
            if parsed.index in indexes:
                raise StructuralError(
                    f"Duplicate field index '{parsed.index}' found in attribute "
                    f"'{member.name}' of class {cls.__qualname__}"
                )
            indexes.append(parsed.index)
        return indexes

    def derive_header_names(self, cls: type) -> list[str]:
        """
        Header names of the tagged members, each moved to its explicit index.

        Returns an empty list when an index points past the number of
        available names.
        """
        names: list[str] = []
        indexes: list[int] = []
        for member, parsed in self._parsed_members(cls):
            if parsed.index != UNSET_INDEX and parsed.index in indexes:
                raise StructuralError(
                    f"Duplicate field index found in attribute '{member.name}' "
                    f"of class {cls.__qualname__}"
                )
            names.append(parsed.field or member.name)
            indexes.append(parsed.index)

        # slots[position] = which member's name currently sits at position
        slots = list(range(len(names)))
        for col, index in enumerate(indexes):
            if index == UNSET_INDEX or index == col:
                continue
            if index >= len(names):
                self._logger.debug(
                    f"Index {index} of {cls.__qualname__} is beyond its "
                    f"{len(names)} header name(s); cannot derive headers"
                )
                return []
            position = slots.index(col)
            if position != index:
                slots[index], slots[position] = slots[position], slots[index]

        return [names[member] for member in slots]

    def find_headers_tag(self, cls: type) -> Headers | None:
        """``Headers`` tag of the class or of its nearest ancestor (MRO order)."""
        for klass in cls.__mro__:
            if klass is object:
                continue
            headers = self._introspector.find_tag(klass, Headers)
            if headers is not None:
                return headers
        return None
