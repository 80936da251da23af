"""Meta-tag aware lookup of metadata tags on members, classes and tags."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from types import ModuleType
from typing import Any, TypeVar

from rowbind.config import DEFAULT_RESERVED_NAMESPACES
from rowbind.models.mapping import AttributeMapping, Member

logger = logging.getLogger(__name__)

_K = TypeVar("_K")


def declared_tags(declaration: Any) -> tuple[Any, ...]:
    """
    Return the tags declared directly on a member, a class or a tag class.

    Class-level tags come from :func:`rowbind.models.tags.tagged` and are
    not inherited.
    """
    if isinstance(declaration, AttributeMapping):
        declaration = declaration.member
    if isinstance(declaration, Member):
        return declaration.tags
    if isinstance(declaration, type):
        return tuple(declaration.__dict__.get("__tags__", ()))
    return tuple(getattr(declaration, "tags", ()))


class TagKindClassifier:
    """
    Memoised "custom" vs "platform reserved" classification of tag kinds.

    A kind is reserved when its module lies in one of the reserved
    namespaces. The first classification of a kind is kept for the
    lifetime of the classifier; concurrent callers always observe the same
    answer.
    """

    def __init__(self, reserved_namespaces: Iterable[str] | None = None) -> None:
        if reserved_namespaces is None:
            reserved_namespaces = DEFAULT_RESERVED_NAMESPACES
        self.reserved_namespaces = tuple(reserved_namespaces)
        self._kinds: dict[type, bool] = {}
        self._lock = threading.Lock()

    def _in_reserved_namespace(self, kind: type) -> bool:
        module = getattr(kind, "__module__", None) or ""
        return any(
            module == ns or module.startswith(ns + ".")
            for ns in self.reserved_namespaces
        )

    def is_custom(self, tag: Any) -> bool:
        kind = type(tag)
        known = self._kinds.get(kind)
        if known is not None:
            return known

        custom = not self._in_reserved_namespace(kind)
        with self._lock:
            return self._kinds.setdefault(kind, custom)

    def __len__(self) -> int:
        return len(self._kinds)

    def __contains__(self, kind: type) -> bool:
        return kind in self._kinds


class AnnotationIntrospector:
    """
    Finds tags attached directly to a declaration, or reachable through
    custom tags that themselves carry tags (meta-tags).

    Traversal never enters the same tag instance twice, so cyclic tag
    declarations terminate.
    """

    def __init__(self, classifier: TagKindClassifier | None = None) -> None:
        self.classifier = classifier or TagKindClassifier()
        self._logger = logger.getChild(self.__class__.__name__)

    def find_tag(self, declaration: Any, kind: type[_K] | None) -> _K | None:
        """
        Return the first tag of ``kind``: direct tags first, then the tags
        of each directly attached custom tag, recursively.
        """
        if kind is None:
            return None
        return self._find_tag(declaration, kind, set())

    def _find_tag(self, declaration: Any, kind: type[_K], visited: set[int]) -> _K | None:
        tags = declared_tags(declaration)
        for tag in tags:
            if type(tag) is kind:
                return tag

        for tag in tags:
            if self.classifier.is_custom(tag) and id(tag) not in visited:
                visited.add(id(tag))
                found = self._find_tag(type(tag), kind, visited)
                if found is not None:
                    self._logger.debug(
                        f"Found {kind.__name__} through meta-tag {type(tag).__name__}"
                    )
                    return found
        return None

    def find_tags_in_namespace(
        self, declaration: Any, namespace: str | ModuleType
    ) -> list[Any]:
        """
        Collect every tag, direct or reachable through custom tags, whose
        kind is defined in ``namespace`` (a module name or module).
        """
        if isinstance(namespace, ModuleType):
            namespace = namespace.__name__
        found: list[Any] = []
        self._collect(declaration, namespace, found, set(), set())
        return found

    def _collect(
        self,
        declaration: Any,
        namespace: str,
        found: list[Any],
        seen: set[int],
        visited: set[int],
    ) -> None:
        for tag in declared_tags(declaration):
            if type(tag).__module__ == namespace and id(tag) not in seen:
                seen.add(id(tag))
                found.append(tag)
            if self.classifier.is_custom(tag) and id(tag) not in visited:
                visited.add(id(tag))
                self._collect(type(tag), namespace, found, seen, visited)
