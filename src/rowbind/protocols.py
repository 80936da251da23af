from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rowbind.models.mapping import PropertyAccessor


@runtime_checkable
class FormattedConversion(Protocol):
    """A conversion whose behaviour is driven by formatter helper objects."""

    def formatter_objects(self) -> tuple[Any, ...]:
        """
        Returns the formatter instances used by the conversion, in the
        order of the format patterns they were built from.
        """
        ...


class BeanIntrospector(Protocol):
    """Defines the contract for discovering property accessors on a class."""

    def accessors(self, cls: type) -> dict[str, "PropertyAccessor"]:
        """
        Returns the property accessors visible on the given class.

        Args:
            cls: Record class to inspect

        Returns:
            Dictionary mapping property names to their accessor handles
        """
        ...
