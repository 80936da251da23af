"""
exceptions.py

Typed exception hierarchy shared by every rowbind component.
"""

from __future__ import annotations

from typing import Any

# --------------------------------------------------------------------------- #
#                              Base hierarchy                                 #
# --------------------------------------------------------------------------- #


class BindingError(Exception):
    """
    Root of all errors raised by rowbind.

    Anything deriving from this class is a *domain* error: resolution code
    lets it propagate unchanged instead of wrapping it a second time.
    """


class ConfigurationError(BindingError):
    """
    Raised when tags, options or settings cannot be turned into a working
    conversion.

    Examples
    --------
    * EnumOptions on a non-enum attribute
    * BooleanString on a non-boolean attribute
    * malformed ``key=value`` formatter option
    * formatter property without setter, or with an unsupported type

    The message may contain ``{name}`` placeholders; they are rendered from
    ``values`` so the offending input shows up in logs and tracebacks.
    """

    def __init__(self, message: str, **values: Any) -> None:
        super().__init__(message)
        self.message = message
        self.values: dict[str, Any] = dict(values)

    def __str__(self) -> str:
        rendered = self.message
        for key, value in self.values.items():
            rendered = rendered.replace("{" + key + "}", str(value))
        return rendered


class ConstructionError(ConfigurationError):
    """Raised when a custom conversion class cannot be instantiated."""


class StructuralError(BindingError):
    """Raised when a class declares the same explicit column index twice."""


class SettingsLoadError(BindingError):
    """
    Raised by the configuration layer when a settings file cannot be read.

    Examples
    --------
    * File does not exist / bad extension
    * YAML or JSON syntax error
    * Top-level object is not a mapping
    """
