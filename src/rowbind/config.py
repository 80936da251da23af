"""Settings of a binding engine, optionally loaded from YAML / JSON files."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from ruamel.yaml import YAML

from rowbind.exceptions import SettingsLoadError

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR: Final[str] = "ROWBIND_SETTINGS"

_YAML_EXTS: Final[set[str]] = {".yaml", ".yml"}
_JSON_EXTS: Final[set[str]] = {".json"}

_yaml_parser = YAML(typ="safe")  # safe loader, YAML 1.2

DEFAULT_RESERVED_NAMESPACES: Final[tuple[str, ...]] = (
    "builtins",
    "typing",
    "typing_extensions",
    "annotated_types",
    "pydantic",
    "dataclasses",
    "enum",
    "abc",
)


class BindingSettings(BaseModel):
    """Tunables of :class:`~rowbind.core.binding.BindingEngine`."""

    reserved_namespaces: tuple[str, ...] = Field(
        default=DEFAULT_RESERVED_NAMESPACES,
        description="Modules whose tag kinds are never searched for meta-tags.",
    )
    now_keyword: str = Field(
        "now",
        min_length=1,
        description="Null-read value meaning 'current moment' for date formats.",
    )
    log_level: str = Field("INFO", description="Logging level used by the CLI.")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level '{v}'")
        return level


def load_settings(path: str | Path) -> BindingSettings:
    """Read and validate a settings file (``.yaml``, ``.yml`` or ``.json``)."""
    file_path = Path(path)
    supported = _YAML_EXTS | _JSON_EXTS

    if not file_path.exists():
        logger.error("Settings file not found: %s", file_path)
        raise SettingsLoadError(f"File not found: {file_path}")

    if file_path.suffix.lower() not in supported:
        raise SettingsLoadError(
            f"Unsupported extension '{file_path.suffix}'. "
            f"Supported: {', '.join(sorted(supported))}"
        )

    raw_text = file_path.read_text(encoding="utf-8")

    try:
        if file_path.suffix.lower() in _YAML_EXTS:
            data: Any = _yaml_parser.load(raw_text)
        else:  # .json
            data = json.loads(raw_text)
    except Exception as exc:
        raise SettingsLoadError(f"Cannot parse {file_path.name}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SettingsLoadError("Top-level object must be a mapping")

    try:
        settings = BindingSettings(**data)
    except ValidationError as exc:
        raise SettingsLoadError(f"Invalid settings in {file_path.name}: {exc}") from exc

    logger.debug("Settings loaded from %s (%d key(s))", file_path, len(data))
    return settings


def settings_from_env() -> BindingSettings:
    """Load the file named by ``ROWBIND_SETTINGS``, or return defaults."""
    path = os.environ.get(SETTINGS_ENV_VAR)
    if not path:
        return BindingSettings()
    return load_settings(path)
