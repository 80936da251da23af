"""
Command-line interface for inspecting the bindings of a record class.

Prints the header names, index classification and per-member conversions
that rowbind resolves for a class, as text or YAML.
"""

import argparse
import importlib
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

from ruamel.yaml import YAML

from rowbind.config import BindingSettings, load_settings, settings_from_env
from rowbind.core.binding import BindingEngine
from rowbind.exceptions import BindingError, SettingsLoadError


@dataclass
class TargetRef:
    """Reference to the record class to inspect."""

    module: str
    class_name: str


def parse_target_argument(target_arg: str) -> TargetRef:
    """
    Parse a target argument in MODULE:CLASS format.

    Args:
        target_arg: Target argument string (e.g., 'billing.records:Invoice')

    Returns:
        TargetRef with parsed module and class name

    Raises:
        ValueError: If the argument format is invalid
    """
    if ":" not in target_arg:
        raise ValueError(
            f"Invalid target format: '{target_arg}'. "
            "Expected format: MODULE:CLASS (e.g., 'billing.records:Invoice')"
        )

    module, class_name = target_arg.split(":", 1)

    if not module.strip():
        raise ValueError(f"Empty module in target: '{target_arg}'")

    if not class_name.strip():
        raise ValueError(f"Empty class name in target: '{target_arg}'")

    return TargetRef(module=module.strip(), class_name=class_name.strip())


def load_target_class(target_ref: TargetRef) -> type:
    """Import the module of ``target_ref`` and return the named class."""
    try:
        module = importlib.import_module(target_ref.module)
    except ImportError as e:
        raise ValueError(f"Cannot import module '{target_ref.module}': {e}") from e

    target: Any = module
    for part in target_ref.class_name.split("."):
        target = getattr(target, part, None)
        if target is None:
            raise ValueError(f"Module '{target_ref.module}' has no class '{target_ref.class_name}'")

    if not isinstance(target, type):
        raise ValueError(f"'{target_ref.module}:{target_ref.class_name}' is not a class")
    return target


def configure_logging(
    debug: bool = False, verbose: bool = False, level_name: str = "WARNING"
) -> None:
    """Configure application logging.

    Args:
        debug: Enable debug-level logging if True.
        verbose: Enable info-level logging if True.
        level_name: Level used when neither flag is given.
    """
    if debug:
        level = logging.DEBUG
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif verbose:
        level = logging.INFO
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    else:
        level = logging.getLevelNamesMapping().get(level_name, logging.WARNING)
        format_str = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stderr,
        force=True,  # Override existing configuration
    )


def _conversion_name(conversion: Any) -> str:
    return type(conversion).__name__


def build_report(engine: BindingEngine, cls: type) -> dict[str, Any]:
    """Collect everything rowbind resolves for ``cls`` into a plain dict."""
    headers_tag = engine.find_headers_tag(cls)
    members = []
    for mapping in engine.mappings(cls):
        member = mapping.member
        members.append(
            {
                "name": member.name,
                "declared_in": member.declaring_class.__qualname__,
                "type": getattr(member.declared_type, "__name__", repr(member.declared_type)),
                "nullable": member.nullable,
                "accessor": mapping.accessor is not None,
                "conversions": [
                    _conversion_name(c) for c in engine.conversions_for(member)
                ],
            }
        )

    return {
        "class": f"{cls.__module__}.{cls.__qualname__}",
        "headers": engine.derive_header_names(cls),
        "index_based": engine.all_index_based(cls),
        "name_based": engine.all_name_based(cls),
        "selected_indexes": engine.selected_indexes(cls),
        "headers_tag": None
        if headers_tag is None
        else {
            "sequence": list(headers_tag.sequence),
            "extract": headers_tag.extract,
            "write": headers_tag.write,
        },
        "members": members,
    }


def render_text(report: dict[str, Any]) -> str:
    lines = [
        f"Class:            {report['class']}",
        f"Headers:          {', '.join(report['headers']) or '(none)'}",
        f"Index based:      {report['index_based']}",
        f"Name based:       {report['name_based']}",
        f"Selected indexes: {report['selected_indexes']}",
        "",
        "Members:",
    ]
    for member in report["members"]:
        conversions = " -> ".join(member["conversions"]) or "(none)"
        lines.append(
            f"  {member['name']:<20} {member['type']:<12} "
            f"[{member['declared_in']}] {conversions}"
        )
    return "\n".join(lines)


def render_yaml(report: dict[str, Any]) -> None:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.dump(report, sys.stdout)


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rowbind",
        description="Inspect how rowbind binds a record class to text columns",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show headers and conversions of a class
  rowbind inspect billing.records:Invoice

  # Same, as YAML
  rowbind inspect billing.records:Invoice --yaml

  # Use a settings file
  rowbind inspect billing.records:Invoice --settings rowbind.yaml
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect_parser = subparsers.add_parser("inspect", help="Inspect a record class")
    inspect_parser.add_argument("target", metavar="MODULE:CLASS")
    inspect_parser.add_argument(
        "--settings",
        type=Path,
        help="YAML or JSON settings file (default: $ROWBIND_SETTINGS)",
    )
    inspect_parser.add_argument("--yaml", action="store_true", help="Emit YAML")
    inspect_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging for detailed output"
    )
    inspect_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    return parser.parse_args(argv)


def run_inspection(
    target_arg: str,
    settings_path: Path | None = None,
    as_yaml: bool = False,
    debug: bool = False,
    verbose: bool = False,
) -> NoReturn:
    """Inspect a record class and exit.

    Raises:
        SystemExit: 0 on success, 1 on binding errors, 2 on bad input,
            9 on unexpected errors.
    """
    configure_logging(debug, verbose)
    logger = logging.getLogger(__name__)

    try:
        settings: BindingSettings = (
            load_settings(settings_path) if settings_path else settings_from_env()
        )
        configure_logging(debug, verbose, settings.log_level)

        cls = load_target_class(parse_target_argument(target_arg))
        engine = BindingEngine(settings)
        report = build_report(engine, cls)

        if as_yaml:
            render_yaml(report)
        else:
            print(render_text(report))
        sys.exit(0)

    except SettingsLoadError as e:
        logger.error(f"Settings error: {e}")
        sys.exit(1)
    except BindingError as e:
        logger.error(f"Binding error: {e}")
        if debug:
            logger.exception("Full traceback:")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        sys.exit(2)
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if debug:
            logger.exception("Full traceback:")
        sys.exit(9)


def main(argv: list[str] | None = None) -> NoReturn:
    args = parse_arguments(argv)
    run_inspection(args.target, args.settings, args.yaml, args.debug, args.verbose)


if __name__ == "__main__":
    main()
