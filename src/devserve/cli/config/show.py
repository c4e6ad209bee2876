"""
devserve config show command.

SUMMARY: Show current configuration

Displays the merged configuration from bundled defaults, the project config
file and DEVSERVE_* environment variables.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any

import yaml

from devserve.cli import OutputFormatter, add_config_flag, add_json_flag
from devserve.core.config import ConfigManager
from devserve.core.exceptions import DevServeError
from devserve.core.schemas import SchemaValidationError

SUMMARY = "Show current configuration"

_MISSING = object()


def _nest_key(key: str, value: Any) -> Any:
    """Nest a dot-notation key into a YAML/JSON-friendly mapping."""
    parts = [p for p in str(key).split(".") if p]
    out = value
    for part in reversed(parts):
        out = {part: out}
    return out


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "key",
        nargs="?",
        help="Specific configuration key to show (e.g., 'logging.level')",
    )
    parser.add_argument(
        "--format",
        choices=["json", "yaml", "table"],
        default="table",
        help="Output format (default: table)",
    )
    add_config_flag(parser)
    add_json_flag(parser)


def _format_value(value: Any, indent: int = 0) -> str:
    """Format a value for table display."""
    prefix = "  " * indent
    if isinstance(value, dict):
        if not value:
            return "{}"
        lines = []
        for k, v in value.items():
            formatted = _format_value(v, indent + 1)
            if isinstance(v, dict) and v:
                lines.append(f"{prefix}{k}:")
                lines.append(formatted)
            else:
                lines.append(f"{prefix}{k}: {formatted.strip()}")
        return "\n".join(lines)
    if isinstance(value, list):
        if not value:
            return "[]"
        return f"[{', '.join(str(v) for v in value)}]"
    return str(value)


def main(args: argparse.Namespace) -> int:
    """Show configuration - delegates to ConfigManager."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = ConfigManager(Path.cwd(), config_path=args.config_path)
        config_data = manager.load_config()
    except (DevServeError, SchemaValidationError, OSError, yaml.YAMLError) as exc:
        formatter.error(exc, error_code="config_error")
        return 1

    output_format = "json" if args.json else args.format
    data: Any = config_data
    if args.key:
        data = manager.get(args.key, _MISSING)
        if data is _MISSING:
            formatter.text(f"Key not found: {args.key}")
            return 1

    if output_format == "json":
        formatter.json_output({args.key: data} if args.key else data)
    elif output_format == "yaml":
        formatter.text(
            yaml.safe_dump(
                _nest_key(args.key, data) if args.key else data,
                default_flow_style=False,
                sort_keys=True,
                allow_unicode=True,
            ).rstrip()
        )
    elif args.key:
        formatter.text(f"{args.key}: {_format_value(data)}" if not isinstance(data, dict) else f"{args.key}:")
        if isinstance(data, dict):
            formatter.text(_format_value(data, indent=1))
    else:
        formatter.text("devserve configuration")
        formatter.text("=" * 60)
        for key, value in config_data.items():
            formatted = _format_value(value, indent=1)
            if "\n" in formatted or (isinstance(value, dict) and value):
                formatter.text(f"{key}:")
                formatter.text(formatted)
            else:
                formatter.text(f"{key}: {formatted}")
    return 0
