"""
devserve serve command.

SUMMARY: Serve static files from one or more root directories

Roots are searched in the order given; the first one holding the requested
file wins. Runs until interrupted (SIGINT/SIGTERM).
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict

import yaml

from devserve.cli import OutputFormatter, add_config_flag, add_json_flag, add_log_level_flag
from devserve.core.config import ConfigManager, to_serve_config
from devserve.core.exceptions import DevServeError
from devserve.core.logging import configure_logging
from devserve.core.schemas import SchemaValidationError
from devserve.core.serve import run

SUMMARY = "Serve static files from one or more root directories"


def parse_header(value: str) -> tuple[str, str]:
    """Parse ``NAME:VALUE`` into a header pair."""
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME:VALUE, got {value!r}")
    return name.strip(), header_value.strip()


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "roots",
        nargs="*",
        metavar="ROOT",
        help="Directories to serve, searched in order (default: current directory)",
    )
    parser.add_argument("--host", help="Host to bind (default: localhost)")
    parser.add_argument("--port", type=int, help="Port to bind (default: 10001)")
    parser.add_argument(
        "--fallback",
        nargs="?",
        const=True,
        default=None,
        metavar="PATH",
        help="Serve PATH (default: /index.html) with 200 when a file is not found",
    )
    parser.add_argument(
        "--header",
        dest="headers",
        action="append",
        type=parse_header,
        metavar="NAME:VALUE",
        help="Extra header added to every response (repeatable)",
    )
    parser.add_argument("--open", action="store_true", default=None, help="Open the browser once serving")
    parser.add_argument("--open-page", help="Page to open, e.g. /different/page")
    parser.add_argument("--quiet", action="store_true", help="Do not print the served address")
    parser.add_argument("--cert", help="TLS certificate (PEM); enables HTTPS together with --key")
    parser.add_argument("--key", help="TLS private key (PEM)")
    parser.add_argument("--ca", help="CA bundle (PEM) for HTTPS")
    parser.add_argument(
        "--strict-ranges",
        action="store_true",
        default=None,
        help="Include the last byte of a requested range in the body",
    )
    add_config_flag(parser)
    add_log_level_flag(parser)
    add_json_flag(parser)


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Translate parsed flags into config overrides (None = not given)."""
    overrides: Dict[str, Any] = {
        "content_base": list(args.roots) or None,
        "host": args.host,
        "port": args.port,
        "history_api_fallback": args.fallback,
        "headers": dict(args.headers) if args.headers else None,
        "open": args.open,
        "open_page": args.open_page,
        "verbose": False if args.quiet else None,
        "strict_ranges": args.strict_ranges,
    }
    if args.cert or args.key:
        overrides["https"] = {"cert": args.cert, "key": args.key, "ca": args.ca}
    return overrides


def main(args: argparse.Namespace) -> int:
    """Load config, configure logging and serve until terminated."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        manager = ConfigManager(Path.cwd(), config_path=args.config_path)
        cfg = manager.load_config(build_overrides(args))

        logging_cfg = cfg.get("logging") or {}
        log_path = logging_cfg.get("path")
        configure_logging(
            level=args.log_level or logging_cfg.get("level") or "WARNING",
            log_path=Path(log_path) if log_path else None,
        )

        run(to_serve_config(cfg))
    except (DevServeError, SchemaValidationError, OSError, yaml.YAMLError) as exc:
        formatter.error(exc, error_code="serve_error")
        return 1
    return 0
