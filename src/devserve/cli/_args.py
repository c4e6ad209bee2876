"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_config_flag(parser: argparse.ArgumentParser) -> None:
    """Add --config flag pointing at a project config file."""
    parser.add_argument(
        "--config",
        dest="config_path",
        type=str,
        help="Config file to use instead of ./devserve.yaml",
    )


def add_log_level_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level for devserve diagnostics on stderr (default: from config)",
    )


__all__ = ["add_json_flag", "add_config_flag", "add_log_level_flag"]
