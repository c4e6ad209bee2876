"""
devserve CLI package.

Provides the command-line interface with auto-discovery of commands from
``commands/`` (top-level) and domain subfolders (``config/``).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
"""
from ._output import OutputFormatter
from ._args import add_config_flag, add_json_flag, add_log_level_flag

__all__ = [
    "OutputFormatter",
    "add_config_flag",
    "add_json_flag",
    "add_log_level_flag",
]
