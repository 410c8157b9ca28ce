"""
opharness CLI package.

Commands are auto-discovered from domain subfolders (run/, stop/, compose/).
Each command module exposes SUMMARY, register_args(parser) and main(args).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import (
    add_env_flag,
    add_json_flag,
    add_workspace_flag,
    parse_env_pairs,
    split_csv,
)
from ._utils import build_context

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_env_flag",
    "add_json_flag",
    "add_workspace_flag",
    "parse_env_pairs",
    "split_csv",
    # Utilities
    "build_context",
]
