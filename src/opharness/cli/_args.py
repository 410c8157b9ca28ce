"""Common CLI argument registration and parsing helpers."""
from __future__ import annotations

import argparse
from typing import Dict, List, Optional, Sequence


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_workspace_flag(parser: argparse.ArgumentParser) -> None:
    """Add --workspace to override the workspace root (default ~/.op)."""
    parser.add_argument(
        "--workspace",
        type=str,
        help="Override workspace root (default: ~/.op, or OP_WORKSPACE)",
    )


def add_env_flag(parser: argparse.ArgumentParser) -> None:
    """Add repeatable -e/--env KEY=VALUE."""
    parser.add_argument(
        "-e",
        "--env",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Environment variable passed to compose (repeatable)",
    )


def parse_env_pairs(pairs: Optional[Sequence[str]]) -> Dict[str, str]:
    """Parse KEY=VALUE strings into a dict.

    Raises:
        ValueError: A pair has no ``=`` or an empty key
    """
    env: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid environment variable {pair!r}, expected KEY=VALUE")
        env[key.strip()] = value
    return env


def split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


__all__ = [
    "add_env_flag",
    "add_json_flag",
    "add_workspace_flag",
    "parse_env_pairs",
    "split_csv",
]
