"""
op compose list command.

SUMMARY: List available services and stacks
"""
from __future__ import annotations

import argparse

from opharness.cli import OutputFormatter, add_json_flag, add_workspace_flag, build_context
from opharness.core.compose import snapshot
from opharness.core.exceptions import OpError

SUMMARY = "List available services and stacks"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_workspace_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_context(args)
        data = snapshot(ctx.registry)

        if formatter.json_mode:
            formatter.json_output(data)
            return 0

        for kind in ("services", "stacks"):
            entries = data[kind]
            formatter.text(f"{kind.title()} ({len(entries)}):")
            for entry in entries.values():
                formatter.text(f"  {entry['name']:<20} {entry['source']:<10} {entry['path']}")
            formatter.text("")
        return 0
    except OpError as e:
        formatter.error(e, error_code="compose_error")
        return 1
