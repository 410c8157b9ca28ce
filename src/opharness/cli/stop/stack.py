"""
op stop stack command.

SUMMARY: Stop and remove a stack
"""
from __future__ import annotations

import argparse

from opharness.cli import OutputFormatter, add_json_flag, add_workspace_flag, build_context
from opharness.core.exceptions import OpError

SUMMARY = "Stop and remove a stack"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Stack name")
    add_json_flag(parser)
    add_workspace_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        ctx = build_context(args)
        ctx.orchestrator.down(True, [args.name])
        formatter.success({"stack": args.name}, f"Stack {args.name} is down")
        return 0
    except (OpError, ValueError) as e:
        formatter.error(e, error_code="stop_error")
        return 1
